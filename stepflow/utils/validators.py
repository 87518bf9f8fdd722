"""
数据验证工具
在运行调度前检查输入，以 (是否有效, 错误列表, 警告列表) 的形式报告问题

功能:
- 依赖边验证（自引用、重复、环、起始任务）
- 时长取值域验证
- 调度请求整体验证
- 依赖图连通性分析
"""

from typing import Any, Dict, Iterable, List, Set, Tuple
import networkx as nx

from stepflow.models.config_model import SchedulerConfig
from stepflow.models.task_model import to_edge_tuple


def _build_graph(edges: Iterable, tasks: Iterable = ()) -> nx.DiGraph:
    """构建用于分析的有向图（忽略非法边）"""
    graph = nx.DiGraph()
    graph.add_nodes_from(tasks)
    for edge in edges:
        pair = to_edge_tuple(edge)
        if not isinstance(pair, tuple) or len(pair) != 2:
            continue
        if pair[0] in (None, "") or pair[1] in (None, "") or pair[0] == pair[1]:
            continue
        graph.add_edge(*pair)
    return graph


def validate_edges(
    edges: Iterable,
    tasks: Iterable = ()
) -> Tuple[bool, List[str], List[str]]:
    """
    验证依赖边

    检查内容:
    - 边格式（二元组、端点非空）
    - 自引用
    - 重复边
    - 有向无环
    - 存在起始任务

    Args:
        edges: 依赖边
        tasks: 额外的孤立任务

    Returns:
        (是否有效, 错误列表, 警告列表)
    """
    errors = []
    warnings = []
    edges = list(edges)
    tasks = list(tasks)

    if not edges and not tasks:
        errors.append("没有任何任务")
        return False, errors, warnings

    # 1. 边格式、自引用与重复
    seen: Set[tuple] = set()
    for index, edge in enumerate(edges, start=1):
        pair = to_edge_tuple(edge)
        if not isinstance(pair, tuple) or len(pair) != 2:
            errors.append(f"第{index}条依赖边格式错误: {edge!r}")
            continue
        prerequisite, dependent = pair
        if prerequisite in (None, "") or dependent in (None, ""):
            errors.append(f"第{index}条依赖边存在空的任务标识符")
            continue
        if prerequisite == dependent:
            errors.append(f"任务'{prerequisite}'不能依赖自身")
            continue
        if pair in seen:
            errors.append(f"重复的依赖边: {prerequisite} -> {dependent}")
            continue
        seen.add(pair)

    # 2. 构建图并检查环
    graph = _build_graph(edges, tasks)

    if not nx.is_directed_acyclic_graph(graph):
        try:
            cycle = nx.find_cycle(graph)
            cycle_str = " -> ".join([f"{u}" for u, v in cycle])
            errors.append(f"依赖图存在循环依赖: {cycle_str}")
        except nx.NetworkXNoCycle:
            errors.append("依赖图存在循环依赖")

    # 3. 检查起始任务
    start_tasks = [n for n in graph.nodes() if graph.in_degree(n) == 0]
    if graph.number_of_nodes() > 0 and not start_tasks:
        errors.append("没有找到起始任务（所有任务都有前置依赖）")

    # 4. 孤立任务提示
    isolated = sorted(n for n in graph.nodes() if graph.degree(n) == 0)
    if isolated and edges:
        warnings.append(f"存在没有任何依赖关系的任务: {', '.join(map(str, isolated))}")

    is_valid = len(errors) == 0
    return is_valid, errors, warnings


def validate_duration_domain(
    tasks: Iterable,
    config: SchedulerConfig
) -> Tuple[bool, List[str]]:
    """
    验证任务是否都能计算时长

    串行模式下所有任务耗时为1，总是有效

    Args:
        tasks: 任务ID
        config: 调度配置

    Returns:
        (是否有效, 错误列表)
    """
    errors = []

    if config.is_sequential():
        return True, errors

    for task in sorted(tasks):
        if task in config.durations:
            continue
        if config.get_rank(task) is None:
            errors.append(f"任务'{task}'不在标识符字母表中，且没有配置显式时长")

    is_valid = len(errors) == 0
    return is_valid, errors


def validate_schedule_request(
    edges: Iterable,
    config: SchedulerConfig,
    tasks: Iterable = ()
) -> Tuple[bool, List[str], List[str]]:
    """
    验证调度请求

    Args:
        edges: 依赖边
        config: 调度配置
        tasks: 额外的孤立任务

    Returns:
        (是否有效, 错误列表, 警告列表)
    """
    all_errors = []
    all_warnings = []
    edges = list(edges)
    tasks = list(tasks)

    # 验证配置
    config_valid, config_errors, config_warnings = config.validate_config()
    all_errors.extend(config_errors)
    all_warnings.extend(config_warnings)

    # 验证依赖边
    edges_valid, edge_errors, edge_warnings = validate_edges(edges, tasks)
    all_errors.extend(edge_errors)
    all_warnings.extend(edge_warnings)

    # 验证时长取值域
    graph = _build_graph(edges, tasks)
    domain_valid, domain_errors = validate_duration_domain(graph.nodes(), config)
    all_errors.extend(domain_errors)

    # 工人数多于最大并行度时提示
    if not config.is_sequential() and graph.number_of_nodes() > 0 and edges_valid:
        width = max(len(group) for group in nx.topological_generations(graph))
        if config.num_workers > width:
            all_warnings.append(
                f"工人数量({config.num_workers})超过依赖图最宽一层的任务数({width})，"
                f"部分工人将始终空闲"
            )

    is_valid = len(all_errors) == 0
    return is_valid, all_errors, all_warnings


def check_graph_connectivity(edges: Iterable, tasks: Iterable = ()) -> Dict[str, Any]:
    """
    检查依赖图连通性

    Args:
        edges: 依赖边
        tasks: 额外的孤立任务

    Returns:
        连通性分析结果
    """
    graph = _build_graph(edges, tasks)

    # 弱连通分量
    weak_components = list(nx.weakly_connected_components(graph))

    # 查找孤立任务
    isolated = sorted(n for n in graph.nodes() if graph.degree(n) == 0)

    return {
        "is_connected": len(weak_components) == 1,
        "component_count": len(weak_components),
        "components": [sorted(c) for c in weak_components],
        "isolated_tasks": isolated
    }
