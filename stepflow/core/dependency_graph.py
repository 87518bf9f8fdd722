"""
依赖图
使用NetworkX管理任务之间的"必须先完成"关系

功能:
- 从依赖边列表构建有向图（拒绝非法边）
- 就绪任务识别（入度为0，按标识符升序）
- 任务完成后移除节点及其所有关联边
- 环检测、字典序拓扑排序、关键路径
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple
import networkx as nx

from stepflow.core.exceptions import MalformedEdge, UnknownTask
from stepflow.models.task_model import to_edge_tuple

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    依赖图

    使用NetworkX DiGraph保存任务及依赖关系，边从前置任务指向后续任务。
    节点集合随任务完成单调缩小。
    """

    def __init__(self, edges: Iterable = (), tasks: Iterable = ()):
        """
        初始化依赖图

        Args:
            edges: (prerequisite, dependent) 元组或 Edge 模型的可迭代对象
            tasks: 额外的孤立任务

        Raises:
            MalformedEdge: 存在自引用、重复或格式错误的边
        """
        self.graph = nx.DiGraph()

        for task in tasks:
            self._check_endpoint(task, task)
            self.graph.add_node(task)

        for edge in edges:
            prerequisite, dependent = self._check_edge(edge)
            if self.graph.has_edge(prerequisite, dependent):
                raise MalformedEdge(f"重复的依赖边: {prerequisite} -> {dependent}")
            self.graph.add_edge(prerequisite, dependent)

        logger.debug(
            "依赖图构建完成: %d 个任务, %d 条边",
            self.graph.number_of_nodes(),
            self.graph.number_of_edges()
        )

    @classmethod
    def from_edges(cls, edges: Iterable, tasks: Iterable = ()) -> "DependencyGraph":
        """由依赖边列表构建"""
        return cls(edges, tasks)

    def _check_edge(self, edge: Any) -> Tuple[Any, Any]:
        """
        校验单条依赖边

        Args:
            edge: 待校验的边

        Returns:
            (prerequisite, dependent)
        """
        pair = to_edge_tuple(edge)
        if not isinstance(pair, tuple) or len(pair) != 2:
            raise MalformedEdge(f"依赖边必须是 (prerequisite, dependent) 二元组: {edge!r}")

        prerequisite, dependent = pair
        self._check_endpoint(prerequisite, edge)
        self._check_endpoint(dependent, edge)
        if prerequisite == dependent:
            raise MalformedEdge(f"依赖边不能自引用: {prerequisite} -> {dependent}")
        return prerequisite, dependent

    @staticmethod
    def _check_endpoint(task: Any, edge: Any):
        if task is None or task == "":
            raise MalformedEdge(f"任务标识符不能为空: {edge!r}")

    # ============ 就绪查询 ============

    def ready_tasks(self) -> List[Any]:
        """
        获取就绪任务（图中入度为0的任务）

        Returns:
            按标识符升序排列的任务列表
        """
        return sorted(n for n in self.graph.nodes() if self.graph.in_degree(n) == 0)

    def is_ready(self, task: Any) -> bool:
        """判断任务是否就绪"""
        return task in self.graph and self.graph.in_degree(task) == 0

    # ============ 变更 ============

    def remove(self, task: Any):
        """
        移除已完成的任务及其所有关联边

        Args:
            task: 任务ID

        Raises:
            UnknownTask: 任务不在图中
        """
        if task not in self.graph:
            raise UnknownTask(f"任务 '{task}' 不在依赖图中")
        self.graph.remove_node(task)

    def is_empty(self) -> bool:
        """判断图是否为空"""
        return self.graph.number_of_nodes() == 0

    def copy(self) -> "DependencyGraph":
        """复制依赖图（调度会修改原图）"""
        clone = DependencyGraph()
        clone.graph = self.graph.copy()
        return clone

    # ============ 查询 ============

    def tasks(self) -> List[Any]:
        """获取所有任务ID（升序）"""
        return sorted(self.graph.nodes())

    def edges(self) -> List[Tuple[Any, Any]]:
        """获取所有依赖边"""
        return list(self.graph.edges())

    def node_count(self) -> int:
        """获取任务数量"""
        return self.graph.number_of_nodes()

    def edge_count(self) -> int:
        """获取依赖边数量"""
        return self.graph.number_of_edges()

    def predecessors(self, task: Any) -> List[Any]:
        """获取任务的前置任务"""
        if task not in self.graph:
            return []
        return sorted(self.graph.predecessors(task))

    def successors(self, task: Any) -> List[Any]:
        """获取任务的后续任务"""
        if task not in self.graph:
            return []
        return sorted(self.graph.successors(task))

    def find_cycle(self) -> Optional[List[Any]]:
        """
        查找一个环

        Returns:
            环上的任务序列，无环返回None
        """
        try:
            cycle = nx.find_cycle(self.graph)
        except nx.NetworkXNoCycle:
            return None
        return [u for u, v in cycle]

    def is_acyclic(self) -> bool:
        """判断是否为有向无环图"""
        return nx.is_directed_acyclic_graph(self.graph)

    def topological_order(self) -> List[Any]:
        """
        获取字典序最小的拓扑排序

        与单工人串行调度的完成顺序一致

        Returns:
            拓扑序；存在环时返回空列表
        """
        try:
            return list(nx.lexicographical_topological_sort(self.graph))
        except nx.NetworkXUnfeasible:
            return []

    def critical_path(self, duration_model) -> Tuple[List[Any], int]:
        """
        获取关键路径和时长

        关键路径时长是任意工人数下总耗时的下界

        Args:
            duration_model: 时长模型

        Returns:
            (关键路径任务列表, 路径总时长)
        """
        if self.is_empty() or not self.is_acyclic():
            return [], 0

        finish = {}
        best_pred = {}
        for task in nx.topological_sort(self.graph):
            preds = list(self.graph.predecessors(task))
            start = 0
            if preds:
                best = max(preds, key=lambda p: (finish[p], p))
                best_pred[task] = best
                start = finish[best]
            finish[task] = start + duration_model.duration(task)

        end_task = max(finish, key=lambda t: (finish[t], t))
        path = [end_task]
        while path[0] in best_pred:
            path.insert(0, best_pred[path[0]])
        return path, finish[end_task]

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __contains__(self, task: Any) -> bool:
        return task in self.graph

    def __repr__(self) -> str:
        return f"DependencyGraph(tasks={self.node_count()}, edges={self.edge_count()})"
