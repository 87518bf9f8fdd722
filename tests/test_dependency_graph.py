"""
依赖图单元测试
测试DependencyGraph的核心功能

测试内容:
- 图构建与非法边拒绝
- 就绪任务计算
- 任务移除
- 环检测
- 拓扑排序
- 关键路径计算
"""

import pytest

from stepflow.core.dependency_graph import DependencyGraph
from stepflow.core.duration_model import OrdinalDuration, UnitDuration
from stepflow.core.exceptions import MalformedEdge, UnknownTask
from stepflow.models.task_model import Edge


EXAMPLE_EDGES = [
    ("C", "A"),
    ("C", "F"),
    ("A", "B"),
    ("A", "D"),
    ("B", "E"),
    ("D", "E"),
    ("F", "E"),
]


class TestDependencyGraphBasic:
    """依赖图基础测试"""

    def test_empty_graph(self):
        """测试空图"""
        graph = DependencyGraph()

        assert graph.is_empty()
        assert len(graph) == 0
        assert graph.ready_tasks() == []

    def test_example_graph(self):
        """测试示例依赖图"""
        graph = DependencyGraph.from_edges(EXAMPLE_EDGES)

        assert graph.node_count() == 6
        assert graph.edge_count() == 7
        assert graph.tasks() == ["A", "B", "C", "D", "E", "F"]
        assert not graph.is_empty()

    def test_edge_models_accepted(self):
        """测试Edge模型作为输入"""
        edges = [Edge(prerequisite=p, dependent=d) for p, d in EXAMPLE_EDGES]
        graph = DependencyGraph(edges)

        assert graph.edge_count() == 7
        assert ("C", "A") in graph.edges()

    def test_isolated_tasks(self):
        """测试孤立任务"""
        graph = DependencyGraph([("A", "B")], tasks=["Z"])

        assert "Z" in graph
        assert graph.ready_tasks() == ["A", "Z"]

    def test_neighbours(self):
        """测试前置/后续任务查询"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        assert graph.predecessors("E") == ["B", "D", "F"]
        assert graph.successors("C") == ["A", "F"]
        assert graph.predecessors("missing") == []


class TestMalformedEdges:
    """非法边测试"""

    def test_self_loop(self):
        """测试自引用"""
        with pytest.raises(MalformedEdge):
            DependencyGraph([("A", "A")])

    def test_duplicate_edge(self):
        """测试重复边"""
        with pytest.raises(MalformedEdge):
            DependencyGraph([("A", "B"), ("A", "B")])

    def test_not_a_pair(self):
        """测试非二元组"""
        with pytest.raises(MalformedEdge):
            DependencyGraph([("A", "B", "C")])
        with pytest.raises(MalformedEdge):
            DependencyGraph(["AB"])

    def test_empty_endpoint(self):
        """测试空端点"""
        with pytest.raises(MalformedEdge):
            DependencyGraph([("A", "")])
        with pytest.raises(MalformedEdge):
            DependencyGraph([(None, "B")])


class TestReadyTasks:
    """就绪任务测试"""

    def test_initial_ready(self):
        """测试初始就绪任务"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        assert graph.ready_tasks() == ["C"]
        assert graph.is_ready("C")
        assert not graph.is_ready("A")

    def test_ready_after_removal(self):
        """测试移除后的就绪任务"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        graph.remove("C")
        assert graph.ready_tasks() == ["A", "F"]  # sorted ascending

        graph.remove("A")
        assert graph.ready_tasks() == ["B", "D", "F"]

        graph.remove("B")
        graph.remove("D")
        assert graph.ready_tasks() == ["F"]  # E still waits on F

        graph.remove("F")
        assert graph.ready_tasks() == ["E"]

    def test_ready_is_sorted(self):
        """测试就绪任务按标识符升序"""
        graph = DependencyGraph(tasks=["Q", "B", "X", "A"])

        assert graph.ready_tasks() == ["A", "B", "Q", "X"]


class TestRemove:
    """任务移除测试"""

    def test_remove_drops_edges(self):
        """测试移除节点同时删除关联边"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        graph.remove("A")

        assert "A" not in graph
        assert graph.edge_count() == 4
        assert ("A", "B") not in graph.edges()
        assert ("C", "A") not in graph.edges()

    def test_remove_unknown(self):
        """测试移除不存在的任务"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        with pytest.raises(UnknownTask):
            graph.remove("Z")

    def test_remove_twice(self):
        """测试重复移除"""
        graph = DependencyGraph(EXAMPLE_EDGES)
        graph.remove("C")

        with pytest.raises(UnknownTask):
            graph.remove("C")

    def test_copy_is_independent(self):
        """测试复制后互不影响"""
        graph = DependencyGraph(EXAMPLE_EDGES)
        clone = graph.copy()

        clone.remove("C")

        assert "C" in graph
        assert len(graph) == 6
        assert len(clone) == 5


class TestCycleDetection:
    """环检测测试"""

    def test_two_node_cycle(self):
        """测试两节点环"""
        graph = DependencyGraph([("X", "Y"), ("Y", "X")])

        cycle = graph.find_cycle()
        assert cycle is not None
        assert set(cycle) == {"X", "Y"}
        assert not graph.is_acyclic()
        assert graph.ready_tasks() == []

    def test_acyclic(self):
        """测试无环图"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        assert graph.find_cycle() is None
        assert graph.is_acyclic()


class TestTopologicalOrder:
    """拓扑排序测试"""

    def test_lexicographic_order(self):
        """测试字典序拓扑排序"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        assert graph.topological_order() == list("CABDFE")

    def test_cycle_has_no_order(self):
        """测试有环时返回空列表"""
        graph = DependencyGraph([("X", "Y"), ("Y", "X")])

        assert graph.topological_order() == []


class TestCriticalPath:
    """关键路径测试"""

    def test_example_critical_path(self):
        """测试示例关键路径"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        # C(3) -> F(6) -> E(5)
        path, length = graph.critical_path(OrdinalDuration(base_offset=0))

        assert path == ["C", "F", "E"]
        assert length == 14

    def test_unit_critical_path(self):
        """测试单位时长的关键路径"""
        graph = DependencyGraph(EXAMPLE_EDGES)

        path, length = graph.critical_path(UnitDuration())

        assert length == 4
        assert path[0] == "C"
        assert path[-1] == "E"

    def test_empty_critical_path(self):
        """测试空图关键路径"""
        assert DependencyGraph().critical_path(UnitDuration()) == ([], 0)
