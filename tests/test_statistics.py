"""
统计与时间线测试

测试内容:
- 利用率与并行度计算
- 工人统计汇总
- 调度KPI报告
- 事件收集器与文本时间线
"""

import pytest

from stepflow.core.dependency_graph import DependencyGraph
from stepflow.core.duration_model import OrdinalDuration
from stepflow.core.event_collector import EventCollector
from stepflow.core.scheduler import run_schedule
from stepflow.models.config_model import SchedulerConfig
from stepflow.models.result_model import ScheduleResultModel, WorkerUtilization
from stepflow.models.timeline_model import TaskEvent, render_timeline
from stepflow.utils.statistics import (
    calculate_critical_path_efficiency,
    calculate_parallelism,
    calculate_utilization_rate,
    calculate_worker_statistics,
    find_idle_workers,
    generate_schedule_report
)


EXAMPLE_EDGES = [
    ("C", "A"),
    ("C", "F"),
    ("A", "B"),
    ("A", "D"),
    ("B", "E"),
    ("D", "E"),
    ("F", "E"),
]


def run_timed_example():
    """运行示例（2个工人，偏移量0）"""
    return run_schedule(EXAMPLE_EDGES, SchedulerConfig.timed(num_workers=2, base_offset=0))


class TestBasicStatistics:
    """基础统计测试"""

    def test_utilization_rate(self):
        """测试利用率"""
        assert calculate_utilization_rate(5, 10) == 0.5
        assert calculate_utilization_rate(5, 0) == 0.0
        assert calculate_utilization_rate(12, 10) == 1.0

    def test_parallelism(self):
        """测试并行度"""
        stats = calculate_parallelism([1, 2, 2], capacity=2)

        assert stats["avg_parallelism"] == pytest.approx(5 / 3)
        assert stats["peak_parallelism"] == 2
        assert stats["idle_worker_ticks"] == 1
        assert stats["full_capacity_ticks"] == 2
        assert stats["capacity_respected"]

    def test_parallelism_empty(self):
        """测试空序列"""
        stats = calculate_parallelism([], capacity=3)

        assert stats["avg_parallelism"] == 0.0
        assert stats["capacity_respected"]

    def test_critical_path_efficiency(self):
        """测试关键路径效率"""
        assert calculate_critical_path_efficiency(15, 14) == pytest.approx(14 / 15)
        assert calculate_critical_path_efficiency(0, 0) == 1.0

    def test_worker_statistics(self):
        """测试工人统计汇总"""
        stats = [
            WorkerUtilization(worker_id="Worker_01", total_ticks=10, busy_ticks=10, tasks_completed=3),
            WorkerUtilization(worker_id="Worker_02", total_ticks=10, busy_ticks=5, tasks_completed=1),
            WorkerUtilization(worker_id="Worker_03", total_ticks=10, busy_ticks=0),
        ]

        summary = calculate_worker_statistics(stats)

        assert summary["count"] == 3
        assert summary["total_busy_ticks"] == 15
        assert summary["total_tasks_completed"] == 4
        assert summary["avg_utilization"] == pytest.approx(0.5)
        assert summary["max_utilization"] == 1.0
        assert summary["min_utilization"] == 0.0
        assert find_idle_workers(stats) == ["Worker_03"]

    def test_worker_utilization_post_init(self):
        """测试利用率自动计算"""
        stat = WorkerUtilization(worker_id="Worker_01", total_ticks=8, busy_ticks=6)

        assert stat.utilization_rate == 0.75
        assert stat.idle_ticks == 2
        assert stat.utilization_percent == 75.0


class TestScheduleReport:
    """调度报告测试"""

    def test_report_for_example(self):
        """测试示例调度报告"""
        result = run_timed_example()
        _, critical_length = DependencyGraph(EXAMPLE_EDGES).critical_path(
            OrdinalDuration(base_offset=0)
        )

        report = generate_schedule_report(result, critical_length)

        assert report["summary"]["total_ticks"] == 15
        assert report["summary"]["task_count"] == 6
        assert report["summary"]["mode"] == "timed"
        assert report["parallelism"]["peak_parallelism"] == 2
        assert report["parallelism"]["capacity_respected"]
        assert report["workers"]["total_busy_ticks"] == 21
        assert report["critical_path"]["length"] == 14
        assert report["idle_workers"] == []
        assert report["events"]["total_events"] == 6
        assert report["events"]["worker_event_counts"] == {"Worker_01": 5, "Worker_02": 1}

    def test_result_model(self):
        """测试Pydantic结果模型"""
        result = run_timed_example()
        model = ScheduleResultModel.from_result(result)

        assert model.total_ticks == 15
        assert model.order_string == "CABFDE"
        assert model.completion_ticks["E"] == 15
        assert len(model.events) == 6


class TestEventCollector:
    """事件收集器测试"""

    def test_record_start_finish(self):
        """测试登记开始与完成"""
        collector = EventCollector()
        collector.record_start("A", "Worker_01", 0)

        assert collector.get_all_events() == []

        event = collector.record_finish("A", 3)

        assert event.duration == 3
        assert collector.get_all_events() == [event]

    def test_finish_without_start(self):
        """测试未登记开始的完成"""
        collector = EventCollector()

        assert collector.record_finish("A", 3) is None
        assert collector.get_all_events() == []

    def test_summary(self):
        """测试事件汇总"""
        collector = EventCollector()
        collector.record_start("A", "Worker_01", 0)
        collector.record_start("B", "Worker_02", 0)
        collector.record_finish("A", 2)
        collector.record_start("C", "Worker_01", 2)
        collector.record_finish("C", 4)
        collector.record_finish("B", 5)

        assert len(collector.get_events_by_worker("Worker_01")) == 2
        assert collector.get_total_busy_ticks() == 9

        summary = collector.get_summary()
        assert summary["total_events"] == 3
        assert summary["last_tick"] == 5
        assert summary["worker_event_counts"] == {"Worker_01": 2, "Worker_02": 1}

    def test_empty_summary(self):
        """测试无事件时的汇总"""
        summary = EventCollector().get_summary()

        assert summary["total_events"] == 0
        assert summary["last_tick"] == 0


class TestTimeline:
    """文本时间线测试"""

    def test_event_active_interval(self):
        """测试事件执行区间"""
        event = TaskEvent("C", "Worker_01", 0, 3)

        assert not event.is_active_at(0)
        assert event.is_active_at(1)
        assert event.is_active_at(3)
        assert not event.is_active_at(4)

    def test_render_timeline(self):
        """测试时间线渲染"""
        result = run_timed_example()
        worker_ids = [w.worker_id for w in result.worker_stats]

        text = render_timeline(list(result.events), worker_ids, result.total_ticks)
        lines = text.splitlines()

        assert len(lines) == 16
        assert "Worker_01" in lines[0]
        # tick 1: C on the first worker, second worker idle
        assert lines[1].split() == ["1", "C", "."]
        # tick 4: A and F run in parallel
        assert lines[4].split() == ["4", "A", "F"]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
