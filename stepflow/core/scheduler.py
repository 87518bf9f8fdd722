"""
调度器主控
基于SimPy时钟的离散时间调度循环

功能:
- 每个tick计算就绪任务并按字典序分配给空闲工人
- 推进所有忙碌工人，完成的任务从依赖图中移除
- 图为空且所有工人空闲时结束（DONE）
- 检测环/死锁并中止（FAILED）

设计要点:
- 同一tick完成的任务在下一tick计算就绪集之前全部移除
- 执行中任务集合由调度器维护，防止同一任务被两个工人领取
- 只有一个SimPy进程，结果完全确定
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Generator, Iterable, List, Optional, Set
import simpy

from stepflow.core.dependency_graph import DependencyGraph
from stepflow.core.duration_model import (
    DurationModel,
    OrdinalDuration,
    UnitDuration,
    build_duration_model
)
from stepflow.core.event_collector import EventCollector
from stepflow.core.exceptions import SchedulerError, UnschedulableGraphError
from stepflow.core.worker_pool import WorkerPool
from stepflow.models.config_model import SchedulerConfig
from stepflow.models.enums import SchedulerState, SimulationMode
from stepflow.models.result_model import ScheduleResult, WorkerUtilization

logger = logging.getLogger(__name__)


class Scheduler:
    """
    调度器

    状态机: RUNNING -> DONE，出错时 RUNNING -> FAILED。
    每个实例只运行一次，运行会消耗传入的依赖图。
    """

    def __init__(
        self,
        graph: DependencyGraph,
        num_workers: int = 1,
        duration_model: Optional[DurationModel] = None,
        mode: Optional[SimulationMode] = None
    ):
        """
        初始化调度器

        Args:
            graph: 依赖图（运行时会被修改）
            num_workers: 工人数量
            duration_model: 时长模型，默认每个任务1个tick
            mode: 调度模式，仅用于结果标注
        """
        self.graph = graph
        self.pool = WorkerPool(num_workers)
        self.duration_model = duration_model or UnitDuration()
        if mode is None:
            sequential = num_workers == 1 and isinstance(self.duration_model, UnitDuration)
            mode = SimulationMode.SEQUENTIAL if sequential else SimulationMode.TIMED
        self.mode = mode
        self.event_collector = EventCollector()
        self.run_id = str(uuid.uuid4())

        # 运行状态
        self.state = SchedulerState.RUNNING
        self.tick = 0
        self.completion_order: List[Any] = []
        self.completion_ticks: Dict[Any, int] = {}
        self.start_ticks: Dict[Any, int] = {}
        self.in_progress: Set[Any] = set()
        self.busy_per_tick: List[int] = []
        self.remaining_per_tick: List[int] = []
        self.env: Optional[simpy.Environment] = None

    @classmethod
    def from_config(cls, graph: DependencyGraph, config: SchedulerConfig) -> "Scheduler":
        """
        根据配置创建调度器

        Args:
            graph: 依赖图
            config: 调度配置

        Returns:
            调度器
        """
        return cls(
            graph,
            num_workers=config.effective_workers,
            duration_model=build_duration_model(config),
            mode=config.mode
        )

    def run(self) -> ScheduleResult:
        """
        运行调度直到结束

        Returns:
            调度结果

        Raises:
            UnschedulableGraphError: 存在环或死锁
            SchedulerError: 其它调度错误
        """
        if self.state != SchedulerState.RUNNING or self.env is not None:
            raise SchedulerError("调度器只能运行一次")

        self.env = simpy.Environment()
        self.env.process(self._tick_loop())

        try:
            self.env.run()
        except SchedulerError as exc:
            self.state = SchedulerState.FAILED
            logger.error("调度失败 (tick=%d): %s", self.tick, exc)
            raise

        logger.info(
            "调度完成: %d 个任务, %d 个工人, 总耗时 %d ticks",
            len(self.completion_order), self.pool.capacity, self.tick
        )
        return self._collect_results()

    def is_done(self) -> bool:
        """判断是否满足结束条件（图为空且所有工人空闲）"""
        return self.graph.is_empty() and self.pool.all_idle()

    def _tick_loop(self) -> Generator:
        """
        离散时间调度循环

        每次迭代对应一个tick: 分配 -> 推进 -> 回收
        """
        while not self.is_done():
            self._assign_ready()

            if self.pool.all_idle():
                raise UnschedulableGraphError(self._deadlock_message())

            self.busy_per_tick.append(self.pool.busy_count())
            yield self.env.timeout(1)
            self.tick = int(self.env.now)

            self._retire(self.pool.advance_tick())
            self.remaining_per_tick.append(self.graph.node_count())

        self.state = SchedulerState.DONE

    def _assign_ready(self):
        """
        按字典序把就绪任务分配给空闲工人

        工人池满时停止，剩余就绪任务等待后续tick
        """
        for task in self.graph.ready_tasks():
            if task in self.in_progress:
                continue

            worker = self.pool.claim(task, self.duration_model.duration(task))
            if worker is None:
                break

            self.in_progress.add(task)
            self.start_ticks[task] = self.tick
            self.event_collector.record_start(task, worker.id, self.tick)

    def _retire(self, completed: Iterable[Any]):
        """
        回收本tick完成的任务

        Args:
            completed: 完成的任务ID
        """
        for task in completed:
            self.in_progress.discard(task)
            self.completion_order.append(task)
            self.completion_ticks[task] = self.tick
            self.graph.remove(task)
            self.event_collector.record_finish(task, self.tick)
            logger.debug("tick %d: 任务 %s 完成", self.tick, task)

    def _deadlock_message(self) -> str:
        """生成死锁诊断信息"""
        cycle = self.graph.find_cycle()
        if cycle:
            cycle_str = " -> ".join(str(t) for t in cycle + cycle[:1])
            return f"依赖图存在循环依赖: {cycle_str}"
        return f"剩余 {self.graph.node_count()} 个任务无法调度"

    def _collect_results(self) -> ScheduleResult:
        """
        收集调度结果

        Returns:
            不可变的调度结果
        """
        worker_stats = tuple(
            WorkerUtilization(
                worker_id=worker.id,
                total_ticks=self.tick,
                busy_ticks=worker.busy_ticks,
                tasks_completed=worker.tasks_completed
            )
            for worker in self.pool.workers
        )

        return ScheduleResult(
            run_id=self.run_id,
            status=self.state,
            mode=self.mode,
            num_workers=self.pool.capacity,
            total_ticks=self.tick,
            completion_order=tuple(self.completion_order),
            completion_ticks=dict(self.completion_ticks),
            start_ticks=dict(self.start_ticks),
            busy_per_tick=tuple(self.busy_per_tick),
            remaining_per_tick=tuple(self.remaining_per_tick),
            worker_stats=worker_stats,
            events=tuple(self.event_collector.get_all_events()),
            event_summary=self.event_collector.get_summary(),
            created_at=datetime.now().isoformat()
        )


# ============ 便捷入口 ============

def run_schedule(
    edges: Iterable,
    config: Optional[SchedulerConfig] = None,
    tasks: Iterable = ()
) -> ScheduleResult:
    """
    根据配置运行一次调度

    Args:
        edges: 依赖边
        config: 调度配置，默认使用 SchedulerConfig()
        tasks: 额外的孤立任务

    Returns:
        调度结果
    """
    config = config or SchedulerConfig()
    graph = DependencyGraph.from_edges(edges, tasks)
    return Scheduler.from_config(graph, config).run()


def completion_order(edges: Iterable, tasks: Iterable = ()) -> str:
    """
    串行模式完成顺序

    Args:
        edges: 依赖边
        tasks: 额外的孤立任务

    Returns:
        完成顺序拼接的字符串，如 "CABDFE"
    """
    return run_schedule(edges, SchedulerConfig.sequential(), tasks).order_string


def elapsed_ticks(
    edges: Iterable,
    num_workers: int = 5,
    duration_model: Optional[DurationModel] = None,
    tasks: Iterable = ()
) -> int:
    """
    计时模式总耗时

    Args:
        edges: 依赖边
        num_workers: 工人数量
        duration_model: 时长模型，默认 OrdinalDuration(60)
        tasks: 额外的孤立任务

    Returns:
        全部任务完成时的tick数
    """
    graph = DependencyGraph.from_edges(edges, tasks)
    scheduler = Scheduler(
        graph,
        num_workers=num_workers,
        duration_model=duration_model or OrdinalDuration(),
        mode=SimulationMode.TIMED
    )
    return scheduler.run().total_ticks
