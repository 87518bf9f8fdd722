"""
调度结果模型
定义调度运行结束后的结果数据结构

模型:
- WorkerUtilization: 工人利用率统计
- ScheduleResult: 完整调度结果（运行结束后不可变）
- ScheduleResultModel: API用Pydantic版本
"""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from pydantic import BaseModel, Field

from stepflow.models.enums import SchedulerState, SimulationMode
from stepflow.models.timeline_model import TaskEvent


@dataclass
class WorkerUtilization:
    """
    工人利用率统计

    Attributes:
        worker_id: 工人ID
        total_ticks: 总tick数
        busy_ticks: 忙碌tick数
        idle_ticks: 空闲tick数
        utilization_rate: 利用率（0-1）
        tasks_completed: 完成任务数
    """

    worker_id: str
    total_ticks: int
    busy_ticks: int
    idle_ticks: int = 0
    utilization_rate: float = 0
    tasks_completed: int = 0

    def __post_init__(self):
        """计算利用率和空闲时间"""
        if self.total_ticks > 0:
            if self.utilization_rate == 0:
                self.utilization_rate = self.busy_ticks / self.total_ticks
            if self.idle_ticks == 0:
                self.idle_ticks = self.total_ticks - self.busy_ticks

    @property
    def utilization_percent(self) -> float:
        """利用率百分比"""
        return self.utilization_rate * 100

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "worker_id": self.worker_id,
            "total_ticks": self.total_ticks,
            "busy_ticks": self.busy_ticks,
            "idle_ticks": self.idle_ticks,
            "utilization_rate": self.utilization_rate,
            "tasks_completed": self.tasks_completed
        }


@dataclass(frozen=True)
class ScheduleResult:
    """
    调度结果

    Attributes:
        run_id: 运行ID
        status: 调度器最终状态
        mode: 调度模式
        num_workers: 工人数量
        total_ticks: 总耗时（tick）
        completion_order: 完成顺序
        completion_ticks: 任务 -> 完成tick
        start_ticks: 任务 -> 领取tick
        busy_per_tick: 每个tick的忙碌工人数
        remaining_per_tick: 每个tick结束时图中剩余任务数
        worker_stats: 工人统计列表
        events: 任务执行事件列表
        event_summary: 事件汇总（事件数、忙碌tick、各工人事件数）
        created_at: 创建时间
    """

    run_id: str = ""
    status: SchedulerState = SchedulerState.DONE
    mode: SimulationMode = SimulationMode.TIMED
    num_workers: int = 1
    total_ticks: int = 0
    completion_order: Tuple[Any, ...] = ()
    completion_ticks: Dict[Any, int] = field(default_factory=dict)
    start_ticks: Dict[Any, int] = field(default_factory=dict)
    busy_per_tick: Tuple[int, ...] = ()
    remaining_per_tick: Tuple[int, ...] = ()
    worker_stats: Tuple[WorkerUtilization, ...] = ()
    events: Tuple[TaskEvent, ...] = ()
    event_summary: Dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    @property
    def order_string(self) -> str:
        """完成顺序拼接成的字符串"""
        return "".join(str(task) for task in self.completion_order)

    @property
    def task_count(self) -> int:
        """完成任务数"""
        return len(self.completion_order)

    @property
    def avg_worker_utilization(self) -> float:
        """平均工人利用率"""
        if not self.worker_stats:
            return 0
        return sum(w.utilization_rate for w in self.worker_stats) / len(self.worker_stats)

    def get_worker_stat(self, worker_id: str) -> Optional[WorkerUtilization]:
        """获取指定工人的统计数据"""
        for stat in self.worker_stats:
            if stat.worker_id == worker_id:
                return stat
        return None

    def get_event(self, task: Any) -> Optional[TaskEvent]:
        """获取指定任务的执行事件"""
        for event in self.events:
            if event.task == task:
                return event
        return None

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "mode": self.mode.value,
            "num_workers": self.num_workers,
            "total_ticks": self.total_ticks,
            "completion_order": list(self.completion_order),
            "order_string": self.order_string,
            "completion_ticks": dict(self.completion_ticks),
            "start_ticks": dict(self.start_ticks),
            "avg_worker_utilization": self.avg_worker_utilization,
            "worker_stats": [w.to_dict() for w in self.worker_stats],
            "events": [e.to_dict() for e in self.events],
            "event_summary": dict(self.event_summary),
            "created_at": self.created_at
        }


# Pydantic版本（用于API）
class WorkerUtilizationModel(BaseModel):
    """工人利用率模型（Pydantic）"""
    worker_id: str = Field(description="工人ID")
    total_ticks: int = Field(description="总tick数")
    busy_ticks: int = Field(description="忙碌tick数")
    idle_ticks: int = Field(default=0, description="空闲tick数")
    utilization_rate: float = Field(description="利用率")
    tasks_completed: int = Field(default=0, description="完成任务数")


class TaskEventModel(BaseModel):
    """任务执行事件模型（Pydantic）"""
    task: str = Field(description="任务ID")
    worker_id: str = Field(description="工人ID")
    start_tick: int = Field(description="领取tick")
    end_tick: int = Field(description="完成tick")
    duration: int = Field(description="时长")


class ScheduleResultModel(BaseModel):
    """调度结果模型（Pydantic）"""
    run_id: str = Field(description="运行ID")
    status: str = Field(description="调度状态")
    mode: str = Field(description="调度模式")
    num_workers: int = Field(description="工人数量")
    total_ticks: int = Field(description="总耗时（tick）")
    order_string: str = Field(description="完成顺序")
    completion_ticks: Dict[str, int] = Field(default={}, description="任务完成tick")
    worker_stats: List[WorkerUtilizationModel] = Field(default=[], description="工人统计")
    events: List[TaskEventModel] = Field(default=[], description="执行事件")
    created_at: str = Field(description="创建时间")

    @classmethod
    def from_result(cls, result: ScheduleResult) -> "ScheduleResultModel":
        """
        由调度结果转换

        Args:
            result: 调度结果

        Returns:
            Pydantic模型
        """
        return cls(
            run_id=result.run_id,
            status=result.status.value,
            mode=result.mode.value,
            num_workers=result.num_workers,
            total_ticks=result.total_ticks,
            order_string=result.order_string,
            completion_ticks={str(k): v for k, v in result.completion_ticks.items()},
            worker_stats=[WorkerUtilizationModel(**w.to_dict()) for w in result.worker_stats],
            events=[
                TaskEventModel(**{**e.to_dict(), "task": str(e.task)})
                for e in result.events
            ],
            created_at=result.created_at
        )
