"""
工人槽位模型
定义工人池中的单个槽位及其状态管理

功能:
- 槽位状态（Idle / Busy(task, remaining_ticks)）
- 逐tick推进剩余时长
- 工作时间和完成任务统计
"""

from typing import Any, Optional
from dataclasses import dataclass, field

from stepflow.models.enums import WorkerState


@dataclass
class WorkerSlot:
    """
    工人槽位模型

    同一时刻最多持有一个执行中的任务

    Attributes:
        id: 槽位唯一ID（如 Worker_01）
        state: 当前状态（IDLE/BUSY）
        task: 执行中的任务ID（仅BUSY时有效）
        remaining_ticks: 剩余tick数（BUSY时 > 0）
        busy_ticks: 累计忙碌tick数
        tasks_completed: 完成任务数
    """

    id: str
    state: WorkerState = field(default=WorkerState.IDLE)
    task: Optional[Any] = field(default=None)
    remaining_ticks: int = field(default=0)
    busy_ticks: int = field(default=0)
    tasks_completed: int = field(default=0)

    def is_idle(self) -> bool:
        """判断是否空闲"""
        return self.state == WorkerState.IDLE

    def is_busy(self) -> bool:
        """判断是否忙碌"""
        return self.state == WorkerState.BUSY

    def assign(self, task: Any, duration: int):
        """
        占用槽位执行任务

        Args:
            task: 任务ID
            duration: 任务时长（tick，≥1）
        """
        self.state = WorkerState.BUSY
        self.task = task
        self.remaining_ticks = duration

    def tick(self) -> Optional[Any]:
        """
        推进一个tick

        剩余时长归零时释放槽位

        Returns:
            本tick完成的任务ID，未完成或空闲返回None
        """
        if not self.is_busy():
            return None

        self.remaining_ticks -= 1
        self.busy_ticks += 1
        if self.remaining_ticks > 0:
            return None

        finished = self.task
        self.set_idle()
        self.tasks_completed += 1
        return finished

    def set_idle(self):
        """
        设置为空闲状态
        """
        self.state = WorkerState.IDLE
        self.task = None
        self.remaining_ticks = 0

    def reset(self):
        """
        重置槽位状态（用于新一轮调度）
        """
        self.set_idle()
        self.busy_ticks = 0
        self.tasks_completed = 0

    def get_utilization(self, total_ticks: int) -> float:
        """
        计算利用率

        Args:
            total_ticks: 总tick数

        Returns:
            利用率（0-1）
        """
        if total_ticks <= 0:
            return 0.0
        return min(self.busy_ticks / total_ticks, 1.0)

    def to_dict(self) -> dict:
        """
        转换为字典

        Returns:
            属性字典
        """
        return {
            "id": self.id,
            "state": self.state.value,
            "task": self.task,
            "remaining_ticks": self.remaining_ticks,
            "busy_ticks": self.busy_ticks,
            "tasks_completed": self.tasks_completed
        }

    def __str__(self) -> str:
        if self.is_busy():
            return f"Worker({self.id}, busy={self.task}, remaining={self.remaining_ticks})"
        return f"Worker({self.id}, idle)"

    def __repr__(self) -> str:
        return self.__str__()


def create_slots(count: int, prefix: str = "Worker") -> list:
    """
    批量创建工人槽位

    Args:
        count: 槽位数量
        prefix: ID前缀

    Returns:
        槽位列表
    """
    return [
        WorkerSlot(id=f"{prefix}_{i+1:02d}")
        for i in range(count)
    ]
