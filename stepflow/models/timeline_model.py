"""
时间线事件模型
记录每个任务在哪个工人上、从哪个tick执行到哪个tick

功能:
- 事件属性定义
- 时长与执行区间判断
- 文本时间线渲染
"""

from typing import Any, List
from dataclasses import dataclass


@dataclass
class TaskEvent:
    """
    任务执行事件

    Attributes:
        task: 任务ID
        worker_id: 执行工人ID
        start_tick: 领取任务时的tick计数（任务首个工作tick为 start_tick + 1）
        end_tick: 完成tick
    """

    task: Any
    worker_id: str
    start_tick: int
    end_tick: int

    @property
    def duration(self) -> int:
        """
        事件时长（tick）

        Returns:
            时长
        """
        return self.end_tick - self.start_tick

    def is_active_at(self, tick: int) -> bool:
        """
        判断在指定tick是否处于执行中

        第 t 个tick覆盖区间 (t-1, t]

        Args:
            tick: tick编号（1起始）

        Returns:
            是否执行中
        """
        return self.start_tick < tick <= self.end_tick

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "task": self.task,
            "worker_id": self.worker_id,
            "start_tick": self.start_tick,
            "end_tick": self.end_tick,
            "duration": self.duration
        }


def render_timeline(events: List[TaskEvent], worker_ids: List[str], total_ticks: int) -> str:
    """
    渲染文本时间线

    每行一个tick，依次列出各工人正在执行的任务，空闲用 '.' 表示

    Args:
        events: 事件列表
        worker_ids: 工人ID列表（决定列顺序）
        total_ticks: 总tick数

    Returns:
        多行文本
    """
    lines = ["Tick  " + "  ".join(worker_ids)]
    for tick in range(1, total_ticks + 1):
        cells = []
        for worker_id in worker_ids:
            active = [
                e for e in events
                if e.worker_id == worker_id and e.is_active_at(tick)
            ]
            label = str(active[0].task) if active else "."
            cells.append(label.center(len(worker_id)))
        lines.append(f"{tick:<5} " + "  ".join(cells))
    return "\n".join(lines)
