"""
事件收集器
收集调度过程中每个任务的执行事件，用于时间线展示和统计

功能:
- 记录任务领取与完成
- 按工人查询
- 汇总统计（写入调度结果和KPI报告）
"""

from typing import Any, Dict, List, Optional

from stepflow.models.timeline_model import TaskEvent


class EventCollector:
    """
    事件收集器

    任务被领取时登记开始tick，完成时生成 TaskEvent
    """

    def __init__(self):
        self.events: List[TaskEvent] = []
        self._pending: Dict[Any, tuple] = {}

    def record_start(self, task: Any, worker_id: str, tick: int):
        """
        登记任务开始

        Args:
            task: 任务ID
            worker_id: 工人ID
            tick: 领取时的tick计数
        """
        self._pending[task] = (worker_id, tick)

    def record_finish(self, task: Any, tick: int) -> Optional[TaskEvent]:
        """
        登记任务完成并生成事件

        Args:
            task: 任务ID
            tick: 完成tick

        Returns:
            生成的事件，未登记开始返回None
        """
        pending = self._pending.pop(task, None)
        if pending is None:
            return None
        worker_id, start_tick = pending
        event = TaskEvent(task=task, worker_id=worker_id, start_tick=start_tick, end_tick=tick)
        self.events.append(event)
        return event

    def get_all_events(self) -> List[TaskEvent]:
        """获取所有事件"""
        return self.events

    def get_events_by_worker(self, worker_id: str) -> List[TaskEvent]:
        """
        获取指定工人执行的事件

        Args:
            worker_id: 工人ID

        Returns:
            该工人的事件列表
        """
        return [e for e in self.events if e.worker_id == worker_id]

    def get_total_busy_ticks(self) -> int:
        """获取所有事件的tick总和"""
        return sum(e.duration for e in self.events)

    def get_summary(self) -> Dict[str, Any]:
        """
        获取事件汇总

        Returns:
            汇总信息字典
        """
        worker_ids = sorted(set(e.worker_id for e in self.events))
        return {
            "total_events": len(self.events),
            "total_busy_ticks": self.get_total_busy_ticks(),
            "worker_event_counts": {
                worker_id: len(self.get_events_by_worker(worker_id))
                for worker_id in worker_ids
            },
            "last_tick": max((e.end_tick for e in self.events), default=0)
        }
