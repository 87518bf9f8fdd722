"""
工人池管理器
管理固定容量的工人槽位

功能:
- 将任务分配给第一个空闲槽位
- 逐tick推进所有忙碌槽位，收集完成的任务
- 工人状态跟踪与统计

设计要点:
- 槽位顺序固定，同一tick内完成的任务按槽位顺序返回
- 同一任务不能被两个槽位持有，由调度器在分配前检查
"""

import logging
from typing import Any, Dict, List, Optional

from stepflow.core.exceptions import DurationError
from stepflow.models.worker_model import WorkerSlot, create_slots

logger = logging.getLogger(__name__)


class WorkerPool:
    """
    工人池管理器

    容量在构造时确定，所有槽位初始为空闲
    """

    def __init__(self, capacity: int):
        """
        初始化工人池

        Args:
            capacity: 工人数量（≥1）
        """
        if capacity < 1:
            raise ValueError(f"工人数量必须大于0: {capacity}")
        self.capacity = capacity
        self.workers: List[WorkerSlot] = create_slots(capacity)

    def claim(self, task: Any, duration: int) -> Optional[WorkerSlot]:
        """
        为任务占用第一个空闲槽位

        Args:
            task: 任务ID
            duration: 任务时长（tick）

        Returns:
            占用的槽位，无空闲槽位返回None

        Raises:
            DurationError: 时长不是正整数
        """
        if duration < 1:
            raise DurationError(f"任务 '{task}' 的时长必须大于0: {duration}")

        for worker in self.workers:
            if worker.is_idle():
                worker.assign(task, duration)
                logger.debug("%s 领取任务 %s（%d ticks）", worker.id, task, duration)
                return worker
        return None

    def try_assign(self, task: Any, duration: int) -> bool:
        """
        尝试分配任务

        Args:
            task: 任务ID
            duration: 任务时长（tick）

        Returns:
            是否分配成功
        """
        return self.claim(task, duration) is not None

    def advance_tick(self) -> List[Any]:
        """
        所有忙碌槽位推进一个tick

        Returns:
            本tick完成的任务ID列表（按槽位顺序）
        """
        completed = []
        for worker in self.workers:
            finished = worker.tick()
            if finished is not None:
                completed.append(finished)
        return completed

    def all_idle(self) -> bool:
        """判断是否所有工人都空闲"""
        return all(w.is_idle() for w in self.workers)

    def busy_count(self) -> int:
        """
        获取当前忙碌工人数量

        Returns:
            忙碌工人数量
        """
        return sum(1 for w in self.workers if w.is_busy())

    def idle_count(self) -> int:
        """
        获取当前空闲工人数量

        Returns:
            空闲工人数量
        """
        return sum(1 for w in self.workers if w.is_idle())

    def busy_tasks(self) -> List[Any]:
        """获取所有执行中的任务"""
        return [w.task for w in self.workers if w.is_busy()]

    def get_worker(self, worker_id: str) -> Optional[WorkerSlot]:
        """
        获取指定工人

        Args:
            worker_id: 工人ID

        Returns:
            工人槽位，不存在返回None
        """
        for worker in self.workers:
            if worker.id == worker_id:
                return worker
        return None

    def get_worker_ids(self) -> List[str]:
        """获取所有工人ID"""
        return [w.id for w in self.workers]

    def get_worker_stats(self, total_ticks: int = 0) -> List[Dict]:
        """
        获取所有工人的统计数据

        Args:
            total_ticks: 总tick数（用于计算利用率）

        Returns:
            工人统计列表
        """
        return [
            {
                "worker_id": worker.id,
                "state": worker.state.value,
                "busy_ticks": worker.busy_ticks,
                "tasks_completed": worker.tasks_completed,
                "utilization_rate": worker.get_utilization(total_ticks)
            }
            for worker in self.workers
        ]

    def reset_all_workers(self):
        """
        重置所有工人状态（用于新一轮调度）
        """
        for worker in self.workers:
            worker.reset()
