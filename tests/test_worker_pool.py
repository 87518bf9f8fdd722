"""
工人池单元测试
测试WorkerPool的核心功能

测试内容:
- 槽位分配与容量上限
- 逐tick推进与任务完成
- 工人状态跟踪
- 统计数据计算
"""

import pytest

from stepflow.core.exceptions import DurationError
from stepflow.core.worker_pool import WorkerPool
from stepflow.models.enums import WorkerState
from stepflow.models.worker_model import WorkerSlot, create_slots


class TestWorkerPool:
    """工人池测试类"""

    def test_pool_initialization(self):
        """测试工人池初始化"""
        pool = WorkerPool(4)

        assert len(pool.workers) == 4
        assert pool.idle_count() == 4
        assert pool.busy_count() == 0
        assert pool.all_idle()
        assert pool.get_worker_ids() == ["Worker_01", "Worker_02", "Worker_03", "Worker_04"]

    def test_invalid_capacity(self):
        """测试非法容量"""
        with pytest.raises(ValueError):
            WorkerPool(0)

    def test_claim_first_idle(self):
        """测试分配给第一个空闲槽位"""
        pool = WorkerPool(2)

        first = pool.claim("A", 3)
        second = pool.claim("B", 1)

        assert first.id == "Worker_01"
        assert second.id == "Worker_02"
        assert first.state == WorkerState.BUSY
        assert first.remaining_ticks == 3
        assert pool.busy_tasks() == ["A", "B"]

    def test_claim_when_full(self):
        """测试工人池满时无法分配"""
        pool = WorkerPool(1)

        assert pool.try_assign("A", 2)
        assert not pool.try_assign("B", 2)
        assert pool.claim("B", 2) is None
        assert pool.busy_count() == 1

    def test_claim_invalid_duration(self):
        """测试非正时长"""
        pool = WorkerPool(1)

        with pytest.raises(DurationError):
            pool.claim("A", 0)
        assert pool.all_idle()

    def test_reuse_after_release(self):
        """测试完成后槽位可再次分配"""
        pool = WorkerPool(1)
        pool.claim("A", 1)

        assert pool.advance_tick() == ["A"]
        assert pool.all_idle()

        worker = pool.claim("B", 1)
        assert worker.id == "Worker_01"


class TestAdvanceTick:
    """tick推进测试"""

    def test_countdown(self):
        """测试剩余时长递减"""
        pool = WorkerPool(1)
        pool.claim("C", 3)

        assert pool.advance_tick() == []
        assert pool.workers[0].remaining_ticks == 2
        assert pool.advance_tick() == []
        assert pool.advance_tick() == ["C"]
        assert pool.all_idle()

    def test_simultaneous_completion_slot_order(self):
        """测试同一tick完成的任务按槽位顺序返回"""
        pool = WorkerPool(3)
        pool.claim("Z", 2)
        pool.claim("B", 1)
        pool.claim("A", 2)

        assert pool.advance_tick() == ["B"]
        assert pool.advance_tick() == ["Z", "A"]

    def test_idle_workers_not_advanced(self):
        """测试空闲槽位不累计忙碌时间"""
        pool = WorkerPool(2)
        pool.claim("A", 2)

        pool.advance_tick()
        pool.advance_tick()

        assert pool.workers[0].busy_ticks == 2
        assert pool.workers[1].busy_ticks == 0


class TestWorkerStatistics:
    """工人统计测试"""

    def test_worker_stats(self):
        """测试工人统计数据"""
        pool = WorkerPool(2)
        pool.claim("A", 2)
        pool.advance_tick()
        pool.advance_tick()
        pool.claim("B", 1)
        pool.advance_tick()

        stats = pool.get_worker_stats(total_ticks=4)

        assert stats[0]["worker_id"] == "Worker_01"
        assert stats[0]["busy_ticks"] == 3
        assert stats[0]["tasks_completed"] == 2
        assert stats[0]["utilization_rate"] == 0.75
        assert stats[1]["busy_ticks"] == 0
        assert stats[1]["utilization_rate"] == 0.0

    def test_get_worker(self):
        """测试按ID获取工人"""
        pool = WorkerPool(3)

        assert pool.get_worker("Worker_02").id == "Worker_02"
        assert pool.get_worker("Worker_99") is None

    def test_reset_all_workers(self):
        """测试重置工人状态"""
        pool = WorkerPool(2)
        pool.claim("A", 2)
        pool.advance_tick()

        pool.reset_all_workers()

        assert pool.all_idle()
        assert all(w.busy_ticks == 0 for w in pool.workers)


class TestWorkerSlot:
    """工人槽位测试"""

    def test_slot_tick_when_idle(self):
        """测试空闲槽位推进"""
        slot = WorkerSlot(id="Worker_01")

        assert slot.tick() is None
        assert slot.busy_ticks == 0

    def test_slot_lifecycle(self):
        """测试槽位生命周期"""
        slot = WorkerSlot(id="Worker_01")
        slot.assign("D", 2)

        assert slot.is_busy()
        assert "busy=D" in str(slot)
        assert slot.tick() is None
        assert slot.tick() == "D"
        assert slot.is_idle()
        assert slot.task is None
        assert slot.tasks_completed == 1
        assert slot.to_dict()["state"] == "idle"

    def test_create_slots(self):
        """测试批量创建槽位"""
        slots = create_slots(3, prefix="Elf")

        assert [s.id for s in slots] == ["Elf_01", "Elf_02", "Elf_03"]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
