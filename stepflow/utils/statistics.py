"""
KPI统计计算工具
提供调度结果的统计分析功能

功能:
- 工人利用率统计
- 并行度统计（平均/峰值）
- 关键路径效率
- 综合KPI报告
"""

from typing import Any, Dict, List, Sequence
import numpy as np

from stepflow.models.result_model import ScheduleResult, WorkerUtilization


def calculate_utilization_rate(busy_ticks: int, total_ticks: int) -> float:
    """
    计算利用率

    Args:
        busy_ticks: 忙碌tick数
        total_ticks: 总tick数

    Returns:
        利用率（0-1）
    """
    if total_ticks <= 0:
        return 0.0
    return min(1.0, busy_ticks / total_ticks)


def calculate_parallelism(busy_per_tick: Sequence[int], capacity: int) -> Dict[str, Any]:
    """
    计算并行度统计

    Args:
        busy_per_tick: 每个tick的忙碌工人数
        capacity: 工人数量

    Returns:
        并行度统计字典
    """
    if len(busy_per_tick) == 0:
        return {
            "avg_parallelism": 0.0,
            "peak_parallelism": 0,
            "idle_worker_ticks": 0,
            "full_capacity_ticks": 0,
            "capacity_respected": True
        }

    busy = np.asarray(busy_per_tick, dtype=int)
    return {
        "avg_parallelism": float(busy.mean()),
        "peak_parallelism": int(busy.max()),
        "idle_worker_ticks": int((capacity - busy).sum()),
        "full_capacity_ticks": int(np.count_nonzero(busy == capacity)),
        "capacity_respected": bool((busy <= capacity).all())
    }


def calculate_worker_statistics(worker_stats: Sequence[WorkerUtilization]) -> Dict[str, Any]:
    """
    计算工人统计数据

    Args:
        worker_stats: 工人统计列表

    Returns:
        工人统计摘要
    """
    if not worker_stats:
        return {
            "count": 0,
            "total_busy_ticks": 0,
            "avg_utilization": 0,
            "details": []
        }

    utilization = np.array([w.utilization_rate for w in worker_stats], dtype=float)
    busy = np.array([w.busy_ticks for w in worker_stats], dtype=int)
    tasks = np.array([w.tasks_completed for w in worker_stats], dtype=int)

    return {
        "count": len(worker_stats),
        "total_busy_ticks": int(busy.sum()),
        "total_tasks_completed": int(tasks.sum()),
        "avg_tasks_per_worker": float(tasks.mean()),
        "avg_utilization": float(utilization.mean()),
        "max_utilization": float(utilization.max()),
        "min_utilization": float(utilization.min()),
        "avg_utilization_percentage": f"{utilization.mean() * 100:.1f}%",
        "details": [w.to_dict() for w in worker_stats]
    }


def calculate_critical_path_efficiency(total_ticks: int, critical_length: int) -> float:
    """
    计算关键路径效率

    关键路径时长是总耗时的下界，效率 = 下界 / 实际耗时

    Args:
        total_ticks: 实际总耗时
        critical_length: 关键路径时长

    Returns:
        效率（0-1）
    """
    if total_ticks <= 0:
        return 1.0
    return min(1.0, critical_length / total_ticks)


def find_idle_workers(worker_stats: Sequence[WorkerUtilization]) -> List[str]:
    """
    找出从未执行任务的工人

    Args:
        worker_stats: 工人统计列表

    Returns:
        工人ID列表
    """
    return [w.worker_id for w in worker_stats if w.tasks_completed == 0]


def generate_schedule_report(result: ScheduleResult, critical_length: int = 0) -> Dict[str, Any]:
    """
    生成调度KPI报告

    Args:
        result: 调度结果
        critical_length: 关键路径时长（调度前在原图上计算）

    Returns:
        KPI报告字典
    """
    return {
        "summary": {
            "run_id": result.run_id,
            "mode": result.mode.value,
            "status": result.status.value,
            "num_workers": result.num_workers,
            "task_count": result.task_count,
            "total_ticks": result.total_ticks,
            "completion_order": result.order_string
        },
        "parallelism": calculate_parallelism(result.busy_per_tick, result.num_workers),
        "workers": calculate_worker_statistics(result.worker_stats),
        "events": result.event_summary,
        "critical_path": {
            "length": critical_length,
            "efficiency": calculate_critical_path_efficiency(
                result.total_ticks, critical_length
            )
        },
        "idle_workers": find_idle_workers(result.worker_stats)
    }
