"""
核心调度模块包
包含依赖图、时长模型、工人池和调度主控

模块说明:
- dependency_graph.py: 依赖图（NetworkX）
- duration_model.py: 任务时长模型
- worker_pool.py: 固定容量工人池
- scheduler.py: 调度主控（SimPy时钟）
- event_collector.py: 事件收集器（时间线数据源）
- exceptions.py: 调度异常
"""

from stepflow.core.exceptions import (
    SchedulerError,
    MalformedEdge,
    UnknownTask,
    UnschedulableGraphError,
    DurationError,
)
from stepflow.core.dependency_graph import DependencyGraph
from stepflow.core.duration_model import (
    DurationModel,
    UnitDuration,
    OrdinalDuration,
    MappingDuration,
    build_duration_model,
)
from stepflow.core.worker_pool import WorkerPool
from stepflow.core.event_collector import EventCollector
from stepflow.core.scheduler import (
    Scheduler,
    run_schedule,
    completion_order,
    elapsed_ticks,
)

__all__ = [
    "SchedulerError",
    "MalformedEdge",
    "UnknownTask",
    "UnschedulableGraphError",
    "DurationError",
    "DependencyGraph",
    "DurationModel",
    "UnitDuration",
    "OrdinalDuration",
    "MappingDuration",
    "build_duration_model",
    "WorkerPool",
    "EventCollector",
    "Scheduler",
    "run_schedule",
    "completion_order",
    "elapsed_ticks",
]
