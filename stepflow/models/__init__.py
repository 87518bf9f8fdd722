"""
数据模型包
包含系统中使用的所有数据模型

模块说明:
- enums.py: 枚举定义（WorkerState, SchedulerState, SimulationMode）
- config_model.py: 调度配置模型
- task_model.py: 依赖边模型
- worker_model.py: 工人槽位模型
- timeline_model.py: 任务执行事件模型
- result_model.py: 调度结果模型
"""

from stepflow.models.enums import (
    WorkerState,
    SchedulerState,
    SimulationMode,
    SIMULATION_MODE_META
)
from stepflow.models.config_model import SchedulerConfig, load_config
from stepflow.models.task_model import Edge
from stepflow.models.worker_model import WorkerSlot
from stepflow.models.timeline_model import TaskEvent
from stepflow.models.result_model import (
    ScheduleResult,
    ScheduleResultModel,
    WorkerUtilization
)

__all__ = [
    # 枚举
    "WorkerState",
    "SchedulerState",
    "SimulationMode",
    "SIMULATION_MODE_META",
    # 配置
    "SchedulerConfig",
    "load_config",
    # 任务
    "Edge",
    # 工人
    "WorkerSlot",
    # 时间线
    "TaskEvent",
    # 结果
    "ScheduleResult",
    "ScheduleResultModel",
    "WorkerUtilization",
]
