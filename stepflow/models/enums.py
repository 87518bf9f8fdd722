"""
枚举定义
包含调度系统中使用的所有枚举类型

枚举类:
- WorkerState: 工人槽位状态
- SchedulerState: 调度器状态机状态
- SimulationMode: 调度模式（串行/计时）
"""

from enum import Enum


class WorkerState(str, Enum):
    """
    工人槽位状态枚举

    Values:
        IDLE: 空闲
        BUSY: 执行任务中
    """
    IDLE = "idle"
    BUSY = "busy"


class SchedulerState(str, Enum):
    """
    调度器状态枚举

    Values:
        RUNNING: 运行中（初始状态）
        DONE: 已完成（图为空且所有工人空闲）
        FAILED: 失败（检测到环或死锁）
    """
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class SimulationMode(str, Enum):
    """
    调度模式枚举

    Values:
        SEQUENTIAL: 串行模式，单工人，每个任务耗时1个tick
        TIMED: 计时模式，多工人，任务耗时由标识符推导
    """
    SEQUENTIAL = "sequential"
    TIMED = "timed"


# ============ 调度模式元数据 ============

SIMULATION_MODE_META = {
    SimulationMode.SEQUENTIAL: {
        "zh": "串行",
        "en": "Sequential",
        "output": "completion_order",
        "description": "单工人按字典序完成任务，输出完成顺序"
    },
    SimulationMode.TIMED: {
        "zh": "计时",
        "en": "Timed",
        "output": "total_ticks",
        "description": "多工人并行执行，输出总耗时"
    },
}


def get_mode_info(mode: SimulationMode) -> dict:
    """
    获取调度模式的详细信息

    Args:
        mode: 调度模式枚举值

    Returns:
        包含中英文名称、输出类型的字典
    """
    return SIMULATION_MODE_META.get(mode, {
        "zh": "未知",
        "en": "Unknown",
        "output": "",
        "description": ""
    })
