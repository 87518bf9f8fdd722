"""
调度异常定义

所有异常均继承 SchedulerError，构造参数只有一条消息，
便于在 SimPy 进程中抛出后由 env.run() 原样重建
"""


class SchedulerError(Exception):
    """调度系统异常基类"""


class MalformedEdge(SchedulerError):
    """依赖边非法（自引用、重复、端点为空或不是二元组）"""


class UnknownTask(SchedulerError):
    """移除了不在图中的任务"""


class UnschedulableGraphError(SchedulerError):
    """存在循环依赖或死锁，剩余任务永远无法调度"""


class DurationError(SchedulerError):
    """任务标识符不在时长模型的取值域内，或时长非正"""
