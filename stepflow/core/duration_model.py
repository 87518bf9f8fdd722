"""
时长模型
将任务标识符映射为正整数tick时长

模型:
- UnitDuration: 串行模式，每个任务耗时1
- OrdinalDuration: 计时模式，base_offset + 标识符在字母表中的1起始排名
- MappingDuration: 调用方提供的显式时长表
"""

import string
from typing import Any, Dict, Optional

from stepflow.core.exceptions import DurationError
from stepflow.models.config_model import SchedulerConfig


class DurationModel:
    """时长模型基类，子类实现 duration()"""

    def duration(self, task: Any) -> int:
        raise NotImplementedError

    def __call__(self, task: Any) -> int:
        return self.duration(task)


class UnitDuration(DurationModel):
    """每个任务固定占用1个tick"""

    def duration(self, task: Any) -> int:
        return 1

    def __repr__(self) -> str:
        return "UnitDuration()"


class OrdinalDuration(DurationModel):
    """
    排名时长模型

    duration(task) = base_offset + task 在 alphabet 中的1起始排名，
    如 base_offset=60 时 A=61, B=62, ..., Z=86
    """

    def __init__(self, base_offset: int = 60, alphabet: str = string.ascii_uppercase):
        """
        Args:
            base_offset: 基础偏移量（≥0）
            alphabet: 标识符取值域
        """
        if base_offset < 0:
            raise DurationError(f"基础偏移量不能为负: {base_offset}")
        self.base_offset = base_offset
        self.alphabet = alphabet
        self._ranks = {symbol: i + 1 for i, symbol in enumerate(alphabet)}

    def rank(self, task: Any) -> int:
        """
        获取任务排名

        Args:
            task: 任务ID

        Returns:
            1起始排名

        Raises:
            DurationError: 任务不在字母表中
        """
        try:
            return self._ranks[task]
        except (KeyError, TypeError):
            raise DurationError(f"任务 '{task}' 不在标识符字母表中") from None

    def duration(self, task: Any) -> int:
        return self.base_offset + self.rank(task)

    def __repr__(self) -> str:
        return f"OrdinalDuration(base_offset={self.base_offset}, alphabet={self.alphabet!r})"


class MappingDuration(DurationModel):
    """
    显式时长表

    未列出的任务使用 default；default 为 None 时视为不在取值域内
    """

    def __init__(self, durations: Dict[Any, int], default: Optional[int] = None):
        for task, value in durations.items():
            if value < 1:
                raise DurationError(f"任务 '{task}' 的时长必须大于0: {value}")
        if default is not None and default < 1:
            raise DurationError(f"默认时长必须大于0: {default}")
        self.durations = dict(durations)
        self.default = default

    def duration(self, task: Any) -> int:
        if task in self.durations:
            return self.durations[task]
        if self.default is None:
            raise DurationError(f"任务 '{task}' 没有配置时长")
        return self.default

    def __repr__(self) -> str:
        return f"MappingDuration({len(self.durations)} tasks, default={self.default})"


class _OverrideDuration(DurationModel):
    """显式时长表优先，其余任务按排名计算"""

    def __init__(self, overrides: MappingDuration, fallback: DurationModel):
        self.overrides = overrides
        self.fallback = fallback

    def duration(self, task: Any) -> int:
        if task in self.overrides.durations:
            return self.overrides.duration(task)
        return self.fallback.duration(task)


def build_duration_model(config: SchedulerConfig) -> DurationModel:
    """
    根据配置创建时长模型

    Args:
        config: 调度配置

    Returns:
        串行模式返回 UnitDuration，计时模式返回排名模型（叠加显式时长表）
    """
    if config.is_sequential():
        return UnitDuration()

    ordinal = OrdinalDuration(config.base_offset, config.alphabet)
    if config.durations:
        return _OverrideDuration(MappingDuration(config.durations), ordinal)
    return ordinal
