"""
调度配置模型
定义调度系统的全局配置参数

配置项:
- 工人数量
- 调度模式（串行/计时）
- 时长模型参数（基础偏移量、标识符字母表、显式时长表）
"""

import os
import string
from typing import Dict, Optional
from pydantic import BaseModel, Field, computed_field
import yaml

from stepflow.models.enums import SimulationMode


DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "config", "default_config.yaml"
)


class SchedulerConfig(BaseModel):
    """
    调度配置模型

    包含调度器的所有可配置参数

    Attributes:
        num_workers: 工人数量（≥1）
        base_offset: 计时模式下的基础时长偏移量（≥0）
        mode: 调度模式（sequential/timed）
        alphabet: 标识符取值域，任务时长 = base_offset + 在字母表中的1起始排名
        durations: 显式时长表（任务ID -> tick数），优先于字母表排名
    """

    num_workers: int = Field(
        default=5,
        ge=1,
        description="工人数量"
    )
    base_offset: int = Field(
        default=60,
        ge=0,
        description="计时模式基础时长偏移量"
    )
    mode: SimulationMode = Field(
        default=SimulationMode.TIMED,
        description="调度模式"
    )
    alphabet: str = Field(
        default=string.ascii_uppercase,
        min_length=1,
        description="标识符字母表（决定任务排名）"
    )
    durations: Dict[str, int] = Field(
        default={},
        description="显式任务时长表（覆盖字母表排名）"
    )

    @computed_field
    @property
    def effective_workers(self) -> int:
        """
        实际使用的工人数量

        串行模式下始终只有一个工人

        Returns:
            工人数量
        """
        if self.mode == SimulationMode.SEQUENTIAL:
            return 1
        return self.num_workers

    @classmethod
    def sequential(cls) -> "SchedulerConfig":
        """创建串行模式配置"""
        return cls(num_workers=1, base_offset=0, mode=SimulationMode.SEQUENTIAL)

    @classmethod
    def timed(cls, num_workers: int = 5, base_offset: int = 60, **kwargs) -> "SchedulerConfig":
        """
        创建计时模式配置

        Args:
            num_workers: 工人数量
            base_offset: 基础时长偏移量

        Returns:
            计时模式配置
        """
        return cls(
            num_workers=num_workers,
            base_offset=base_offset,
            mode=SimulationMode.TIMED,
            **kwargs
        )

    @classmethod
    def from_yaml(cls, path: str) -> "SchedulerConfig":
        """
        从YAML文件加载配置

        Args:
            path: 配置文件路径

        Returns:
            调度配置
        """
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
        return cls(**config_data)

    def is_sequential(self) -> bool:
        """判断是否为串行模式"""
        return self.mode == SimulationMode.SEQUENTIAL

    def get_rank(self, task: str) -> Optional[int]:
        """
        获取任务在字母表中的1起始排名

        Args:
            task: 任务ID

        Returns:
            排名，不在字母表中返回None
        """
        index = self.alphabet.find(task) if len(task) == 1 else -1
        if index < 0:
            return None
        return index + 1

    def validate_config(self) -> tuple:
        """
        验证配置有效性

        Returns:
            (是否有效, 错误列表, 警告列表)
        """
        errors = []
        warnings = []

        if len(set(self.alphabet)) != len(self.alphabet):
            errors.append("字母表中存在重复字符")

        for task, duration in self.durations.items():
            if duration < 1:
                errors.append(f"任务 '{task}' 的时长必须大于0")

        if self.is_sequential() and self.num_workers > 1:
            warnings.append(
                f"串行模式只使用1个工人，配置的 {self.num_workers} 个工人将被忽略"
            )

        if self.is_sequential() and (self.base_offset or self.durations):
            warnings.append("串行模式下每个任务耗时固定为1，时长参数不生效")

        return len(errors) == 0, errors, warnings

    class Config:
        json_schema_extra = {
            "example": {
                "num_workers": 5,
                "base_offset": 60,
                "mode": "timed",
                "alphabet": "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
                "durations": {}
            }
        }


def load_config(path: Optional[str] = None) -> SchedulerConfig:
    """
    加载调度配置

    未指定路径时读取默认配置文件，文件不存在则使用默认值

    Args:
        path: 配置文件路径

    Returns:
        调度配置
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if not os.path.exists(config_path):
        if path is not None:
            raise FileNotFoundError(f"配置文件不存在: {path}")
        return SchedulerConfig()
    return SchedulerConfig.from_yaml(config_path)
