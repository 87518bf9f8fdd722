"""
任务依赖模型
定义任务之间的"必须先完成"依赖边

模型:
- Edge: 单条依赖边（prerequisite -> dependent）
"""

from typing import Tuple
from pydantic import BaseModel, Field


class Edge(BaseModel):
    """
    依赖边模型

    prerequisite 必须在 dependent 开始之前完成

    Attributes:
        prerequisite: 前置任务ID
        dependent: 后续任务ID
    """

    prerequisite: str = Field(
        description="前置任务ID"
    )
    dependent: str = Field(
        description="后续任务ID"
    )

    def as_tuple(self) -> Tuple[str, str]:
        """
        转换为 (prerequisite, dependent) 元组

        Returns:
            依赖元组
        """
        return self.prerequisite, self.dependent

    def is_self_loop(self) -> bool:
        """判断是否为自引用边"""
        return self.prerequisite == self.dependent

    def __str__(self) -> str:
        return f"{self.prerequisite}->{self.dependent}"


def to_edge_tuple(edge) -> tuple:
    """
    将 Edge 或二元组统一转换为元组

    Args:
        edge: Edge 模型或 (prerequisite, dependent) 序列

    Returns:
        依赖元组；无法识别的输入原样返回由调用方判定
    """
    if isinstance(edge, Edge):
        return edge.as_tuple()
    if isinstance(edge, (tuple, list)):
        return tuple(edge)
    return edge
