"""
API请求/响应模型
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from stepflow.models.config_model import SchedulerConfig
from stepflow.models.task_model import Edge


class APIResponse(BaseModel):
    """统一API响应格式"""
    success: bool = Field(description="请求是否成功")
    message: str = Field(description="响应消息")
    data: Optional[Any] = Field(default=None, description="响应数据")


class ScheduleRequest(BaseModel):
    """调度请求"""
    edges: List[Edge] = Field(default=[], description="依赖边列表")
    tasks: List[str] = Field(default=[], description="孤立任务列表")
    config: SchedulerConfig = Field(default_factory=SchedulerConfig, description="调度配置")

    class Config:
        json_schema_extra = {
            "example": {
                "edges": [
                    {"prerequisite": "C", "dependent": "A"},
                    {"prerequisite": "C", "dependent": "F"},
                    {"prerequisite": "A", "dependent": "B"},
                    {"prerequisite": "A", "dependent": "D"},
                    {"prerequisite": "B", "dependent": "E"},
                    {"prerequisite": "D", "dependent": "E"},
                    {"prerequisite": "F", "dependent": "E"}
                ],
                "tasks": [],
                "config": {"num_workers": 2, "base_offset": 0, "mode": "timed"}
            }
        }


class ParseRequest(BaseModel):
    """指令文本解析请求"""
    content: str = Field(description="多行指令文本")
