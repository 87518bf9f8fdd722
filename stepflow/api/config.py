"""
配置管理接口
提供调度配置的获取和验证功能

API端点:
- GET /api/config/default: 获取默认配置
- POST /api/config/validate: 验证配置有效性
- GET /api/config/modes: 获取调度模式列表
"""

import logging
from typing import List
from fastapi import APIRouter
from pydantic import BaseModel
import yaml

from stepflow.api.schemas import APIResponse
from stepflow.models.config_model import SchedulerConfig, load_config
from stepflow.models.enums import SimulationMode, get_mode_info

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfigValidationResult(BaseModel):
    """配置验证结果"""
    valid: bool
    errors: List[str] = []
    warnings: List[str] = []


@router.get("/default", response_model=APIResponse)
async def get_default_config():
    """
    获取默认配置

    优先读取 config/default_config.yaml，读取失败时使用内置默认值
    """
    try:
        config = load_config()
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning("默认配置文件读取失败，使用内置默认值: %s", e)
        config = SchedulerConfig()

    return APIResponse(
        success=True,
        message="获取默认配置成功",
        data=config.model_dump()
    )


@router.post("/validate", response_model=APIResponse)
async def validate_config(config: SchedulerConfig):
    """
    验证配置有效性

    检查字母表、显式时长表以及模式与参数的一致性
    """
    valid, errors, warnings = config.validate_config()

    result = ConfigValidationResult(
        valid=valid,
        errors=errors,
        warnings=warnings
    )

    return APIResponse(
        success=result.valid,
        message="配置验证通过" if result.valid else "配置存在错误",
        data=result.model_dump()
    )


@router.get("/modes", response_model=APIResponse)
async def get_modes():
    """
    获取调度模式列表
    """
    modes = [
        {"mode": mode.value, **get_mode_info(mode)}
        for mode in SimulationMode
    ]

    return APIResponse(
        success=True,
        message="获取调度模式成功",
        data=modes
    )
