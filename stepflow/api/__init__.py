"""
API模块包
包含所有REST API端点的定义

模块说明:
- config.py: 配置管理接口
- schedule.py: 调度控制接口
- schemas.py: 请求/响应模型
"""

from stepflow.api import config, schedule

__all__ = ["config", "schedule"]
