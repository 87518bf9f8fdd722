"""
FastAPI 主入口
依赖图任务调度服务 - Dependency-ordered Task Scheduler
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stepflow.api import config, schedule

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# 创建FastAPI应用实例
app = FastAPI(
    title="依赖图任务调度服务",
    description="Dependency-ordered task scheduler with a bounded worker pool",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS中间件配置 - 允许跨域访问
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册API路由
app.include_router(config.router, prefix="/api/config", tags=["配置管理"])
app.include_router(schedule.router, prefix="/api/schedule", tags=["调度控制"])


@app.get("/")
async def root():
    """
    根路径 - 返回服务信息
    """
    return JSONResponse(content={
        "service": "stepflow",
        "version": VERSION,
        "docs": "/docs"
    })


@app.get("/health")
async def health_check():
    """
    健康检查接口
    """
    return JSONResponse(content={
        "status": "healthy",
        "version": VERSION,
        "service": "Dependency-ordered Task Scheduler"
    })


@app.on_event("startup")
async def startup_event():
    """
    应用启动事件
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger.info("依赖图任务调度服务启动成功")
    logger.info("API文档: http://localhost:8000/docs")


@app.on_event("shutdown")
async def shutdown_event():
    """
    应用关闭事件
    """
    logger.info("依赖图任务调度服务已关闭")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
