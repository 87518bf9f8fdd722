"""
调度控制接口
提供依赖图调度、指令解析和示例数据

API端点:
- POST /api/schedule/order: 串行模式，返回完成顺序
- POST /api/schedule/timed: 计时模式，返回总耗时
- POST /api/schedule/run: 按请求配置运行并返回完整报告
- POST /api/schedule/parse: 解析指令文本
- POST /api/schedule/upload: 上传指令文件并解析
- GET /api/schedule/example: 获取示例任务集
"""

import logging
from fastapi import APIRouter, File, UploadFile

from stepflow.api.schemas import APIResponse, ParseRequest, ScheduleRequest
from stepflow.core.dependency_graph import DependencyGraph
from stepflow.core.duration_model import build_duration_model
from stepflow.core.exceptions import SchedulerError
from stepflow.core.scheduler import Scheduler
from stepflow.models.config_model import SchedulerConfig
from stepflow.models.enums import SimulationMode
from stepflow.models.result_model import ScheduleResultModel
from stepflow.models.timeline_model import render_timeline
from stepflow.utils.instruction_parser import (
    EXAMPLE_INSTRUCTIONS,
    ParseResult,
    parse_instruction_file,
    parse_instructions
)
from stepflow.utils.statistics import generate_schedule_report
from stepflow.utils.validators import validate_schedule_request

logger = logging.getLogger(__name__)

router = APIRouter()


# ============ 辅助函数 ============

def _run_request(request: ScheduleRequest, config: SchedulerConfig):
    """
    验证并运行调度请求

    Args:
        request: 调度请求
        config: 实际使用的配置

    Returns:
        (APIResponse失败响应或None, 调度结果, 关键路径时长)
    """
    edges = [edge.as_tuple() for edge in request.edges]

    valid, errors, warnings = validate_schedule_request(edges, config, request.tasks)
    if not valid:
        return APIResponse(
            success=False,
            message="调度请求验证失败",
            data={"errors": errors, "warnings": warnings}
        ), None, 0

    try:
        graph = DependencyGraph.from_edges(edges, request.tasks)
        duration_model = build_duration_model(config)
        _, critical_length = graph.critical_path(duration_model)
        scheduler = Scheduler(
            graph,
            num_workers=config.effective_workers,
            duration_model=duration_model,
            mode=config.mode
        )
        result = scheduler.run()
    except SchedulerError as e:
        logger.warning("调度失败: %s", e)
        return APIResponse(
            success=False,
            message=f"调度失败: {e}"
        ), None, 0

    return None, result, critical_length


def _parse_response(result: ParseResult) -> APIResponse:
    """将解析结果转换为API响应"""
    return APIResponse(
        success=result.success,
        message=(
            f"成功解析 {result.parsed_count} 条依赖"
            if result.success else "指令解析存在错误"
        ),
        data={
            "edges": [edge.model_dump() for edge in result.edges],
            "tasks": result.tasks,
            "errors": result.errors,
            "warnings": result.warnings,
            "parsed_count": result.parsed_count
        }
    )


# ============ API端点 ============

@router.post("/order", response_model=APIResponse)
async def schedule_order(request: ScheduleRequest):
    """
    串行模式调度

    单工人、每个任务耗时1个tick，返回字典序优先的完成顺序
    """
    failure, result, _ = _run_request(request, SchedulerConfig.sequential())
    if failure is not None:
        return failure

    return APIResponse(
        success=True,
        message=f"完成顺序: {result.order_string}",
        data={
            "order": result.order_string,
            "completion_order": list(result.completion_order)
        }
    )


@router.post("/timed", response_model=APIResponse)
async def schedule_timed(request: ScheduleRequest):
    """
    计时模式调度

    按配置的工人数和时长模型并行执行，返回总耗时
    """
    config = request.config.model_copy(update={"mode": SimulationMode.TIMED})
    failure, result, critical_length = _run_request(request, config)
    if failure is not None:
        return failure

    return APIResponse(
        success=True,
        message=f"总耗时 {result.total_ticks} ticks",
        data={
            "total_ticks": result.total_ticks,
            "critical_path_length": critical_length,
            "completion_ticks": {str(k): v for k, v in result.completion_ticks.items()},
            "order": result.order_string
        }
    )


@router.post("/run", response_model=APIResponse)
async def schedule_run(request: ScheduleRequest):
    """
    按请求配置运行调度

    返回完整结果、KPI报告和文本时间线
    """
    failure, result, critical_length = _run_request(request, request.config)
    if failure is not None:
        return failure

    worker_ids = [w.worker_id for w in result.worker_stats]
    return APIResponse(
        success=True,
        message=f"调度完成，共 {result.task_count} 个任务，耗时 {result.total_ticks} ticks",
        data={
            "result": ScheduleResultModel.from_result(result).model_dump(),
            "report": generate_schedule_report(result, critical_length),
            "timeline": render_timeline(list(result.events), worker_ids, result.total_ticks)
        }
    )


@router.post("/parse", response_model=APIResponse)
async def parse_text(request: ParseRequest):
    """
    解析指令文本

    每行形如 "Step C must be finished before step A can begin."
    """
    return _parse_response(parse_instructions(request.content))


@router.post("/upload", response_model=APIResponse)
async def upload_instructions(file: UploadFile = File(...)):
    """
    上传指令文件并解析
    """
    content = await file.read()
    return _parse_response(parse_instruction_file(content))


@router.get("/example", response_model=APIResponse)
async def get_example():
    """
    获取示例任务集

    包含示例指令文本及其解析结果
    """
    result = parse_instructions(EXAMPLE_INSTRUCTIONS)
    return APIResponse(
        success=True,
        message="获取示例成功",
        data={
            "instructions": EXAMPLE_INSTRUCTIONS,
            "edges": [edge.model_dump() for edge in result.edges],
            "expected_order": "CABDFE",
            "expected_ticks": {"num_workers": 2, "base_offset": 0, "total_ticks": 15}
        }
    )
