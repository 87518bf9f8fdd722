"""
工具函数包
提供各种辅助功能

模块说明:
- instruction_parser.py: 指令文本解析工具
- statistics.py: KPI统计计算
- validators.py: 数据验证工具
"""

from stepflow.utils.instruction_parser import (
    parse_instructions,
    parse_instruction_file,
    parse_instruction_line,
    format_instructions,
    EXAMPLE_INSTRUCTIONS,
    ParseResult,
)

from stepflow.utils.statistics import (
    calculate_utilization_rate,
    calculate_parallelism,
    calculate_worker_statistics,
    calculate_critical_path_efficiency,
    find_idle_workers,
    generate_schedule_report,
)

from stepflow.utils.validators import (
    validate_edges,
    validate_duration_domain,
    validate_schedule_request,
    check_graph_connectivity,
)

__all__ = [
    # 指令解析
    "parse_instructions",
    "parse_instruction_file",
    "parse_instruction_line",
    "format_instructions",
    "EXAMPLE_INSTRUCTIONS",
    "ParseResult",
    # 统计
    "calculate_utilization_rate",
    "calculate_parallelism",
    "calculate_worker_statistics",
    "calculate_critical_path_efficiency",
    "find_idle_workers",
    "generate_schedule_report",
    # 验证
    "validate_edges",
    "validate_duration_domain",
    "validate_schedule_request",
    "check_graph_connectivity",
]
