"""
指令文本解析工具
将 "Step C must be finished before step A can begin." 形式的指令解析为依赖边

功能:
- 解析指令文本
- 解析上传的文件字节（自动识别编码）
- 依赖边导出为指令文本
"""

import re
from typing import List, Optional
from dataclasses import dataclass, field

from stepflow.models.task_model import Edge


INSTRUCTION_PATTERN = re.compile(
    r"^Step\s+(?P<prerequisite>\S+)\s+must\s+be\s+finished\s+before\s+"
    r"step\s+(?P<dependent>\S+)\s+can\s+begin\.?$",
    re.IGNORECASE
)

INSTRUCTION_TEMPLATE = "Step {prerequisite} must be finished before step {dependent} can begin."

# 示例指令
EXAMPLE_INSTRUCTIONS = "\n".join([
    "Step C must be finished before step A can begin.",
    "Step C must be finished before step F can begin.",
    "Step A must be finished before step B can begin.",
    "Step A must be finished before step D can begin.",
    "Step B must be finished before step E can begin.",
    "Step D must be finished before step E can begin.",
    "Step F must be finished before step E can begin.",
])


@dataclass
class ParseResult:
    """指令解析结果"""
    success: bool
    edges: List[Edge] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    parsed_count: int = 0
    encoding: Optional[str] = None

    @property
    def tasks(self) -> List[str]:
        """解析到的全部任务ID（升序）"""
        task_ids = set()
        for edge in self.edges:
            task_ids.add(edge.prerequisite)
            task_ids.add(edge.dependent)
        return sorted(task_ids)

    def get_edge_tuples(self) -> list:
        """获取依赖元组列表"""
        return [edge.as_tuple() for edge in self.edges]


def parse_instruction_line(line: str) -> Optional[Edge]:
    """
    解析单行指令

    Args:
        line: 指令文本

    Returns:
        依赖边，格式不匹配返回None
    """
    match = INSTRUCTION_PATTERN.match(line.strip())
    if match is None:
        return None
    return Edge(
        prerequisite=match.group("prerequisite"),
        dependent=match.group("dependent")
    )


def parse_instructions(content: str, encoding: Optional[str] = None) -> ParseResult:
    """
    解析指令文本

    空行跳过；无法识别的行和自引用记录错误，重复的依赖记录警告

    Args:
        content: 多行指令文本
        encoding: 文件编码（用于记录）

    Returns:
        ParseResult解析结果
    """
    result = ParseResult(success=False, encoding=encoding)
    seen = set()

    for line_num, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue

        edge = parse_instruction_line(line)
        if edge is None:
            result.errors.append(f"第{line_num}行: 无法识别的指令 '{line.strip()}'")
            continue

        if edge.is_self_loop():
            result.errors.append(f"第{line_num}行: 任务 '{edge.prerequisite}' 不能依赖自身")
            continue

        if edge.as_tuple() in seen:
            result.warnings.append(f"第{line_num}行: 重复的依赖 {edge}，已忽略")
            continue

        seen.add(edge.as_tuple())
        result.edges.append(edge)
        result.parsed_count += 1

    if result.edges:
        result.success = len(result.errors) == 0
    elif not result.errors:
        result.errors.append("没有成功解析任何指令")

    return result


def parse_instruction_file(file_content: bytes) -> ParseResult:
    """
    解析指令文件字节内容

    Args:
        file_content: 文件字节内容

    Returns:
        ParseResult解析结果
    """
    # 尝试不同编码
    encodings = ['utf-8-sig', 'utf-8', 'gbk', 'latin-1']

    for encoding in encodings:
        try:
            text = file_content.decode(encoding)
            return parse_instructions(text, encoding)
        except UnicodeDecodeError:
            continue

    return ParseResult(
        success=False,
        errors=["无法识别文件编码，请使用UTF-8编码"]
    )


def format_instructions(edges) -> str:
    """
    将依赖边导出为指令文本

    Args:
        edges: Edge 模型或 (prerequisite, dependent) 元组列表

    Returns:
        多行指令文本
    """
    lines = []
    for edge in edges:
        prerequisite, dependent = edge.as_tuple() if isinstance(edge, Edge) else edge
        lines.append(INSTRUCTION_TEMPLATE.format(
            prerequisite=prerequisite,
            dependent=dependent
        ))
    return "\n".join(lines)
