"""
Replay Line Parser - 回放行解析

每行格式: <时间戳>\\t<API JSON>

解析结果总是显式的 ParseResult，不向外抛出异常：
- MALFORMED_LINE: 不是 "时间戳 + JSON" 两列
- BAD_TIMESTAMP: 时间戳无法解析
- NOT_ARENA_DATA: JSON 过短（非比赛数据的心跳帧）
- BAD_JSON: JSON 无法解码、嵌套过深或结构与快照模式不符
"""

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

from pydantic import ValidationError

from ..protocol.schema import Snapshot
from ..protocol.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_MIN_PAYLOAD_LENGTH = 800


class ParseError(str, Enum):
    """解析失败类型"""

    MALFORMED_LINE = "malformed_line"
    BAD_TIMESTAMP = "bad_timestamp"
    NOT_ARENA_DATA = "not_arena_data"
    BAD_JSON = "bad_json"
    # 只标记单个变换字段（见 transforms.ConversionFailed），不会作为整行的解析结果
    CONVERSION_FAILED = "conversion_failed"
    NO_VALID_FRAMES = "no_valid_frames"
    INDEX_OUT_OF_RANGE = "index_out_of_range"


@dataclass
class ParseResult:
    """解析结果（成功时 snapshot 非空，失败时 error 非空）"""

    snapshot: Optional[Snapshot] = None
    error: Optional[ParseError] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None and self.snapshot is not None

    @classmethod
    def success(cls, snapshot: Snapshot) -> "ParseResult":
        return cls(snapshot=snapshot)

    @classmethod
    def failure(cls, error: ParseError, detail: str = "") -> "ParseResult":
        return cls(error=error, detail=detail)


def parse_json(
    text: str,
    frame_time: Optional[datetime] = None,
    line_number: Optional[int] = None,
) -> ParseResult:
    """把 API JSON 文本反序列化为快照"""
    if not text:
        return ParseResult.failure(ParseError.BAD_JSON, "JSON 为空")

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        return ParseResult.failure(ParseError.BAD_JSON, f"JSON 解码失败: {e}")

    if not isinstance(data, dict):
        return ParseResult.failure(
            ParseError.BAD_JSON, f"JSON 顶层必须是对象, 收到 {type(data).__name__}"
        )

    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        return ParseResult.failure(
            ParseError.BAD_JSON, f"结构不符 ({e.error_count()} 处): {e.errors()[0]['loc']}"
        )
    except RecursionError as e:
        return ParseResult.failure(ParseError.BAD_JSON, f"嵌套过深: {e}")

    snapshot.frame_time = frame_time
    snapshot.original_json = text
    snapshot.line_number = line_number
    return ParseResult.success(snapshot)


def parse_line(
    line: Optional[str],
    min_payload_length: int = DEFAULT_MIN_PAYLOAD_LENGTH,
    line_number: Optional[int] = None,
) -> ParseResult:
    """解析一行回放数据

    Args:
        line: 原始行文本
        min_payload_length: JSON 最小长度，不超过此长度视为非比赛数据
        line_number: 源文件行号，附加到快照上

    Returns:
        ParseResult
    """
    if not line:
        return ParseResult.failure(ParseError.MALFORMED_LINE, "空行")

    fields = line.rstrip("\r\n").split("\t")
    if len(fields) != 2:
        return ParseResult.failure(
            ParseError.MALFORMED_LINE, f"需要 2 列（时间戳 + JSON），实际 {len(fields)} 列"
        )
    time_text, payload = fields

    frame_time = parse_timestamp(time_text)
    if frame_time is None:
        return ParseResult.failure(ParseError.BAD_TIMESTAMP, f"无法解析时间: {time_text!r}")

    if len(payload) <= min_payload_length:
        return ParseResult.failure(
            ParseError.NOT_ARENA_DATA, f"JSON 长度 {len(payload)} <= {min_payload_length}"
        )

    return parse_json(payload, frame_time=frame_time, line_number=line_number)
