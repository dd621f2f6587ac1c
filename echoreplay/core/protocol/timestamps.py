"""
Timestamps - 回放时间戳解析

录制工具写出的时间戳有两类：
- 定长 23 字符、第 13 位为 "." 的格式，如 "2021/03/14 20.15.33.123"，
  时分秒之间用点分隔，需要先把第 13、16 位改回 ":"
- 其他任意常见日期格式，直接解析
"""

from datetime import datetime, timezone
from typing import Optional

FIXED_WIDTH_LENGTH = 23
CLOCK_SEPARATOR_POSITIONS = (13, 16)

# fromisoformat 失败后依次尝试的格式
FALLBACK_FORMATS = (
    "%Y/%m/%d %H:%M:%S.%f",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S.%f",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%Y/%m/%d",
)


def normalize_timestamp(text: str) -> str:
    """把定长点分隔时间戳改写为冒号分隔，其他格式原样返回"""
    if len(text) == FIXED_WIDTH_LENGTH and text[CLOCK_SEPARATOR_POSITIONS[0]] == ".":
        chars = list(text)
        for pos in CLOCK_SEPARATOR_POSITIONS:
            chars[pos] = ":"
        return "".join(chars)
    return text


def parse_timestamp(text: str) -> Optional[datetime]:
    """解析时间戳，无法解析时返回 None

    带时区偏移的时间戳换算为 UTC 后去掉时区，
    同一文件内的时间戳始终可以互相比较。
    """
    text = normalize_timestamp(text).strip()
    if not text:
        return None

    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
        return moment

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
