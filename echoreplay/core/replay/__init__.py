"""
Core Replay Module - 回放数据读取与缓存

- parser: 单行解析（时间戳 + API JSON）
- cache: 懒解析、自愈的帧缓存
- loader: 回放文件读取
"""

from .parser import (
    ParseError,
    ParseResult,
    parse_json,
    parse_line,
)
from .cache import (
    DiscardRecord,
    Game,
    GameConfig,
    load_game,
)
from .loader import (
    load_game_file,
    read_replay_lines,
)

__all__ = [
    # Parser
    "ParseError",
    "ParseResult",
    "parse_json",
    "parse_line",
    # Cache
    "DiscardRecord",
    "Game",
    "GameConfig",
    "load_game",
    # Loader
    "load_game_file",
    "read_replay_lines",
]
