"""
Core Module - 回放数据核心层

包含:
- protocol: 快照模式、向量坐标转换、变换格式归一化、时间戳解析
- replay: 行解析、帧缓存、文件读取
"""

from .protocol import (
    ConversionFailed,
    Disc,
    LastScore,
    Player,
    Playspace,
    Snapshot,
    Stats,
    Team,
    TeamColor,
    Transform,
    TransformEncoding,
    Vector3,
    normalize_timestamp,
    parse_timestamp,
    resolve_transform,
)
from .replay import (
    DiscardRecord,
    Game,
    GameConfig,
    ParseError,
    ParseResult,
    load_game,
    load_game_file,
    parse_json,
    parse_line,
    read_replay_lines,
)

__all__ = [
    # Protocol
    "ConversionFailed",
    "Disc",
    "LastScore",
    "Player",
    "Playspace",
    "Snapshot",
    "Stats",
    "Team",
    "TeamColor",
    "Transform",
    "TransformEncoding",
    "Vector3",
    "normalize_timestamp",
    "parse_timestamp",
    "resolve_transform",
    # Replay
    "DiscardRecord",
    "Game",
    "GameConfig",
    "ParseError",
    "ParseResult",
    "load_game",
    "load_game_file",
    "parse_json",
    "parse_line",
    "read_replay_lines",
]
