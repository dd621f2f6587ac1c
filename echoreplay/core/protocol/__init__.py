"""Protocol Module - 数据模式与格式转换"""

from .vectors import Vec3, Vector3, lerp_float, lerp_vector
from .transforms import (
    ConversionFailed,
    Transform,
    TransformEncoding,
    resolve_transform,
    try_resolve_transform,
)
from .timestamps import normalize_timestamp, parse_timestamp
from .schema import (
    Disc,
    LastScore,
    Player,
    Playspace,
    Snapshot,
    Stats,
    Team,
    TeamColor,
)

__all__ = [
    "Vec3",
    "Vector3",
    "lerp_float",
    "lerp_vector",
    "ConversionFailed",
    "Transform",
    "TransformEncoding",
    "resolve_transform",
    "try_resolve_transform",
    "normalize_timestamp",
    "parse_timestamp",
    "Disc",
    "LastScore",
    "Player",
    "Playspace",
    "Snapshot",
    "Stats",
    "Team",
    "TeamColor",
]
