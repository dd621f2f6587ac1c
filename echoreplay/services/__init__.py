"""
Services Module - 回放服务层

- interpolation: 快照插值引擎
- playback: 播放头
"""

from .interpolation import (
    InterpolationEngine,
    blend_disc,
    blend_frames,
    blend_player,
    blend_playspace,
    blend_sequence,
    blend_team,
    blend_transform,
)
from .playback import PlaybackConfig, PlaybackCursor

__all__ = [
    "InterpolationEngine",
    "blend_disc",
    "blend_frames",
    "blend_player",
    "blend_playspace",
    "blend_sequence",
    "blend_team",
    "blend_transform",
    "PlaybackConfig",
    "PlaybackCursor",
]
