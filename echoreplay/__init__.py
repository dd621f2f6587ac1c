"""echoreplay: Echo Arena 回放日志解析与插值

Usage:
    from echoreplay import load_game_file, PlaybackCursor, blend_frames

    game = load_game_file("match.echoreplay")
    print(game.frame_count)

    a, b = game.get_frame(0), game.get_frame(1)
    mid = blend_frames(a, b, a.frame_time + (b.frame_time - a.frame_time) / 2)

    cursor = PlaybackCursor(game)
    frame = cursor.sample_offset(30.0)
"""

__version__ = "0.1.0"

from echoreplay.core import (
    ConversionFailed,
    Disc,
    DiscardRecord,
    Game,
    GameConfig,
    LastScore,
    ParseError,
    ParseResult,
    Player,
    Playspace,
    Snapshot,
    Stats,
    Team,
    TeamColor,
    Transform,
    TransformEncoding,
    Vector3,
    load_game,
    load_game_file,
    parse_line,
    read_replay_lines,
    resolve_transform,
)
from echoreplay.services import (
    InterpolationEngine,
    PlaybackConfig,
    PlaybackCursor,
    blend_frames,
)

__all__ = [
    # Version
    "__version__",
    # Model
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
    "ConversionFailed",
    "resolve_transform",
    # Replay
    "DiscardRecord",
    "Game",
    "GameConfig",
    "ParseError",
    "ParseResult",
    "load_game",
    "load_game_file",
    "parse_line",
    "read_replay_lines",
    # Services
    "InterpolationEngine",
    "PlaybackConfig",
    "PlaybackCursor",
    "blend_frames",
]
