"""
Interpolation Engine - 快照插值

在两个相邻快照之间按播放时间线性插值，生成中间快照。

规则：
- 离散字段（ID、状态字符串、标志、比分）取 from 的值
- 连续字段（比赛时钟、三维向量、速度）线性插值
- 嵌套结构（飞盘、追踪空间、变换）任一端缺失则结果缺失，不补零
- 队伍 / 队员按位置对齐插值，只在一端存在的下标原样复制
  （不按身份匹配，玩家加入 / 离开时顺序可能错位）

每个模型的字段规则在下方规则表中声明，未列出的字段一律取 from 的值。
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.protocol.schema import Disc, Player, Playspace, Snapshot, Team
from ..core.protocol.transforms import Transform
from ..core.protocol.vectors import lerp_float, lerp_vector

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

BlendFn = Callable[[Any, Any, float], Any]


def blend_transform(
    a: Optional[Transform], b: Optional[Transform], t: float
) -> Optional[Transform]:
    """变换插值，每个子字段独立处理，编码方式沿用 from"""
    if a is None or b is None:
        return None
    return Transform.model_construct(
        position=lerp_vector(a.position, b.position, t),
        forward=lerp_vector(a.forward, b.forward, t),
        left=lerp_vector(a.left, b.left, t),
        up=lerp_vector(a.up, b.up, t),
        encoding=a.encoding,
    )


def blend_sequence(
    a: Optional[List[T]],
    b: Optional[List[T]],
    t: float,
    blend_item: Callable[[T, T, float], T],
) -> Optional[List[T]]:
    """按下标对齐插值列表

    from 缺失时结果缺失；只有 to 缺失时沿用 from 的列表。
    """
    if a is None:
        return None
    if b is None:
        return list(a)

    result: List[T] = []
    for i in range(max(len(a), len(b))):
        if i >= len(a):
            result.append(b[i])
        elif i >= len(b):
            result.append(a[i])
        else:
            result.append(blend_item(a[i], b[i], t))
    return result


def _blend_fields(
    model_cls: Type[M],
    a: M,
    b: M,
    t: float,
    rules: Dict[str, BlendFn],
    **overrides: Any,
) -> M:
    """按规则表逐字段插值，构造新模型（不重复校验）"""
    values: Dict[str, Any] = dict(a.model_extra or {})
    for name in model_cls.model_fields:
        rule = rules.get(name)
        if rule is None:
            values[name] = getattr(a, name)
        else:
            values[name] = rule(getattr(a, name), getattr(b, name), t)
    values.update(overrides)
    return model_cls.model_construct(**values)


def _nested(model_cls: Type[M], rules: Dict[str, BlendFn]) -> Callable[[Optional[M], Optional[M], float], Optional[M]]:
    def blend(a: Optional[M], b: Optional[M], t: float) -> Optional[M]:
        if a is None or b is None:
            return None
        return _blend_fields(model_cls, a, b, t, rules)

    return blend


# ==================== 规则表 ====================

DISC_RULES: Dict[str, BlendFn] = {
    "position": lerp_vector,
    "forward": lerp_vector,
    "left": lerp_vector,
    "up": lerp_vector,
    "velocity": lerp_vector,
}

PLAYSPACE_RULES: Dict[str, BlendFn] = {
    "vr_left": lerp_vector,
    "vr_position": lerp_vector,
    "vr_forward": lerp_vector,
    "vr_up": lerp_vector,
}

PLAYER_RULES: Dict[str, BlendFn] = {
    "velocity": lerp_vector,
    "head": blend_transform,
    "body": blend_transform,
    "lhand": blend_transform,
    "rhand": blend_transform,
    # 旧版 API
    "position": lerp_vector,
    "forward": lerp_vector,
    "left": lerp_vector,
    "up": lerp_vector,
}

blend_disc = _nested(Disc, DISC_RULES)
blend_playspace = _nested(Playspace, PLAYSPACE_RULES)


def blend_player(a: Player, b: Player, t: float) -> Player:
    return _blend_fields(Player, a, b, t, PLAYER_RULES)


TEAM_RULES: Dict[str, BlendFn] = {
    "players": lambda a, b, t: blend_sequence(a, b, t, blend_player),
}


def blend_team(a: Team, b: Team, t: float) -> Team:
    return _blend_fields(Team, a, b, t, TEAM_RULES)


SNAPSHOT_RULES: Dict[str, BlendFn] = {
    "disc": blend_disc,
    "game_clock": lerp_float,
    "playspace": blend_playspace,
    "teams": lambda a, b, t: blend_sequence(a, b, t, blend_team),
}


class InterpolationEngine:
    """
    快照插值引擎

    使用示例：
    ```python
    engine = InterpolationEngine()
    frame = engine.blend_frames(game.get_frame(i), game.get_frame(i + 1), playhead)
    ```
    """

    def __init__(self):
        self._stats = {
            "blends": 0,
            "passthrough": 0,
        }

    @property
    def stats(self) -> Dict[str, int]:
        return dict(self._stats)

    def blend_frames(
        self,
        from_frame: Optional[Snapshot],
        to_frame: Optional[Snapshot],
        query_time: datetime,
    ) -> Optional[Snapshot]:
        """在 query_time 处混合两个快照

        Args:
            from_frame: 起始快照
            to_frame: 下一个快照
            query_time: 播放头时间

        Returns:
            插值快照；超出区间时返回端点快照本身（不外推）
        """
        # 任一端缺失则返回另一端（可能同为 None）
        if from_frame is None:
            self._stats["passthrough"] += 1
            return to_frame
        if to_frame is None:
            self._stats["passthrough"] += 1
            return from_frame

        start, end = from_frame.frame_time, to_frame.frame_time
        if start is None or end is None or start == end:
            self._stats["passthrough"] += 1
            return from_frame

        if query_time <= start:
            self._stats["passthrough"] += 1
            return from_frame
        if query_time >= end:
            self._stats["passthrough"] += 1
            return to_frame

        ratio = (query_time - start).total_seconds() / (end - start).total_seconds()
        return self.blend_ratio(from_frame, to_frame, ratio, frame_time=query_time)

    def blend_ratio(
        self,
        from_frame: Snapshot,
        to_frame: Snapshot,
        ratio: float,
        frame_time: Optional[datetime] = None,
    ) -> Snapshot:
        """按比例混合两个快照（比例限制在 [0, 1]）"""
        ratio = max(0.0, min(1.0, ratio))
        self._stats["blends"] += 1
        return _blend_fields(
            Snapshot,
            from_frame,
            to_frame,
            ratio,
            SNAPSHOT_RULES,
            frame_time=frame_time,
            original_json=None,
            line_number=from_frame.line_number,
        )


_default_engine = InterpolationEngine()


def blend_frames(
    from_frame: Optional[Snapshot],
    to_frame: Optional[Snapshot],
    query_time: datetime,
) -> Optional[Snapshot]:
    """使用默认引擎混合两个快照"""
    return _default_engine.blend_frames(from_frame, to_frame, query_time)
