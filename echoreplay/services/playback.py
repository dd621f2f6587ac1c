"""
Playback Cursor - 回放播放头

按播放时间驱动 Game：
- 定位播放头所在的相邻帧对
- 调用插值引擎生成中间快照
- 支持按固定步长遍历整场比赛（可变速）
"""

import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generator, Optional
import logging

from ..core.protocol.schema import Snapshot
from ..core.replay.cache import Game
from .interpolation import InterpolationEngine

logger = logging.getLogger(__name__)

# 默认配置
DEFAULT_STEP = float(os.environ.get("ECHOREPLAY_PLAYBACK_STEP", str(1.0 / 30)))


@dataclass
class PlaybackConfig:
    """播放配置"""

    speed: float = 1.0  # 回放速度倍数
    step: float = DEFAULT_STEP  # 采样间隔（秒，播放时间）
    start_offset: float = 0.0  # 起始偏移（秒，相对第一帧）
    end_offset: float = -1.0  # 结束偏移（-1 表示到末尾）


class PlaybackCursor:
    """
    播放头

    使用示例：
    ```python
    game = load_game_file("match.echoreplay")
    cursor = PlaybackCursor(game)

    # 指定时刻
    frame = cursor.sample_offset(12.5)

    # 固定步长遍历
    for frame in cursor.iter_samples():
        render(frame)
    ```
    """

    def __init__(
        self,
        game: Game,
        config: Optional[PlaybackConfig] = None,
        engine: Optional[InterpolationEngine] = None,
    ):
        self.game = game
        self.config = config or PlaybackConfig()
        self.engine = engine or InterpolationEngine()
        self.position: Optional[datetime] = None

    @property
    def start_time(self) -> Optional[datetime]:
        first = self.game.first_frame()
        return first.frame_time if first else None

    @property
    def end_time(self) -> Optional[datetime]:
        last = self.game.last_frame()
        return last.frame_time if last else None

    def seek(self, query_time: datetime) -> None:
        """移动播放头"""
        self.position = query_time

    def sample(self, query_time: Optional[datetime] = None) -> Optional[Snapshot]:
        """获取播放头处的插值快照

        Args:
            query_time: 播放时间，None 表示当前播放头

        Returns:
            插值快照；没有有效帧时返回 None
        """
        if query_time is None:
            query_time = self.position
        if query_time is None:
            query_time = self.start_time
            if query_time is None:
                return None
        self.position = query_time

        index = self.game.find_frame_index(query_time)
        if index is None:
            return None

        # 先取后一帧：若其解析失败被丢弃，前一帧下标不受影响
        to_frame = self.game.get_frame(index + 1) if index + 1 < self.game.frame_count else None
        from_frame = self.game.get_frame(index)
        return self.engine.blend_frames(from_frame, to_frame, query_time)

    def sample_offset(self, seconds: float) -> Optional[Snapshot]:
        """获取相对第一帧 seconds 秒处的快照"""
        start = self.start_time
        if start is None:
            return None
        return self.sample(start + timedelta(seconds=seconds))

    def iter_samples(
        self, step: Optional[float] = None
    ) -> Generator[Snapshot, None, None]:
        """按固定步长遍历整场比赛"""
        start, end = self.start_time, self.end_time
        if start is None or end is None:
            logger.warning("没有有效帧，无法播放")
            return

        step = step or self.config.step
        speed = self.config.speed if self.config.speed > 0 else 1.0
        increment = timedelta(seconds=step * speed)

        current = start + timedelta(seconds=self.config.start_offset)
        if self.config.end_offset >= 0:
            end = min(end, start + timedelta(seconds=self.config.end_offset))

        while current <= end:
            snapshot = self.sample(current)
            if snapshot is None:
                break
            yield snapshot
            current += increment
