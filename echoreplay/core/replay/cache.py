"""
Replay Frame Cache - 回放帧缓存

持有整场比赛的原始行，按需解析为快照：
- 懒解析：只在请求时解析对应行，结果永久缓存
- 自愈：解析失败的行连同缓存槽一起永久删除，后续下标整体前移
- 单线程：丢弃会改变下标含义，调用方不能跨调用缓存下标
  （用 generation 检测重编号，或用 Snapshot.line_number 作为稳定标识）
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional
import logging

from ..protocol.schema import Snapshot
from .parser import DEFAULT_MIN_PAYLOAD_LENGTH, ParseError, ParseResult, parse_line

logger = logging.getLogger(__name__)

# 默认配置
DEFAULT_PAYLOAD_LENGTH = int(
    os.environ.get("ECHOREPLAY_MIN_PAYLOAD_LENGTH", str(DEFAULT_MIN_PAYLOAD_LENGTH))
)


@dataclass
class GameConfig:
    """帧缓存配置"""

    min_payload_length: int = DEFAULT_PAYLOAD_LENGTH  # 不超过此长度的 JSON 视为非比赛数据


@dataclass
class DiscardRecord:
    """一次丢弃记录"""

    line_number: int
    error: ParseError
    detail: str = ""


class Game:
    """
    一场比赛的回放数据

    使用示例：
    ```python
    from echoreplay import load_game, blend_frames

    game = load_game(lines)
    a = game.get_frame(10)
    b = game.get_frame(11)
    mid = blend_frames(a, b, query_time)
    ```
    """

    def __init__(
        self,
        raw_lines: Iterable[str],
        config: Optional[GameConfig] = None,
        source: Optional[str] = None,
    ):
        self.config = config or GameConfig()
        self.source = source

        # 原始行与快照槽一一对应，长度始终相等
        self._raw_lines: List[str] = list(raw_lines)
        self._frames: List[Optional[Snapshot]] = [None] * len(self._raw_lines)
        # 每个槽对应的源文件行号，丢弃后仍保持原值
        self._line_numbers: List[int] = list(range(len(self._raw_lines)))

        # 每次丢弃递增，用于检测下标重编号
        self.generation: int = 0
        self.discarded: List[DiscardRecord] = []

        self._stats = {
            "parsed": 0,
            "discarded": 0,
            "cache_hits": 0,
        }

    @property
    def frame_count(self) -> int:
        """当前存活帧数（含尚未解析的行）"""
        return len(self._raw_lines)

    def __len__(self) -> int:
        return self.frame_count

    @property
    def stats(self) -> Dict[str, Any]:
        return dict(self._stats)

    def load_frame(self, index: int) -> ParseResult:
        """获取或解析指定帧，返回显式结果

        解析失败的行会被删除，然后在同一下标上重试（即下一条存活记录），
        直到成功或没有剩余记录。
        """
        if index < 0 or index >= self.frame_count:
            return ParseResult.failure(
                ParseError.INDEX_OUT_OF_RANGE,
                f"下标 {index} 超出范围 [0, {self.frame_count})",
            )

        while index < self.frame_count:
            cached = self._frames[index]
            if cached is not None:
                self._stats["cache_hits"] += 1
                return ParseResult.success(cached)

            line_number = self._line_numbers[index]
            result = parse_line(
                self._raw_lines[index],
                min_payload_length=self.config.min_payload_length,
                line_number=line_number,
            )
            if result.ok:
                self._frames[index] = result.snapshot
                self._stats["parsed"] += 1
                return result

            # 删除后同一下标指向下一条记录（可能已缓存）
            self._discard(index, result)

        if self.frame_count == 0:
            logger.error(f"文件中没有有效的比赛帧: {self.source or '<memory>'}")
            detail = "文件中没有有效的比赛帧"
        else:
            logger.error(f"下标 {index} 之后没有有效的比赛帧")
            detail = f"下标 {index} 之后没有有效的比赛帧"
        return ParseResult.failure(ParseError.NO_VALID_FRAMES, detail)

    def get_frame(self, index: int) -> Optional[Snapshot]:
        """获取指定帧，失败时返回 None"""
        return self.load_frame(index).snapshot

    def _discard(self, index: int, result: ParseResult) -> None:
        """永久删除一行及其缓存槽"""
        line_number = self._line_numbers[index]
        del self._raw_lines[index]
        del self._frames[index]
        del self._line_numbers[index]

        self.generation += 1
        self._stats["discarded"] += 1
        self.discarded.append(
            DiscardRecord(line_number=line_number, error=result.error, detail=result.detail)
        )
        logger.warning(
            f"丢弃第 {line_number} 行 (帧 {index}): {result.error.value} {result.detail}"
        )

    def iter_frames(self) -> Iterator[Snapshot]:
        """按顺序遍历所有有效帧（遍历过程中会丢弃坏行）"""
        index = 0
        while index < self.frame_count:
            snapshot = self.get_frame(index)
            if snapshot is None:
                break
            yield snapshot
            index += 1

    def materialize_all(self) -> int:
        """解析全部帧，返回剩余有效帧数"""
        for _ in self.iter_frames():
            pass
        return self.frame_count

    def first_frame(self) -> Optional[Snapshot]:
        return self.get_frame(0)

    def last_frame(self) -> Optional[Snapshot]:
        """最后一个有效帧（末尾坏行被丢弃后继续检查新的末尾）"""
        while self.frame_count > 0:
            result = self.load_frame(self.frame_count - 1)
            if result.ok:
                return result.snapshot
        return None

    @property
    def duration(self) -> float:
        """首尾有效帧的时间跨度（秒）"""
        first = self.first_frame()
        last = self.last_frame()
        if first is None or last is None:
            return 0.0
        return (last.frame_time - first.frame_time).total_seconds()

    def find_frame_index(self, query_time: datetime) -> Optional[int]:
        """二分查找时间戳 <= query_time 的最后一帧下标

        查找过程中可能发生丢弃，每轮都重新读取 frame_count。
        query_time 早于第一帧时返回 0，没有有效帧时返回 None。
        """
        if self.first_frame() is None:
            return None

        lo, hi = 0, self.frame_count
        while lo < min(hi, self.frame_count):
            hi = min(hi, self.frame_count)
            mid = (lo + hi) // 2
            snapshot = self.get_frame(mid)
            if snapshot is None:
                # mid 之后全部无效
                hi = min(mid, self.frame_count)
                continue
            if snapshot.frame_time <= query_time:
                lo = mid + 1
            else:
                hi = mid

        return max(lo - 1, 0)


def load_game(
    lines: Iterable[str],
    config: Optional[GameConfig] = None,
    source: Optional[str] = None,
) -> Game:
    """从行序列创建 Game（去掉行尾换行符）"""
    raw_lines = [line.rstrip("\r\n") for line in lines]
    game = Game(raw_lines, config=config, source=source)
    logger.info(f"加载回放: {source or '<memory>'}, 行数: {game.frame_count}")
    return game
