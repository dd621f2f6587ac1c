#!/usr/bin/env python3
"""
回放文件检查工具

用法:
    echoreplay-inspect match.echoreplay                 # 显示基本信息
    echoreplay-inspect match.echoreplay --traverse      # 解析全部帧并统计丢弃
    echoreplay-inspect match.echoreplay --at 10 --at 25.5   # 显示指定时刻的插值状态
"""

import sys
import argparse
import logging
from collections import Counter
from typing import List, Optional

from echoreplay.core.protocol.schema import Snapshot
from echoreplay.core.protocol.vectors import Vector3
from echoreplay.core.replay.cache import DEFAULT_PAYLOAD_LENGTH, GameConfig
from echoreplay.core.replay.loader import load_game_file
from echoreplay.services.playback import PlaybackCursor


def _fmt_vector(vector: Optional[Vector3]) -> str:
    if vector is None:
        return "-"
    return f"({vector.x:7.2f}, {vector.y:7.2f}, {vector.z:7.2f})"


def _print_sample(offset: float, snapshot: Snapshot) -> None:
    clock = f"{snapshot.game_clock:.2f}" if snapshot.game_clock is not None else "-"
    print(f"\n[t+{offset:.2f}s] status={snapshot.game_status}  clock={clock}")
    disc = snapshot.disc
    print(f"  disc     {_fmt_vector(disc.position if disc else None)}")
    for team_index, player in snapshot.players():
        print(f"  [{team_index}] {player.name or '?':16s} {_fmt_vector(player.world_position)}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="回放文件检查")
    parser.add_argument("path", help="回放文件 (.echoreplay / .gz / 文本)")
    parser.add_argument(
        "--at", "-t",
        type=float,
        action="append",
        default=[],
        help="显示相对第一帧 N 秒处的插值状态（可重复）",
    )
    parser.add_argument(
        "--traverse",
        action="store_true",
        help="解析全部帧并统计丢弃的行",
    )
    parser.add_argument(
        "--min-payload",
        type=int,
        default=DEFAULT_PAYLOAD_LENGTH,
        help=f"JSON 最小长度 (默认: {DEFAULT_PAYLOAD_LENGTH})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="输出调试日志",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        game = load_game_file(args.path, GameConfig(min_payload_length=args.min_payload))
    except OSError as e:
        print(f"❌ {e}")
        return 1

    first = game.first_frame()
    if first is None:
        print(f"❌ 文件中没有有效的比赛帧: {args.path}")
        return 1

    if args.traverse:
        game.materialize_all()

    last = game.last_frame()
    print(f"文件: {args.path}")
    print(f"  帧数: {game.frame_count}")
    print(f"  时间: {first.frame_time} -> {last.frame_time}  ({game.duration:.1f}s)")
    print(f"  会话: {first.sessionid}  地图: {first.map_name}  类型: {first.match_type}")
    print(f"  比分: 蓝 {last.blue_points} - 橙 {last.orange_points}  状态: {last.game_status}")

    if game.discarded:
        counts = Counter(record.error.value for record in game.discarded)
        summary = ", ".join(f"{name}={count}" for name, count in counts.most_common())
        print(f"  丢弃: {len(game.discarded)} 行 ({summary})")

    if args.at:
        cursor = PlaybackCursor(game)
        for offset in args.at:
            snapshot = cursor.sample_offset(offset)
            if snapshot is None:
                print(f"\n[t+{offset:.2f}s] 无数据")
                continue
            _print_sample(offset, snapshot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
