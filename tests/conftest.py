"""
共享测试夹具

sample_frame.json 是一帧完整的比赛数据（两队三名玩家，混合多种变换编码）。
"""

import copy
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

# 添加路径
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from echoreplay.core.protocol.schema import Snapshot
from echoreplay.core.replay.parser import parse_json

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_TIME = datetime(2021, 3, 14, 20, 15, 33, 123000)


def _load_sample() -> Dict[str, Any]:
    with open(FIXTURES_DIR / "sample_frame.json", "r", encoding="utf-8") as f:
        return json.load(f)


_SAMPLE = _load_sample()


def format_time(moment: datetime) -> str:
    """录制工具的定长点分隔格式: 2021/03/14 20.15.33.123"""
    return moment.strftime("%Y/%m/%d %H.%M.%S.") + f"{moment.microsecond // 1000:03d}"


@pytest.fixture
def sample_payload() -> Dict[str, Any]:
    """每个测试拿到独立的副本"""
    return copy.deepcopy(_SAMPLE)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_line() -> Callable[..., str]:
    """构造一行回放数据"""

    def _make(payload: Optional[Dict[str, Any]] = None, seconds: float = 0.0) -> str:
        data = payload if payload is not None else copy.deepcopy(_SAMPLE)
        moment = BASE_TIME + timedelta(seconds=seconds)
        return f"{format_time(moment)}\t{json.dumps(data)}"

    return _make


@pytest.fixture
def make_snapshot() -> Callable[..., Snapshot]:
    """直接从 payload 构造快照（跳过时间戳列）"""

    def _make(payload: Optional[Dict[str, Any]] = None, seconds: float = 0.0) -> Snapshot:
        data = payload if payload is not None else copy.deepcopy(_SAMPLE)
        result = parse_json(json.dumps(data), frame_time=BASE_TIME + timedelta(seconds=seconds))
        assert result.ok, result.detail
        return result.snapshot

    return _make
