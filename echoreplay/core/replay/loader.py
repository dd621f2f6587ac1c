"""
Replay File Loader - 回放文件读取

支持的文件格式：
- .echoreplay: zip 压缩包，读取第一个成员
- .gz: gzip 压缩文本
- 其他: UTF-8 文本（容忍 BOM）

非法 UTF-8 字节不会导致整个文件失败，只会让所在行在解析时被丢弃。
"""

import gzip
import io
import zipfile
from pathlib import Path
from typing import List, Optional, Union
import logging

from .cache import Game, GameConfig, load_game

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8-sig"
# 非法字节替换为 U+FFFD，只影响所在行
DECODE_ERRORS = "replace"


def read_replay_lines(path: Union[str, Path]) -> List[str]:
    """读取回放文件的所有行

    Raises:
        FileNotFoundError: 文件不存在
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"找不到回放文件: {path}")

    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as archive:
            members = [info for info in archive.infolist() if not info.is_dir()]
            if not members:
                logger.warning(f"压缩包为空: {path}")
                return []
            if len(members) > 1:
                logger.debug(f"压缩包包含 {len(members)} 个文件, 只读取 {members[0].filename}")
            with archive.open(members[0]) as raw:
                text = io.TextIOWrapper(raw, encoding=TEXT_ENCODING, errors=DECODE_ERRORS).read()
    elif path.suffix == ".gz":
        with gzip.open(path, "rt", encoding=TEXT_ENCODING, errors=DECODE_ERRORS) as f:
            text = f.read()
    else:
        with open(path, "r", encoding=TEXT_ENCODING, errors=DECODE_ERRORS) as f:
            text = f.read()

    # 只按换行符切分，JSON 字符串中可以出现未转义的 U+2028 等分隔符
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


def load_game_file(
    path: Union[str, Path],
    config: Optional[GameConfig] = None,
) -> Game:
    """读取回放文件并创建 Game"""
    lines = read_replay_lines(path)
    return load_game(lines, config=config, source=str(path))
