"""
Vector Types - 三维向量与坐标轴转换

回放 JSON 中的三维向量以 [z, y, x] 顺序存储，与引擎空间的 (x, y, z)
第一、三分量互换。本模块负责：
- Vector3: 引擎空间向量（支持加减、数乘、线性插值）
- from_array / to_array: 读写时的坐标轴互换
- lerp_float: 可空标量插值
"""

import math
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional, Sequence, Tuple

from pydantic import PlainSerializer, PlainValidator

# 容差比较阈值
EPSILON = 1e-5


@dataclass(frozen=True, eq=False)
class Vector3:
    """引擎空间三维向量（容差比较，不可哈希）"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return (
            abs(self.x - other.x) < EPSILON
            and abs(self.y - other.y) < EPSILON
            and abs(self.z - other.z) < EPSILON
        )

    __hash__ = None

    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def distance_to(self, other: "Vector3") -> float:
        return (self - other).magnitude()

    def lerp(self, other: "Vector3", t: float) -> "Vector3":
        """线性插值: self + (other - self) * t"""
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_array(cls, data: Sequence[Any]) -> "Vector3":
        """从回放数组 [a, b, c] 读取，转换为引擎空间 (c, b, a)

        Raises:
            ValueError: 数组长度不是 3 或包含非数字元素
        """
        if isinstance(data, (str, bytes, dict)) or not isinstance(data, Sequence):
            raise ValueError(f"向量必须是长度为 3 的数组, 收到 {type(data).__name__}")
        if len(data) != 3:
            raise ValueError(f"向量必须是长度为 3 的数组, 收到长度 {len(data)}")
        for v in data:
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise ValueError(f"向量分量必须是数字, 收到 {v!r}")
        return cls(x=float(data[2]), y=float(data[1]), z=float(data[0]))

    def to_array(self) -> List[float]:
        """写回回放数组格式 [z, y, x]"""
        return [self.z, self.y, self.x]


def _coerce_vector(value: Any) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3.from_array(value)


# pydantic 字段类型：读取时交换坐标轴，序列化时换回
Vec3 = Annotated[
    Vector3,
    PlainValidator(_coerce_vector),
    PlainSerializer(lambda v: v.to_array(), return_type=list),
]


def lerp_vector(
    a: Optional[Vector3], b: Optional[Vector3], t: float
) -> Optional[Vector3]:
    """可空向量插值，任一端缺失则结果缺失"""
    if a is None or b is None:
        return None
    return a.lerp(b, t)


def lerp_float(a: Optional[float], b: Optional[float], t: float) -> Optional[float]:
    """可空标量插值，任一端缺失则结果缺失"""
    if a is None or b is None:
        return None
    return a + (b - a) * t
