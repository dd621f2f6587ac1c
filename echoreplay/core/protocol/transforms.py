"""
Transform Resolver - 变换数据格式归一化

回放数据中的变换（位置 + 朝向基）存在多种历史编码：
1. 对象格式 {"pos": [...], "forward": [...], "left": [...], "up": [...]}
2. 对象格式 {"position": [...], ...}（旧字段名）
3. 裸坐标数组 [a, b, c]（仅位置）

所有格式在入口处统一转换为 Transform，下游代码只面对一种结构。
无法识别的格式抛出 ConversionFailed，由所属字段降级为缺失。
"""

from enum import Enum
from typing import Any, Dict, Optional
import logging

from pydantic import BaseModel, model_serializer

from .vectors import Vec3, Vector3

logger = logging.getLogger(__name__)

# 位置字段的两种历史名称，按优先级排列
POINT_KEYS = ("pos", "position")
BASIS_KEYS = ("forward", "left", "up")


class ConversionFailed(ValueError):
    """变换数据无法识别"""


class TransformEncoding(str, Enum):
    """变换的原始编码方式"""

    ARRAY = "array"
    POS_OBJECT = "pos"
    POSITION_OBJECT = "position"


class Transform(BaseModel):
    """归一化后的变换：位置 + 可选的正交朝向基"""

    position: Optional[Vec3] = None
    forward: Optional[Vec3] = None
    left: Optional[Vec3] = None
    up: Optional[Vec3] = None
    encoding: TransformEncoding = TransformEncoding.POS_OBJECT

    @property
    def has_basis(self) -> bool:
        return self.forward is not None and self.left is not None and self.up is not None

    @property
    def is_point(self) -> bool:
        return self.encoding == TransformEncoding.ARRAY

    @classmethod
    def from_legacy(
        cls,
        position: Optional[Vector3],
        forward: Optional[Vector3] = None,
        left: Optional[Vector3] = None,
        up: Optional[Vector3] = None,
    ) -> Optional["Transform"]:
        """从旧版扁平字段组装变换，全部缺失时返回 None"""
        if position is None and forward is None and left is None and up is None:
            return None
        return cls.model_construct(
            position=position,
            forward=forward,
            left=left,
            up=up,
            encoding=TransformEncoding.POSITION_OBJECT,
        )

    @model_serializer(mode="plain")
    def to_wire(self) -> Any:
        """按原始编码写回回放格式"""
        if self.encoding == TransformEncoding.ARRAY:
            return self.position.to_array() if self.position is not None else None

        data: Dict[str, Any] = {}
        if self.position is not None:
            data[self.encoding.value] = self.position.to_array()
        for key in BASIS_KEYS:
            vector = getattr(self, key)
            if vector is not None:
                data[key] = vector.to_array()
        return data


def _read_vector(raw: Dict[str, Any], key: str) -> Optional[Vector3]:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return Vector3.from_array(value)
    except ValueError as e:
        raise ConversionFailed(f"字段 {key}: {e}") from e


def resolve_transform(raw: Any) -> Transform:
    """将任意已知编码的变换数据转换为 Transform

    Args:
        raw: JSON 解析后的变换数据（dict / list）或已归一化的 Transform

    Returns:
        归一化的 Transform

    Raises:
        ConversionFailed: 数据不符合任何已知格式
    """
    if isinstance(raw, Transform):
        return raw

    if isinstance(raw, dict):
        if not any(key in raw for key in POINT_KEYS + BASIS_KEYS):
            raise ConversionFailed(f"无法识别的变换对象, 字段: {sorted(raw)[:5]}")

        position = None
        encoding = TransformEncoding.POS_OBJECT
        for key in POINT_KEYS:
            position = _read_vector(raw, key)
            if position is not None:
                encoding = TransformEncoding(key)
                break

        return Transform.model_construct(
            position=position,
            forward=_read_vector(raw, "forward"),
            left=_read_vector(raw, "left"),
            up=_read_vector(raw, "up"),
            encoding=encoding,
        )

    if isinstance(raw, (list, tuple)):
        try:
            point = Vector3.from_array(raw)
        except ValueError as e:
            raise ConversionFailed(str(e)) from e
        return Transform.model_construct(
            position=point,
            forward=None,
            left=None,
            up=None,
            encoding=TransformEncoding.ARRAY,
        )

    raise ConversionFailed(f"无法识别的变换类型: {type(raw).__name__}")


def try_resolve_transform(raw: Any, field_name: str = "transform") -> Optional[Transform]:
    """归一化变换，失败时记录警告并返回 None（仅影响该字段）"""
    if raw is None:
        return None
    try:
        return resolve_transform(raw)
    except ConversionFailed as e:
        logger.warning(f"变换字段 {field_name} 转换失败, 已置为缺失: {e}")
        return None
