"""
Transform Tests - 变换格式归一化测试

测试内容：
1. 三种历史编码的识别
2. 无法识别的格式
3. 写回原编码
"""

import pytest

from echoreplay.core.protocol.transforms import (
    ConversionFailed,
    Transform,
    TransformEncoding,
    resolve_transform,
    try_resolve_transform,
)
from echoreplay.core.protocol.vectors import Vector3


BASIS = {"forward": [0.0, 0.0, 1.0], "left": [1.0, 0.0, 0.0], "up": [0.0, 1.0, 0.0]}


class TestResolveTransform:
    """resolve_transform 测试"""

    def test_pos_object(self):
        """测试 pos 字段对象"""
        t = resolve_transform({"pos": [1.0, 2.0, 3.0], **BASIS})
        assert t.encoding == TransformEncoding.POS_OBJECT
        assert t.position == Vector3(3.0, 2.0, 1.0)
        assert t.forward == Vector3(1.0, 0.0, 0.0)
        assert t.has_basis is True

    def test_position_object(self):
        """测试 position 字段对象（旧字段名）"""
        t = resolve_transform({"position": [4.0, 5.0, 6.0], **BASIS})
        assert t.encoding == TransformEncoding.POSITION_OBJECT
        assert t.position == Vector3(6.0, 5.0, 4.0)

    def test_pos_preferred_over_position(self):
        """测试同时存在时优先使用 pos"""
        t = resolve_transform({"pos": [1.0, 1.0, 1.0], "position": [9.0, 9.0, 9.0]})
        assert t.position == Vector3(1.0, 1.0, 1.0)
        assert t.encoding == TransformEncoding.POS_OBJECT

    def test_bare_array(self):
        """测试裸坐标数组"""
        t = resolve_transform([1.0, 2.0, 3.0])
        assert t.encoding == TransformEncoding.ARRAY
        assert t.is_point is True
        assert t.position == Vector3(3.0, 2.0, 1.0)
        assert t.forward is None and t.left is None and t.up is None
        assert t.has_basis is False

    def test_partial_basis_stays_absent(self):
        """测试缺失的子字段保持缺失"""
        t = resolve_transform({"pos": [0.0, 0.0, 0.0], "forward": [0.0, 0.0, 1.0]})
        assert t.forward is not None
        assert t.left is None
        assert t.up is None

    def test_null_subfield_is_absent(self):
        t = resolve_transform({"pos": None, "position": [1.0, 2.0, 3.0]})
        assert t.position == Vector3(3.0, 2.0, 1.0)
        assert t.encoding == TransformEncoding.POSITION_OBJECT

    def test_passthrough(self):
        """测试已归一化的变换原样返回"""
        t = resolve_transform([1.0, 2.0, 3.0])
        assert resolve_transform(t) is t

    @pytest.mark.parametrize(
        "bad",
        [
            "1,2,3",
            42,
            [1.0, 2.0],
            {"rotation": [0, 0, 0, 1]},
            {"pos": [1.0, 2.0]},
            {"pos": [0, 0, 0], "forward": "north"},
        ],
    )
    def test_unrecognized_shapes(self, bad):
        """测试无法识别的格式"""
        with pytest.raises(ConversionFailed):
            resolve_transform(bad)

    def test_conversion_failed_is_value_error(self):
        assert issubclass(ConversionFailed, ValueError)


class TestTryResolveTransform:
    """try_resolve_transform 测试"""

    def test_failure_returns_none(self, caplog):
        """测试失败时返回 None 并记录警告"""
        assert try_resolve_transform({"bogus": 1}, "rhand") is None
        assert "rhand" in caplog.text

    def test_none_stays_none(self):
        assert try_resolve_transform(None) is None

    def test_success(self):
        assert try_resolve_transform([0.0, 1.0, 2.0]).position == Vector3(2.0, 1.0, 0.0)


class TestTransformWire:
    """写回原编码测试"""

    def test_bare_point_round_trip(self):
        """测试裸坐标经过一次换轴 / 还原后坐标不变"""
        raw = [0.125, -3.5, 12.0]
        t = resolve_transform(raw)
        assert t.model_dump() == pytest.approx(raw)

    def test_pos_object_round_trip(self):
        raw = {"pos": [1.0, 2.0, 3.0], **BASIS}
        assert resolve_transform(raw).model_dump() == raw

    def test_position_object_omits_absent(self):
        raw = {"position": [1.0, 2.0, 3.0], "up": [0.0, 1.0, 0.0]}
        assert resolve_transform(raw).model_dump() == raw

    def test_from_legacy(self):
        """测试旧版扁平字段组装"""
        assert Transform.from_legacy(None) is None
        t = Transform.from_legacy(Vector3(1, 2, 3), forward=Vector3(0, 0, 1))
        assert t.position == Vector3(1, 2, 3)
        assert t.encoding == TransformEncoding.POSITION_OBJECT
        assert t.left is None
