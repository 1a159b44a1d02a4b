from __future__ import annotations

import numpy as np
import pytest

from imbind.api import colors
from imbind.api.colors import CmyaColor, HlsaColor, HsvaColor, RgbaColor
from imbind.api.errors import TypeMismatch
from imbind.api.geometry import Border, ShapeRecord, is_composite, is_scalar


def test_rgba_color_constructors_agree() -> None:
    expected = RgbaColor(1, 2, 3, 4)
    assert RgbaColor([1, 2, 3, 4]) == expected
    assert RgbaColor({"red": 1, "green": 2, "blue": 3, "alpha": 4}) == expected
    assert RgbaColor() == RgbaColor(0, 0, 0, 0)


def test_color_aliases_read_and_write() -> None:
    color = RgbaColor(1, 2, 3, 4)
    assert (color.r, color.g, color.b, color.a) == (1, 2, 3, 4)
    color.r = 200
    assert color.red == 200
    hsva = HsvaColor(10, 0.5, 0.25, 255)
    assert (hsva.h, hsva.s, hsva.v) == (10.0, 0.5, 0.25)
    assert HlsaColor(1, 0.5, 0.5, 1).l == 0.5
    assert CmyaColor(1, 2, 3, 4).y == 3


def test_color_variants_do_not_compare_equal() -> None:
    assert RgbaColor(1, 2, 3, 4) != CmyaColor(1, 2, 3, 4)


def test_color_constructor_rejects_bad_shapes() -> None:
    with pytest.raises(TypeMismatch):
        RgbaColor(1, 2, 3)
    with pytest.raises(TypeMismatch):
        RgbaColor([1, 2])
    with pytest.raises(TypeMismatch, match="missing keys: alpha"):
        RgbaColor({"red": 1, "green": 2, "blue": 3})


def test_unknown_attribute_raises_attribute_error() -> None:
    with pytest.raises(AttributeError):
        RgbaColor().hue


def test_named_constants() -> None:
    assert colors.BLACK == RgbaColor(0, 0, 0, 255)
    assert colors.WHITE == RgbaColor(255, 255, 255, 255)
    assert colors.CLEAR.alpha == 0


def test_border_aliases_and_iteration() -> None:
    border = Border(1, 2, 3, 4)
    assert (border.l, border.t, border.r, border.b) == (1, 2, 3, 4)
    assert list(border) == [1, 2, 3, 4]
    assert Border.of(border) is border
    assert Border.of([4, 3, 2, 1]).left == 4


def test_shape_record_defaults() -> None:
    record = ShapeRecord()
    assert record.is_empty
    assert record.rect == (0, 0, 0, 0)
    assert record.dest_rect == (0, 0, 0, 0)


def test_argument_classification() -> None:
    assert is_composite([1, 2])
    assert is_composite({"x": 1})
    assert not is_composite("xy")
    assert not is_composite(RgbaColor())
    assert is_scalar(1.5)
    assert not is_scalar(False)
    assert is_scalar(np.int64(3))
    assert is_scalar(np.float32(0.5))


def test_non_numeric_channels_raise_type_mismatch() -> None:
    with pytest.raises(TypeMismatch, match="RgbaColor.red must be a number"):
        RgbaColor("a", 0, 0, 0)
    color = RgbaColor()
    with pytest.raises(TypeMismatch, match="RgbaColor.alpha"):
        color.a = None


def test_numpy_channels_coerce_to_plain_numbers() -> None:
    color = RgbaColor(*np.array([1, 2, 3, 4]))
    assert color == RgbaColor(1, 2, 3, 4)
    assert type(color.red) is int
