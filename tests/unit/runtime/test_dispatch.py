from __future__ import annotations

import logging

import numpy as np
import pytest

from imbind.api.colors import CmyaColor, RgbaColor
from imbind.api.enums import Direction
from imbind.api.errors import DeletedError, ImbindError, TypeMismatch
from imbind.color_modifier import ColorModifier
from imbind.filter import Filter
from imbind.font import Font
from imbind.image import Image
from imbind.runtime.binding import BindingRuntime, set_runtime
from imbind.runtime.config import BindingConfig
from imbind.runtime.context_stack import ContextStack


def test_draw_sets_image_then_color_then_invokes(fake_engine) -> None:
    image = Image(8, 8)
    result = image.draw_rect(1, 2, 3, 4, RgbaColor(9, 8, 7, 6))

    assert result is image
    assert fake_engine.calls[1:] == [
        ("set_color", (9, 8, 7, 6)),
        ("draw_rect", (1, 2, 3, 4)),
    ]
    assert fake_engine.stack.active.image is image._resource()


def test_draw_without_color_keeps_active_color(fake_engine) -> None:
    image = Image(8, 8)
    image.fill_ellipse([4, 4], {"w": 2, "h": 3})
    assert fake_engine.calls[-1] == ("fill_ellipse", (4, 4, 2, 3))
    assert "set_color" not in fake_engine.names()


def test_cmya_color_uses_cmya_setter(fake_engine) -> None:
    Image(4, 4).draw_pixel(1, 1, CmyaColor(1, 2, 3, 4))
    assert ("set_color_cmya", (1, 2, 3, 4)) in fake_engine.calls


def test_invalid_color_leaves_engine_untouched(fake_engine) -> None:
    image = Image(8, 8)
    before = list(fake_engine.calls)
    with pytest.raises(TypeMismatch, match="invalid color"):
        image.fill_rect([0, 0, 1, 1], (255, 0, 0, 255))
    assert fake_engine.calls == before


def test_deleted_image_raises_before_any_engine_call(fake_engine) -> None:
    image = Image(8, 8)
    resource = image._resource()
    image.delete()
    calls = len(fake_engine.calls)

    with pytest.raises(DeletedError, match="image deleted"):
        image.draw_pixel(1, 1)
    assert len(fake_engine.calls) == calls
    assert fake_engine.freed == [("image", resource, {"decache": False})]


def test_draw_text_direction_override_is_restored(fake_runtime, fake_engine) -> None:
    seen: list[Direction] = []

    def draw_text(x, y, text):
        seen.append(fake_runtime.stack.active.direction)
        return (10, 5, 11, 0)

    fake_engine.results["draw_text"] = draw_text
    image = Image(8, 8)
    font = Font("face/10")

    assert image.draw_text(font, "hi", 1, 2, Direction.UP) == (10, 5, 11, 0)
    assert seen == [Direction.UP]
    assert fake_runtime.stack.active.direction is Direction.RIGHT
    assert fake_runtime.stack.active.font is font._resource()


def test_copy_transform_clones_first(fake_engine) -> None:
    image = Image(8, 8)
    copy = image.flip_horizontal()

    assert copy is not image
    assert copy.live
    assert fake_engine.names()[-2:] == ["clone_image", "flip_horizontal"]
    assert fake_engine.stack.active.image is copy._resource()


def test_inplace_transform_returns_self(fake_engine) -> None:
    image = Image(8, 8)
    assert image.blur_inplace(2) is image
    assert fake_engine.calls[-1] == ("blur", (2,))


def test_inplace_derive_rebinds_and_frees_previous(fake_engine) -> None:
    image = Image(8, 8)
    old = image._resource()
    assert image.crop_inplace([0, 0, 2, 2]) is image
    assert image._resource() is not old
    assert [entry[1] for entry in fake_engine.freed] == [old]


def test_copy_derive_wraps_new_image(fake_engine) -> None:
    image = Image(8, 8)
    cropped = image.crop(0, 0, 2, 2)
    assert isinstance(cropped, Image)
    assert cropped._resource() is not image._resource()
    assert fake_engine.freed == []


def test_derive_without_result_raises(fake_engine) -> None:
    image = Image(8, 8)
    with pytest.raises(ImbindError, match="rotate produced no image"):
        image.rotate(0.5)


def test_query_pixel_wraps_engine_channels(fake_engine) -> None:
    fake_engine.results["query_pixel_hsva"] = (90.0, 0.5, 1.0, 255)
    image = Image(8, 8)
    color = image.query_pixel_hsva({"x": 1, "y": 2})
    assert (color.hue, color.saturation, color.value, color.alpha) == (90.0, 0.5, 1.0, 255)
    assert fake_engine.calls[-1] == ("query_pixel_hsva", (1, 2))


def test_filter_dispatches_on_argument_type(fake_engine) -> None:
    image = Image(8, 8)
    kernel = Filter(3)

    image.filter("blur(radius=1);")
    assert fake_engine.calls[-1] == ("apply_filter_script", ("blur(radius=1);",))
    image.filter(kernel)
    assert fake_engine.calls[-1] == ("apply_filter", ())
    assert fake_engine.stack.active.filter is kernel._resource()
    with pytest.raises(TypeMismatch):
        image.filter(5)


def test_apply_color_modifier_whole_image_or_rectangle(fake_engine) -> None:
    image = Image(8, 8)
    modifier = ColorModifier()

    image.apply_color_modifier(modifier)
    assert fake_engine.calls[-1] == ("apply_color_modifier", ())
    image.apply_color_modifier(modifier, 1, 2, 3, 4)
    assert fake_engine.calls[-1] == ("apply_color_modifier_to_rectangle", (1, 2, 3, 4))


def test_blend_defaults_merge_alpha_to_true(fake_engine) -> None:
    target = Image(8, 8)
    source = Image(4, 4)
    target.blend_inplace(source, [0, 0, 4, 4], [2, 2, 4, 4])
    name, args = fake_engine.calls[-1]
    assert name == "blend"
    assert args[0] is source._resource()
    assert args[1:] == (True, 0, 0, 4, 4, 2, 2, 4, 4)


def test_deleted_source_image_is_rejected(fake_engine) -> None:
    target = Image(8, 8)
    source = Image(4, 4)
    source.delete()
    with pytest.raises(DeletedError):
        target.copy_alpha(source, 0, 0)


def test_trace_logs_each_dispatch(fake_engine, caplog) -> None:
    stack = ContextStack()
    runtime = BindingRuntime(type(fake_engine)(stack), stack=stack, config=BindingConfig(trace_dispatch=True))
    set_runtime(runtime)
    image = Image(4, 4)
    with caplog.at_level(logging.DEBUG, logger="imbind.dispatch"):
        image.draw_pixel([1, 2], RgbaColor(0, 0, 0, 255))
    assert "dispatch op=draw_pixel" in caplog.text
    assert "set_color" in caplog.text


def test_draw_text_integer_direction_is_coerced(fake_runtime, fake_engine) -> None:
    seen: list[object] = []

    def draw_text(x, y, text):
        seen.append(fake_runtime.stack.active.direction)
        return (5, 10, 5, 10)

    fake_engine.results["draw_text"] = draw_text
    image = Image(8, 8)
    image.draw_text(Font("face/10"), "hi", 0, 0, 3)
    assert seen[0] is Direction.UP


def test_draw_text_unknown_direction_never_reaches_engine(fake_engine) -> None:
    image = Image(8, 8)
    font = Font("face/10")
    with pytest.raises(TypeMismatch):
        image.draw_text(font, "hi", 0, 0, 99)
    assert "draw_text" not in fake_engine.names()


def test_numpy_coordinates_dispatch_as_ints(fake_engine) -> None:
    image = Image(8, 8)
    image.draw_rect(*np.array([1, 2, 3, 4]))
    assert fake_engine.calls[-1] == ("draw_rect", (1, 2, 3, 4))
