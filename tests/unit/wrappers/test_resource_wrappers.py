from __future__ import annotations

import pytest

from imbind.api.colors import RgbaColor
from imbind.api.errors import FileDoesNotExist, TypeMismatch
from imbind.cache import Cache
from imbind.color_modifier import ColorModifier
from imbind.filter import Filter
from imbind.font import Font, TextIndex
from imbind.gradient import Gradient
from imbind.polygon import Polygon


def test_gradient_adds_pairs_in_order(fake_engine) -> None:
    gradient = Gradient((0, RgbaColor(255, 0, 0, 255)), (10, RgbaColor(0, 0, 255, 255)))
    assert fake_engine.calls == [
        ("set_color", (255, 0, 0, 255)),
        ("add_color_to_color_range", (0,)),
        ("set_color", (0, 0, 255, 255)),
        ("add_color_to_color_range", (10,)),
    ]
    assert fake_engine.stack.active.gradient is gradient._resource()


def test_gradient_stop_without_color_uses_active_color(fake_engine) -> None:
    Gradient().add_color(5)
    assert fake_engine.calls == [("add_color_to_color_range", (5,))]


def test_gradient_rejects_invalid_color_before_adding(fake_engine) -> None:
    gradient = Gradient()
    with pytest.raises(TypeMismatch):
        gradient.add_color(3, "blue")
    assert fake_engine.calls == []


def test_polygon_points_accept_every_shape(fake_engine) -> None:
    polygon = Polygon((0, 0), [4, 0], {"x": 4, "y": 4})
    polygon.add_point(0, 4)
    resource = polygon._resource()
    points = [args[1:] for name, args in fake_engine.calls if name == "polygon_add_point"]
    assert points == [(0, 0), (4, 0), (4, 4), (0, 4)]
    assert all(args[0] is resource for name, args in fake_engine.calls if name == "polygon_add_point")

    polygon.contains([1, 1])
    assert fake_engine.calls[-1] == ("polygon_contains_point", (resource, 1, 1))


def test_polygon_release_passes_resource(fake_runtime, fake_engine) -> None:
    polygon = Polygon()
    resource = polygon._resource()
    fake_runtime.registry.release(polygon)
    assert fake_engine.freed == [("polygon", resource, {})]


def test_filter_taps_use_rgba_weights(fake_engine) -> None:
    kernel = Filter(3)
    kernel.set(1, 2, RgbaColor(10, 20, 30, 40))
    assert fake_engine.calls[-1] == ("filter_set", ("all", 1, 2, 40, 10, 20, 30))
    kernel.set_red([0, 0], RgbaColor(5, 0, 0, 0))
    assert fake_engine.calls[-1] == ("filter_set", ("red", 0, 0, 0, 5, 0, 0))
    kernel.divisors(RgbaColor(1, 2, 3, 4))
    assert fake_engine.calls[-1] == ("filter_divisors", (4, 1, 2, 3))
    assert fake_engine.stack.active.filter is kernel._resource()


def test_filter_tap_requires_rgba(fake_engine) -> None:
    with pytest.raises(TypeMismatch):
        Filter(3).set_blue(0, 0)


def test_color_modifier_setters_target_their_table(fake_engine) -> None:
    modifier = ColorModifier()
    modifier.gamma(2).brightness(0.5).reset()
    assert fake_engine.names() == [
        "modify_color_modifier_gamma",
        "modify_color_modifier_brightness",
        "reset_color_modifier",
    ]
    assert fake_engine.calls[0] == ("modify_color_modifier_gamma", (2.0,))
    assert fake_engine.stack.active.color_modifier is modifier._resource()


def test_font_load_failure_raises_file_error(fake_engine) -> None:
    with pytest.raises(FileDoesNotExist, match='"missing/12"'):
        Font.load("missing/12")


def test_font_metrics_install_font_in_context(fake_engine) -> None:
    font = Font("sans/12")
    fake_engine.results["text_index"] = (1, 6, 0, 6, 14)
    hit = font.text_index("abc", {"x": 7, "y": 3})
    assert hit == TextIndex(1, 6, 0, 6, 14)
    assert fake_engine.calls[-1] == ("text_index", ("abc", 7, 3))
    assert fake_engine.stack.active.font is font._resource()


def test_font_release_restores_active_font(fake_runtime, fake_engine) -> None:
    keep = Font("keep/10")
    drop = Font("drop/10")
    fake_runtime.stack.active.font = keep._resource()
    dropped = drop._resource()
    fake_runtime.registry.release(drop)
    assert fake_engine.freed == [("font", dropped, {})]
    assert fake_runtime.stack.active.font is keep._resource()


def test_font_path_class_methods(fake_engine) -> None:
    fake_engine.results["list_font_path"] = ("/fonts",)
    Font.add_path("/fonts")
    assert Font.list_paths() == ("/fonts",)
    Font.remove_path("/fonts")
    assert fake_engine.names()[-3:] == ["add_font_path", "list_font_path", "remove_font_path"]


def test_cache_sizes_clamp_negative_values(fake_engine) -> None:
    Cache.set_image_size(-5)
    Cache.set_font_size(2048)
    Cache.flush_font_cache()
    assert fake_engine.calls == [
        ("set_cache_size", (0,)),
        ("set_font_cache_size", (2048,)),
        ("flush_font_cache", ()),
    ]
