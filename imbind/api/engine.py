"""Public imaging-engine port.

Every primitive reads its target image, colour, font, gradient, filter,
colour modifier, clip rectangle and flags from the active frame of the
context stack the engine was created with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from imbind.runtime.config import BindingConfig
    from imbind.runtime.context_stack import ContextStack


class EngineResource(Protocol):
    """Opaque engine-owned resource boundary contract."""


class ImagingEngine(Protocol):
    """Global-state imaging primitives."""

    # context colour
    def set_color(self, red: int, green: int, blue: int, alpha: int) -> None: ...

    def set_color_hsva(self, hue: float, saturation: float, value: float, alpha: int) -> None: ...

    def set_color_hlsa(self, hue: float, lightness: float, saturation: float, alpha: int) -> None: ...

    def set_color_cmya(self, cyan: int, magenta: int, yellow: int, alpha: int) -> None: ...

    # image lifecycle
    def create_image(self, width: int, height: int) -> EngineResource | None: ...

    def create_image_using_data(self, width: int, height: int, data: bytes | bytearray) -> EngineResource | None: ...

    def create_image_using_copied_data(self, width: int, height: int, data: bytes | bytearray) -> EngineResource | None: ...

    def load_image(self, path: str, *, immediate: bool = False, cache: bool = True) -> tuple[EngineResource | None, int]: ...

    def save_image(self, path: str) -> int: ...

    def free_image(self, *, decache: bool = False) -> None: ...

    def clone_image(self) -> EngineResource: ...

    # image properties
    def image_width(self) -> int: ...

    def image_height(self) -> int: ...

    def image_filename(self) -> str | None: ...

    def image_format(self) -> str | None: ...

    def set_image_format(self, name: str) -> None: ...

    def image_has_alpha(self) -> bool: ...

    def set_image_has_alpha(self, flag: bool) -> None: ...

    def image_border(self) -> tuple[int, int, int, int]: ...

    def set_image_border(self, left: int, top: int, right: int, bottom: int) -> None: ...

    def set_image_changes_on_disk(self) -> None: ...

    def set_image_irrelevant(self, aspect: str, flag: bool) -> None: ...

    def image_data(self, *, read_only: bool = False) -> bytes | bytearray: ...

    def put_back_image_data(self, data: bytes | bytearray) -> None: ...

    def query_pixel(self, x: int, y: int) -> tuple[int, int, int, int]: ...

    def query_pixel_hsva(self, x: int, y: int) -> tuple[float, float, float, int]: ...

    def query_pixel_hlsa(self, x: int, y: int) -> tuple[float, float, float, int]: ...

    def query_pixel_cmya(self, x: int, y: int) -> tuple[int, int, int, int]: ...

    # transforms
    def flip_horizontal(self) -> None: ...

    def flip_vertical(self) -> None: ...

    def flip_diagonal(self) -> None: ...

    def orientate(self, orientation: int) -> None: ...

    def blur(self, radius: int) -> None: ...

    def sharpen(self, radius: int) -> None: ...

    def tile_horizontal(self) -> None: ...

    def tile_vertical(self) -> None: ...

    def tile(self) -> None: ...

    def crop(self, x: int, y: int, w: int, h: int) -> EngineResource | None: ...

    def crop_scaled(self, x: int, y: int, w: int, h: int, dw: int, dh: int) -> EngineResource | None: ...

    def rotate(self, angle: float) -> EngineResource | None: ...

    def blend(
        self,
        source: EngineResource,
        merge_alpha: bool,
        x: int,
        y: int,
        w: int,
        h: int,
        dx: int,
        dy: int,
        dw: int,
        dh: int,
    ) -> None: ...

    def clear(self) -> None: ...

    def clear_color(self, red: int, green: int, blue: int, alpha: int) -> None: ...

    # drawing
    def draw_pixel(self, x: int, y: int) -> None: ...

    def draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None: ...

    def draw_rect(self, x: int, y: int, w: int, h: int) -> None: ...

    def fill_rect(self, x: int, y: int, w: int, h: int) -> None: ...

    def draw_ellipse(self, xc: int, yc: int, a: int, b: int) -> None: ...

    def fill_ellipse(self, xc: int, yc: int, a: int, b: int) -> None: ...

    def copy_alpha(self, source: EngineResource, x: int, y: int) -> None: ...

    def copy_alpha_rect(self, source: EngineResource, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None: ...

    def scroll_rect(self, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None: ...

    def copy_rect(self, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None: ...

    def draw_text(self, x: int, y: int, text: str | bytes) -> tuple[int, int, int, int]: ...

    def fill_gradient(self, x: int, y: int, w: int, h: int, angle: float) -> None: ...

    def draw_polygon(self, polygon: EngineResource, closed: bool) -> None: ...

    def fill_polygon(self, polygon: EngineResource) -> None: ...

    def apply_filter(self) -> None: ...

    def apply_filter_script(self, script: str) -> None: ...

    def apply_color_modifier(self) -> None: ...

    def apply_color_modifier_to_rectangle(self, x: int, y: int, w: int, h: int) -> None: ...

    def attach_value(self, key: str, value: int) -> None: ...

    def get_attached_value(self, key: str) -> int | None: ...

    def remove_attached_value(self, key: str) -> None: ...

    # fonts
    def load_font(self, name: str) -> EngineResource | None: ...

    def free_font(self) -> None: ...

    def text_size(self, text: str | bytes) -> tuple[int, int]: ...

    def text_advance(self, text: str | bytes) -> tuple[int, int]: ...

    def text_inset(self, text: str | bytes) -> int: ...

    def text_index(self, text: str | bytes, x: int, y: int) -> tuple[int, int, int, int, int]: ...

    def text_location(self, text: str | bytes, index: int) -> tuple[int, int, int, int]: ...

    def font_ascent(self) -> int: ...

    def font_descent(self) -> int: ...

    def font_maximum_ascent(self) -> int: ...

    def font_maximum_descent(self) -> int: ...

    def add_font_path(self, path: str) -> None: ...

    def remove_font_path(self, path: str) -> None: ...

    def list_font_path(self) -> tuple[str, ...]: ...

    def list_fonts(self) -> tuple[str, ...]: ...

    # caches
    def cache_size(self) -> int: ...

    def set_cache_size(self, size: int) -> None: ...

    def font_cache_size(self) -> int: ...

    def set_font_cache_size(self, size: int) -> None: ...

    def flush_font_cache(self) -> None: ...

    # gradients
    def create_color_range(self) -> EngineResource: ...

    def free_color_range(self) -> None: ...

    def add_color_to_color_range(self, distance: int) -> None: ...

    # polygons
    def polygon_new(self) -> EngineResource: ...

    def polygon_free(self, polygon: EngineResource) -> None: ...

    def polygon_add_point(self, polygon: EngineResource, x: int, y: int) -> None: ...

    def polygon_bounds(self, polygon: EngineResource) -> tuple[int, int, int, int]: ...

    def polygon_contains_point(self, polygon: EngineResource, x: int, y: int) -> bool: ...

    # filters
    def create_filter(self, initsize: int) -> EngineResource: ...

    def free_filter(self) -> None: ...

    def filter_set(self, channel: str, x: int, y: int, a: int, r: int, g: int, b: int) -> None: ...

    def filter_constants(self, a: int, r: int, g: int, b: int) -> None: ...

    def filter_divisors(self, a: int, r: int, g: int, b: int) -> None: ...

    # colour modifiers
    def create_color_modifier(self) -> EngineResource: ...

    def free_color_modifier(self) -> None: ...

    def modify_color_modifier_gamma(self, value: float) -> None: ...

    def modify_color_modifier_brightness(self, value: float) -> None: ...

    def modify_color_modifier_contrast(self, value: float) -> None: ...

    def reset_color_modifier(self) -> None: ...


def create_imaging_engine(stack: ContextStack, config: BindingConfig | None = None) -> ImagingEngine:
    """Create default engine implementation bound to one context stack."""
    from imbind.backends.pillow_engine import PillowImagingEngine

    return PillowImagingEngine(stack, config=config)
