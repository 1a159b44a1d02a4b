"""Image handle: loading, saving, drawing and transforms."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import NamedTuple

from imbind.api.colors import CmyaColor, HlsaColor, HsvaColor, RgbaColor
from imbind.api.errors import ImbindError, LoadError, TypeMismatch, coerce_load_error, file_error_for
from imbind.api.geometry import Border
from imbind.runtime.binding import BindingHandle, BindingRuntime, get_runtime

_LOG = logging.getLogger("imbind.image")


class LoadResult(NamedTuple):
    image: Image
    error: LoadError


class Image(BindingHandle):
    """Wrapper owning one engine image."""

    kind = "image"

    def __init__(self, width: int, height: int) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        resource = runtime.engine.create_image(int(width), int(height))
        if resource is None:
            raise ImbindError(f"could not create {width}x{height} image")
        runtime.registry.bind(self, resource)

    # construction

    @classmethod
    def new(cls, width: int, height: int) -> Image:
        return cls(width, height)

    create = new

    @classmethod
    def create_using_data(cls, width: int, height: int, data: bytes | bytearray) -> Image:
        """Wrap ARGB32 pixel data; a bytearray is shared with the engine, not copied."""
        runtime = get_runtime()
        resource = runtime.engine.create_image_using_data(int(width), int(height), data)
        if resource is None:
            raise ImbindError(f"pixel data does not describe a {width}x{height} image")
        return cls._adopt(resource, runtime=runtime)

    @classmethod
    def create_using_copied_data(cls, width: int, height: int, data: bytes | bytearray) -> Image:
        runtime = get_runtime()
        resource = runtime.engine.create_image_using_copied_data(int(width), int(height), data)
        if resource is None:
            raise ImbindError(f"pixel data does not describe a {width}x{height} image")
        return cls._adopt(resource, runtime=runtime)

    @classmethod
    def load(cls, path: str | os.PathLike[str], callback: Callable[[Image], object] | None = None) -> Image | None:
        """Load an image, raising FileError unless a callback is supplied.

        With a callback the loaded image is passed to it, and a failure
        returns None instead of raising.
        """
        runtime = get_runtime()
        filename = os.fspath(path)
        resource, code = runtime.engine.load_image(filename, immediate=False, cache=True)
        if resource is None:
            error = file_error_for(filename, code)
            if callback is None:
                raise error
            _LOG.debug("image_load_failed path=%s code=%d", filename, int(error.code))
            return None
        image = cls._adopt(resource, runtime=runtime)
        if callback is not None:
            callback(image)
        return image

    @classmethod
    def _load_silent(cls, path: str | os.PathLike[str], *, immediate: bool, cache: bool) -> Image:
        runtime = get_runtime()
        filename = os.fspath(path)
        resource, code = runtime.engine.load_image(filename, immediate=immediate, cache=cache)
        if resource is None:
            _LOG.debug("image_load_failed path=%s code=%d", filename, int(code))
        return cls._adopt(resource, runtime=runtime)

    @classmethod
    def load_image(cls, path: str | os.PathLike[str]) -> Image:
        """Load without raising; a failure yields a dead image."""
        return cls._load_silent(path, immediate=False, cache=True)

    @classmethod
    def load_immediately(cls, path: str | os.PathLike[str]) -> Image:
        return cls._load_silent(path, immediate=True, cache=True)

    @classmethod
    def load_without_cache(cls, path: str | os.PathLike[str]) -> Image:
        return cls._load_silent(path, immediate=False, cache=False)

    @classmethod
    def load_immediately_without_cache(cls, path: str | os.PathLike[str]) -> Image:
        return cls._load_silent(path, immediate=True, cache=False)

    @classmethod
    def load_with_error_return(cls, path: str | os.PathLike[str]) -> LoadResult:
        """Load and return the (possibly dead) image with its error code."""
        runtime = get_runtime()
        resource, code = runtime.engine.load_image(os.fspath(path), immediate=False, cache=True)
        return LoadResult(image=cls._adopt(resource, runtime=runtime), error=coerce_load_error(code))

    # saving

    def save(self, path: str | os.PathLike[str]) -> None:
        """Save to path, raising FileError on failure."""
        filename = os.fspath(path)
        code = self._engine().save_image(filename)
        if code != LoadError.NONE:
            raise file_error_for(filename, code)

    def save_image(self, path: str | os.PathLike[str]) -> None:
        """Save to path without raising."""
        filename = os.fspath(path)
        code = self._engine().save_image(filename)
        if code != LoadError.NONE:
            _LOG.debug("image_save_failed path=%s code=%d", filename, code)

    def save_with_error_return(self, path: str | os.PathLike[str]) -> LoadError:
        return coerce_load_error(self._engine().save_image(os.fspath(path)))

    # lifecycle

    def delete(self, decache: bool = False) -> None:
        """Free the engine image now; the wrapper is dead afterwards."""
        self._runtime.registry.release(self, decache=decache)

    def __enter__(self) -> Image:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.live:
            self.delete()

    def clone(self) -> Image:
        return self._runtime.dispatcher.clone(self)  # type: ignore[return-value]

    dup = clone
    __copy__ = clone

    def _engine(self):
        return self._runtime.dispatcher.activate(self)

    # properties

    @property
    def width(self) -> int:
        return self._engine().image_width()

    w = width

    @property
    def height(self) -> int:
        return self._engine().image_height()

    h = height

    @property
    def filename(self) -> str | None:
        return self._engine().image_filename()

    @property
    def data(self) -> bytearray:
        """Writable copy of the ARGB32 pixel data; write it back with put_back_data."""
        return self._engine().image_data(read_only=False)  # type: ignore[return-value]

    @data.setter
    def data(self, value: bytes | bytearray) -> None:
        self.put_back_data(value)

    @property
    def data_for_reading_only(self) -> bytes:
        return self._engine().image_data(read_only=True)  # type: ignore[return-value]

    def put_back_data(self, data: bytes | bytearray) -> None:
        self._engine().put_back_image_data(data)

    @property
    def has_alpha(self) -> bool:
        return self._engine().image_has_alpha()

    @has_alpha.setter
    def has_alpha(self, flag: bool) -> None:
        self._engine().set_image_has_alpha(bool(flag))

    def set_changes_on_disk(self) -> None:
        """Mark the file as changing on disk so cached data is not reused."""
        self._engine().set_image_changes_on_disk()

    changes_on_disk = set_changes_on_disk

    @property
    def border(self) -> Border:
        return Border(*self._engine().image_border())

    @border.setter
    def border(self, value: Border | object) -> None:
        border = Border.of(value)
        self._engine().set_image_border(*border.as_tuple())

    @property
    def format(self) -> str | None:
        return self._engine().image_format()

    @format.setter
    def format(self, name: str) -> None:
        self._engine().set_image_format(name)

    def set_irrelevant_format(self, flag: bool) -> None:
        self._engine().set_image_irrelevant("format", bool(flag))

    def set_irrelevant_border(self, flag: bool) -> None:
        self._engine().set_image_irrelevant("border", bool(flag))

    def set_irrelevant_alpha(self, flag: bool) -> None:
        self._engine().set_image_irrelevant("alpha", bool(flag))

    # pixel queries

    def query_pixel(self, *args: object) -> RgbaColor:
        return RgbaColor(*self._runtime.dispatcher.query(self, "query_pixel", args))  # type: ignore[misc]

    pixel = query_pixel
    query_pixel_rgba = query_pixel

    def query_pixel_hsva(self, *args: object) -> HsvaColor:
        return HsvaColor(*self._runtime.dispatcher.query(self, "query_pixel_hsva", args))  # type: ignore[misc]

    def query_pixel_hlsa(self, *args: object) -> HlsaColor:
        return HlsaColor(*self._runtime.dispatcher.query(self, "query_pixel_hlsa", args))  # type: ignore[misc]

    def query_pixel_cmya(self, *args: object) -> CmyaColor:
        return CmyaColor(*self._runtime.dispatcher.query(self, "query_pixel_cmya", args))  # type: ignore[misc]

    # transforms: plain names return a modified copy, *_inplace variants mutate self

    def _copy(self, name: str, *args: object) -> Image:
        return self._runtime.dispatcher.transform(self, name, args, in_place=False)  # type: ignore[return-value]

    def _inplace(self, name: str, *args: object) -> Image:
        return self._runtime.dispatcher.transform(self, name, args, in_place=True)  # type: ignore[return-value]

    def flip_horizontal(self) -> Image:
        return self._copy("flip_horizontal")

    def flip_horizontal_inplace(self) -> Image:
        return self._inplace("flip_horizontal")

    def flip_vertical(self) -> Image:
        return self._copy("flip_vertical")

    def flip_vertical_inplace(self) -> Image:
        return self._inplace("flip_vertical")

    def flip_diagonal(self) -> Image:
        return self._copy("flip_diagonal")

    def flip_diagonal_inplace(self) -> Image:
        return self._inplace("flip_diagonal")

    def orientate(self, orientation: int) -> Image:
        """Rotate by multiples of 90 degrees and/or flip (orientation 0-7)."""
        return self._copy("orientate", orientation)

    def orientate_inplace(self, orientation: int) -> Image:
        return self._inplace("orientate", orientation)

    def blur(self, radius: int) -> Image:
        return self._copy("blur", radius)

    def blur_inplace(self, radius: int) -> Image:
        return self._inplace("blur", radius)

    def sharpen(self, radius: int) -> Image:
        return self._copy("sharpen", radius)

    def sharpen_inplace(self, radius: int) -> Image:
        return self._inplace("sharpen", radius)

    def tile_horizontal(self) -> Image:
        return self._copy("tile_horizontal")

    def tile_horizontal_inplace(self) -> Image:
        return self._inplace("tile_horizontal")

    def tile_vertical(self) -> Image:
        return self._copy("tile_vertical")

    def tile_vertical_inplace(self) -> Image:
        return self._inplace("tile_vertical")

    def tile(self) -> Image:
        return self._copy("tile")

    def tile_inplace(self) -> Image:
        return self._inplace("tile")

    def blend(self, source: Image, *args: object) -> Image:
        """Blend a source rectangle onto a copy of this image.

        Accepts ``(source, src_rect, dst_rect[, merge_alpha])`` with rects as
        sequences or mappings, split point/size composites, or eight scalars.
        """
        return self._copy("blend", source, *args)

    def blend_inplace(self, source: Image, *args: object) -> Image:
        return self._inplace("blend", source, *args)

    blend_image = blend
    blend_image_inplace = blend_inplace

    def clear_color(self, color: RgbaColor) -> Image:
        return self._copy("clear_color", color)

    def clear_color_inplace(self, color: RgbaColor) -> Image:
        return self._inplace("clear_color", color)

    def crop(self, *args: object) -> Image:
        """Return a new image cut from ``[x, y, w, h]`` or four scalars."""
        return self._runtime.dispatcher.derive(self, "crop", args, in_place=False)  # type: ignore[return-value]

    def crop_inplace(self, *args: object) -> Image:
        return self._runtime.dispatcher.derive(self, "crop", args, in_place=True)  # type: ignore[return-value]

    create_cropped = crop

    def crop_scaled(self, *args: object) -> Image:
        """Cut ``[x, y, w, h, dw, dh]`` and scale it to dw x dh."""
        return self._runtime.dispatcher.derive(self, "crop_scaled", args, in_place=False)  # type: ignore[return-value]

    def crop_scaled_inplace(self, *args: object) -> Image:
        return self._runtime.dispatcher.derive(self, "crop_scaled", args, in_place=True)  # type: ignore[return-value]

    create_cropped_scaled = crop_scaled

    def rotate(self, angle: float) -> Image:
        """Return a rotated copy; angle is in radians."""
        return self._runtime.dispatcher.derive(self, "rotate", (angle,), in_place=False)  # type: ignore[return-value]

    def rotate_inplace(self, angle: float) -> Image:
        return self._runtime.dispatcher.derive(self, "rotate", (angle,), in_place=True)  # type: ignore[return-value]

    # drawing

    def _draw(self, name: str, args: tuple[object, ...]) -> Image:
        return self._runtime.dispatcher.draw(self, name, args)  # type: ignore[return-value]

    def clear(self) -> Image:
        return self._draw("clear", ())

    def draw_pixel(self, *args: object) -> Image:
        return self._draw("draw_pixel", args)

    def draw_line(self, *args: object) -> Image:
        return self._draw("draw_line", args)

    def draw_rect(self, *args: object) -> Image:
        return self._draw("draw_rect", args)

    draw_rectangle = draw_rect

    def fill_rect(self, *args: object) -> Image:
        return self._draw("fill_rect", args)

    fill_rectangle = fill_rect

    def draw_ellipse(self, *args: object) -> Image:
        """Outline an ellipse given centre and radii."""
        return self._draw("draw_ellipse", args)

    draw_oval = draw_ellipse

    def fill_ellipse(self, *args: object) -> Image:
        return self._draw("fill_ellipse", args)

    fill_oval = fill_ellipse

    def copy_alpha(self, source: Image, *args: object) -> Image:
        return self._draw("copy_alpha", (source, *args))

    def copy_alpha_rect(self, source: Image, *args: object) -> Image:
        return self._draw("copy_alpha_rect", (source, *args))

    def scroll_rect(self, *args: object) -> Image:
        return self._draw("scroll_rect", args)

    def copy_rect(self, *args: object) -> Image:
        return self._draw("copy_rect", args)

    def draw_text(self, font: object, text: str | bytes, *args: object) -> tuple[int, int, int, int]:
        """Draw text and return (width, height, horizontal advance, vertical advance)."""
        return self._runtime.dispatcher.draw(self, "draw_text", (font, text, *args))  # type: ignore[return-value]

    def fill_gradient(self, gradient: object, *args: object) -> Image:
        return self._draw("fill_gradient", (gradient, *args))

    gradient = fill_gradient
    fill_color_range = fill_gradient

    def draw_poly(self, polygon: object, *args: object) -> Image:
        return self._draw("draw_poly", (polygon, *args))

    draw_polygon = draw_poly

    def fill_poly(self, polygon: object, *args: object) -> Image:
        return self._draw("fill_poly", (polygon, *args))

    fill_polygon = fill_poly

    def filter(self, value: object) -> Image:
        """Apply a script string or a Filter object."""
        if isinstance(value, (str, bytes)):
            return self.script_filter(value.decode() if isinstance(value, bytes) else value)
        if getattr(value, "kind", None) == "filter":
            return self.static_filter(value)
        raise TypeMismatch("invalid filter (not str or Filter)")

    apply_filter = filter

    def static_filter(self, value: object) -> Image:
        return self._draw("static_filter", (value,))

    def script_filter(self, script: str) -> Image:
        return self._draw("script_filter", (script,))

    def apply_color_modifier(self, modifier: object, *args: object) -> Image:
        """Apply a colour modifier to the whole image or to a rectangle."""
        return self._draw("apply_color_modifier", (modifier, *args))

    apply_cmod = apply_color_modifier

    # attached values

    def attach_value(self, key: str, value: int) -> None:
        self._engine().attach_value(key, int(value))

    def get_attached_value(self, key: str) -> int | None:
        return self._engine().get_attached_value(key)

    def remove_attached_value(self, key: str) -> None:
        self._engine().remove_attached_value(key)

    def __getitem__(self, key: str) -> int | None:
        return self.get_attached_value(key)

    def __setitem__(self, key: str, value: int) -> None:
        self.attach_value(key, value)

    def __delitem__(self, key: str) -> None:
        self.remove_attached_value(key)

    def __repr__(self) -> str:
        if not self.live:
            return "<Image deleted>"
        return f"<Image {self.width}x{self.height} filename={self.filename!r}>"


def wrap_image(resource: object, *, runtime: BindingRuntime | None = None) -> Image:
    """Adopt an engine image produced outside the Image factories."""
    return Image._adopt(resource, runtime=runtime)
