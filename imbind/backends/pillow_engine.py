"""Pillow and numpy implementation of the imaging engine port."""

from __future__ import annotations

import errno
import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFilter, ImageFont, UnidentifiedImageError

from imbind.api.enums import ENCODING_CODECS, Direction
from imbind.api.errors import LoadError
from imbind.backends import raster
from imbind.backends.cache import CachedFont, CachedImage, FontCache, ImageCache
from imbind.runtime.config import BindingConfig, load_binding_config
from imbind.runtime.context_stack import ContextStack
from imbind.runtime.errors import RECOVERABLE_ENGINE_ERRORS

_LOG = logging.getLogger("imbind.engine")

_ERRNO_CODES: dict[int, LoadError] = {
    errno.ENOENT: LoadError.FILE_DOES_NOT_EXIST,
    errno.EISDIR: LoadError.FILE_IS_DIRECTORY,
    errno.EACCES: LoadError.PERMISSION_DENIED_TO_READ,
    errno.EPERM: LoadError.PERMISSION_DENIED_TO_READ,
    errno.ENAMETOOLONG: LoadError.PATH_TOO_LONG,
    errno.ENOTDIR: LoadError.PATH_COMPONENT_NOT_DIRECTORY,
    errno.EFAULT: LoadError.PATH_POINTS_OUTSIDE_ADDRESS_SPACE,
    errno.ELOOP: LoadError.TOO_MANY_SYMBOLIC_LINKS,
    errno.ENOMEM: LoadError.OUT_OF_MEMORY,
    errno.EMFILE: LoadError.OUT_OF_FILE_DESCRIPTORS,
    errno.ENFILE: LoadError.OUT_OF_FILE_DESCRIPTORS,
    errno.ENOSPC: LoadError.OUT_OF_DISK_SPACE,
}
_FONT_SUFFIXES: tuple[str, ...] = (".ttf", ".otf", ".TTF", ".OTF")
_SCRIPT_CALL = re.compile(r"\s*([A-Za-z_]\w*)\s*\(([^)]*)\)\s*;?")
_METRIC_SAMPLE = "".join(chr(code) for code in range(32, 127))


@dataclass(slots=True, eq=False)
class EngineImage:
    """Decoded (or pending) image plus engine-side metadata."""

    pixels: np.ndarray | None
    source: Image.Image | None = None
    filename: str | None = None
    format: str | None = None
    has_alpha: bool = True
    border: tuple[int, int, int, int] = (0, 0, 0, 0)
    attached: dict[str, int] = field(default_factory=dict)
    irrelevant: dict[str, bool] = field(default_factory=dict)
    changes_on_disk: bool = False

    def ensure_pixels(self) -> np.ndarray:
        if self.pixels is None:
            source = self.source
            if source is None:
                raise RuntimeError("image has no pixel data")
            self.source = None
            try:
                self.pixels = raster.from_pil(source)
            finally:
                source.close()
        return self.pixels

    @property
    def size(self) -> tuple[int, int]:
        if self.pixels is None and self.source is not None:
            return self.source.size
        pixels = self.ensure_pixels()
        return (pixels.shape[1], pixels.shape[0])

    def release(self) -> None:
        if self.source is not None:
            self.source.close()
        self.source = None
        self.pixels = None
        self.attached.clear()


@dataclass(slots=True, eq=False)
class EngineFont:
    face: ImageFont.FreeTypeFont | ImageFont.ImageFont
    name: str
    path: str | None = None


@dataclass(slots=True, eq=False)
class EngineGradient:
    stops: list[tuple[int, tuple[int, int, int, int]]] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class EnginePolygon:
    points: list[tuple[int, int]] = field(default_factory=list)


@dataclass(slots=True, eq=False)
class EngineFilter:
    size: int
    entries: dict[str, dict[tuple[int, int], tuple[int, int, int, int]]] = field(
        default_factory=lambda: {name: {} for name in ("alpha", "red", "green", "blue")}
    )
    constants: dict[str, int] = field(default_factory=dict)
    divisors: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True, eq=False)
class EngineColorModifier:
    tables: dict[str, np.ndarray] = field(default_factory=raster.identity_tables)


def error_code(exc: BaseException, path: str, *, writing: bool) -> LoadError:
    """Map a load/save failure onto the engine's numeric file error codes."""
    if isinstance(exc, UnidentifiedImageError):
        return LoadError.NO_LOADER_FOR_FILE_FORMAT
    if isinstance(exc, MemoryError):
        return LoadError.OUT_OF_MEMORY
    if isinstance(exc, OSError) and exc.errno is not None:
        code = _ERRNO_CODES.get(exc.errno, LoadError.UNKNOWN)
        if code is LoadError.FILE_DOES_NOT_EXIST:
            parent = Path(path).parent
            if writing or not parent.is_dir():
                return LoadError.PATH_COMPONENT_NON_EXISTANT
        if code is LoadError.PERMISSION_DENIED_TO_READ and writing:
            return LoadError.PERMISSION_DENIED_TO_WRITE
        return code
    if isinstance(exc, (KeyError, ValueError)):
        return LoadError.NO_LOADER_FOR_FILE_FORMAT
    return LoadError.UNKNOWN


def parse_filter_script(script: str) -> list[tuple[str, dict[str, str]]]:
    """Split ``name(key=value, ...);`` calls into (name, params) pairs."""
    calls: list[tuple[str, dict[str, str]]] = []
    for match in _SCRIPT_CALL.finditer(script):
        params: dict[str, str] = {}
        for item in match.group(2).split(","):
            key, sep, value = item.partition("=")
            if sep and key.strip():
                params[key.strip().lower()] = value.strip()
        calls.append((match.group(1).lower(), params))
    return calls


class PillowImagingEngine:
    """Engine primitives over numpy BGRA buffers, driven by the active context frame."""

    def __init__(self, stack: ContextStack, *, config: BindingConfig | None = None) -> None:
        resolved = config if config is not None else load_binding_config()
        self._stack = stack
        self._images = ImageCache(resolved.image_cache_bytes)
        self._fonts = FontCache(resolved.font_cache_bytes)
        self._font_path: list[str] = list(resolved.font_path)

    # context helpers

    def _image(self) -> EngineImage:
        image = self._stack.active.image
        if not isinstance(image, EngineImage):
            raise RuntimeError("no image set in context")
        return image

    def _pixels(self) -> np.ndarray:
        return self._image().ensure_pixels()

    def _font(self) -> EngineFont:
        font = self._stack.active.font
        if not isinstance(font, EngineFont):
            raise RuntimeError("no font set in context")
        return font

    def _text(self, text: str | bytes) -> str:
        if isinstance(text, bytes):
            return text.decode(ENCODING_CODECS[self._stack.active.encoding], errors="replace")
        return str(text)

    def _resample(self) -> Image.Resampling:
        if self._stack.active.anti_alias:
            return Image.Resampling.BILINEAR
        return Image.Resampling.NEAREST

    def _paint(self, coverage: np.ndarray, source: np.ndarray | None = None, *, merge_alpha: bool = True) -> None:
        state = self._stack.active
        coverage = raster.clip_coverage(coverage, state.cliprect)
        if source is None:
            source = raster.bgra(*state.color)
        raster.composite(
            self._pixels(),
            source,
            coverage,
            blend=state.blend,
            operation=state.operation,
            merge_alpha=merge_alpha,
        )

    def _paint_shape(self, draw_fn) -> None:
        pixels = self._pixels()
        mask = Image.new("L", (pixels.shape[1], pixels.shape[0]), 0)
        draw_fn(ImageDraw.Draw(mask))
        self._paint(raster.mask_to_coverage(mask))

    def _paint_block(self, block: np.ndarray, coverage_block: np.ndarray, x: int, y: int, *, merge_alpha: bool = True) -> None:
        pixels = self._pixels()
        layer = np.zeros(pixels.shape, dtype=np.float32)
        coverage = np.zeros(pixels.shape[:2], dtype=np.float32)
        raster.paste(layer, block.astype(np.float32), x, y)
        raster.paste(coverage, coverage_block.astype(np.float32), x, y)
        self._paint(coverage, layer, merge_alpha=merge_alpha)

    # context colour

    def set_color(self, red: int, green: int, blue: int, alpha: int) -> None:
        self._stack.active.color = (int(red), int(green), int(blue), int(alpha))

    def set_color_hsva(self, hue: float, saturation: float, value: float, alpha: int) -> None:
        self._stack.active.color = raster.hsva_to_rgba(hue, saturation, value, alpha)

    def set_color_hlsa(self, hue: float, lightness: float, saturation: float, alpha: int) -> None:
        self._stack.active.color = raster.hlsa_to_rgba(hue, lightness, saturation, alpha)

    def set_color_cmya(self, cyan: int, magenta: int, yellow: int, alpha: int) -> None:
        self._stack.active.color = raster.cmya_to_rgba(cyan, magenta, yellow, alpha)

    # image lifecycle

    def create_image(self, width: int, height: int) -> EngineImage | None:
        if width <= 0 or height <= 0:
            return None
        return EngineImage(pixels=raster.empty_pixels(width, height))

    def create_image_using_data(self, width: int, height: int, data: bytes | bytearray) -> EngineImage | None:
        if width <= 0 or height <= 0 or len(data) != width * height * 4:
            return None
        if isinstance(data, bytearray):
            pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4)
        else:
            pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 4).copy()
        return EngineImage(pixels=pixels)

    def create_image_using_copied_data(self, width: int, height: int, data: bytes | bytearray) -> EngineImage | None:
        if width <= 0 or height <= 0 or len(data) != width * height * 4:
            return None
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 4).copy()
        return EngineImage(pixels=pixels)

    def load_image(self, path: str, *, immediate: bool = False, cache: bool = True) -> tuple[EngineImage | None, int]:
        path = os.fspath(path)
        try:
            info = os.stat(path)
            if os.path.isdir(path):
                raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
            stamp = (info.st_mtime_ns, info.st_size)
            if cache:
                cached = self._images.get(path, stamp)
                if cached is not None:
                    _LOG.debug("image_cache_hit path=%s", path)
                    return (
                        EngineImage(
                            pixels=cached.pixels,
                            filename=path,
                            format=cached.format,
                            has_alpha=cached.has_alpha,
                        ),
                        int(LoadError.NONE),
                    )
            source = Image.open(path)
            image = EngineImage(
                pixels=None,
                source=source,
                filename=path,
                format=(source.format or "").lower() or None,
                has_alpha="A" in source.getbands() or "transparency" in source.info,
            )
            if immediate or cache:
                image.ensure_pixels()
            if cache:
                self._images.put(
                    path,
                    CachedImage(stamp=stamp, pixels=image.ensure_pixels(), format=image.format, has_alpha=image.has_alpha),
                )
        except RECOVERABLE_ENGINE_ERRORS as exc:
            code = error_code(exc, path, writing=False)
            _LOG.debug("image_load_failed path=%s code=%d", path, int(code))
            return None, int(code)
        return image, int(LoadError.NONE)

    def save_image(self, path: str) -> int:
        path = os.fspath(path)
        image = self._image()
        name = image.format or Path(path).suffix.lstrip(".")
        try:
            pil_format = Image.registered_extensions().get(f".{name.lower()}") if name else None
            if pil_format is None:
                raise ValueError(f"no saver for format {name!r}")
            picture = raster.to_pil(image.ensure_pixels())
            if not image.has_alpha or pil_format in {"JPEG", "BMP", "PPM"}:
                picture = picture.convert("RGB")
            picture.save(path, format=pil_format)
        except RECOVERABLE_ENGINE_ERRORS + (KeyError,) as exc:
            code = error_code(exc, path, writing=True)
            _LOG.debug("image_save_failed path=%s code=%d", path, int(code))
            return int(code)
        self._images.evict(path)
        return int(LoadError.NONE)

    def free_image(self, *, decache: bool = False) -> None:
        image = self._image()
        if decache:
            self._images.evict(image.filename)
        image.release()
        self._stack.active.image = None

    def clone_image(self) -> EngineImage:
        image = self._image()
        return EngineImage(
            pixels=image.ensure_pixels().copy(),
            filename=image.filename,
            format=image.format,
            has_alpha=image.has_alpha,
            border=image.border,
            attached=dict(image.attached),
            irrelevant=dict(image.irrelevant),
        )

    # image properties

    def image_width(self) -> int:
        return self._image().size[0]

    def image_height(self) -> int:
        return self._image().size[1]

    def image_filename(self) -> str | None:
        return self._image().filename

    def image_format(self) -> str | None:
        return self._image().format

    def set_image_format(self, name: str) -> None:
        self._image().format = str(name).lower()

    def image_has_alpha(self) -> bool:
        return self._image().has_alpha

    def set_image_has_alpha(self, flag: bool) -> None:
        self._image().has_alpha = bool(flag)

    def image_border(self) -> tuple[int, int, int, int]:
        return self._image().border

    def set_image_border(self, left: int, top: int, right: int, bottom: int) -> None:
        self._image().border = (int(left), int(top), int(right), int(bottom))

    def set_image_changes_on_disk(self) -> None:
        image = self._image()
        image.changes_on_disk = True
        self._images.evict(image.filename)

    def set_image_irrelevant(self, aspect: str, flag: bool) -> None:
        self._image().irrelevant[aspect] = bool(flag)

    def image_data(self, *, read_only: bool = False) -> bytes | bytearray:
        data = self._pixels().tobytes()
        return data if read_only else bytearray(data)

    def put_back_image_data(self, data: bytes | bytearray) -> None:
        pixels = self._pixels()
        if len(data) != pixels.size:
            raise ValueError(f"expected {pixels.size} bytes of pixel data, got {len(data)}")
        pixels[...] = np.frombuffer(bytes(data), dtype=np.uint8).reshape(pixels.shape)

    def query_pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        pixels = self._pixels()
        if not (0 <= x < pixels.shape[1] and 0 <= y < pixels.shape[0]):
            return (0, 0, 0, 0)
        b, g, r, a = (int(value) for value in pixels[y, x])
        return (r, g, b, a)

    def query_pixel_hsva(self, x: int, y: int) -> tuple[float, float, float, int]:
        return raster.rgba_to_hsva(*self.query_pixel(x, y))

    def query_pixel_hlsa(self, x: int, y: int) -> tuple[float, float, float, int]:
        return raster.rgba_to_hlsa(*self.query_pixel(x, y))

    def query_pixel_cmya(self, x: int, y: int) -> tuple[int, int, int, int]:
        return raster.rgba_to_cmya(*self.query_pixel(x, y))

    # transforms

    def _replace_pixels(self, pixels: np.ndarray) -> None:
        self._image().pixels = np.ascontiguousarray(pixels)

    def flip_horizontal(self) -> None:
        self._replace_pixels(self._pixels()[:, ::-1])

    def flip_vertical(self) -> None:
        self._replace_pixels(self._pixels()[::-1, :])

    def flip_diagonal(self) -> None:
        self._replace_pixels(self._pixels().transpose(1, 0, 2))

    def orientate(self, orientation: int) -> None:
        pixels = self._pixels()
        orientation = int(orientation) % 8
        if orientation == 0:
            return
        if orientation in (1, 2, 3):
            self._replace_pixels(np.rot90(pixels, k=-orientation))
        elif orientation == 4:
            self._replace_pixels(pixels[:, ::-1])
        elif orientation == 5:
            self._replace_pixels(pixels.transpose(1, 0, 2))
        elif orientation == 6:
            self._replace_pixels(pixels[::-1, :])
        else:
            self._replace_pixels(pixels[::-1, ::-1].transpose(1, 0, 2))

    def blur(self, radius: int) -> None:
        if radius <= 0:
            return
        picture = raster.to_pil(self._pixels()).filter(ImageFilter.BoxBlur(radius))
        self._replace_pixels(raster.from_pil(picture))

    def sharpen(self, radius: int) -> None:
        if radius <= 0:
            return
        picture = raster.to_pil(self._pixels()).filter(
            ImageFilter.UnsharpMask(radius=radius, percent=150, threshold=0)
        )
        self._replace_pixels(raster.from_pil(picture))

    def tile_horizontal(self) -> None:
        self._replace_pixels(raster.tile_axis(self._pixels(), 1))

    def tile_vertical(self) -> None:
        self._replace_pixels(raster.tile_axis(self._pixels(), 0))

    def tile(self) -> None:
        self._replace_pixels(raster.tile_axis(raster.tile_axis(self._pixels(), 1), 0))

    def _derived(self, pixels: np.ndarray) -> EngineImage:
        image = self._image()
        return EngineImage(
            pixels=np.ascontiguousarray(pixels),
            format=image.format,
            has_alpha=image.has_alpha,
        )

    def crop(self, x: int, y: int, w: int, h: int) -> EngineImage | None:
        if w <= 0 or h <= 0:
            return None
        return self._derived(raster.region(self._pixels(), x, y, w, h))

    def crop_scaled(self, x: int, y: int, w: int, h: int, dw: int, dh: int) -> EngineImage | None:
        if w <= 0 or h <= 0 or dw <= 0 or dh <= 0:
            return None
        block = raster.region(self._pixels(), x, y, w, h)
        picture = raster.to_pil(block).resize((dw, dh), self._resample())
        return self._derived(raster.from_pil(picture))

    def rotate(self, angle: float) -> EngineImage | None:
        resample = Image.Resampling.BICUBIC if self._stack.active.anti_alias else Image.Resampling.NEAREST
        picture = raster.to_pil(self._pixels()).rotate(-math.degrees(angle), resample=resample, expand=True)
        return self._derived(raster.from_pil(picture))

    def blend(
        self,
        source: EngineImage,
        merge_alpha: bool,
        x: int,
        y: int,
        w: int,
        h: int,
        dx: int,
        dy: int,
        dw: int,
        dh: int,
    ) -> None:
        if w <= 0 or h <= 0 or dw <= 0 or dh <= 0:
            return
        block = raster.region(source.ensure_pixels(), x, y, w, h)
        if (dw, dh) != (w, h):
            block = raster.from_pil(raster.to_pil(block).resize((dw, dh), self._resample()))
        modifier = self._stack.active.color_modifier
        if isinstance(modifier, EngineColorModifier):
            raster.apply_tables(block, modifier.tables)
        self._paint_block(block, np.ones((dh, dw), dtype=np.float32), dx, dy, merge_alpha=merge_alpha)

    def clear(self) -> None:
        self._pixels()[...] = 0

    def clear_color(self, red: int, green: int, blue: int, alpha: int) -> None:
        self._pixels()[...] = raster.bgra(red, green, blue, alpha).astype(np.uint8)

    # drawing

    def draw_pixel(self, x: int, y: int) -> None:
        pixels = self._pixels()
        coverage = np.zeros(pixels.shape[:2], dtype=np.float32)
        if 0 <= x < pixels.shape[1] and 0 <= y < pixels.shape[0]:
            coverage[y, x] = 1.0
        self._paint(coverage)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None:
        self._paint_shape(lambda draw: draw.line([(x1, y1), (x2, y2)], fill=255, width=1))

    def draw_rect(self, x: int, y: int, w: int, h: int) -> None:
        if w <= 0 or h <= 0:
            return
        self._paint_shape(lambda draw: draw.rectangle([x, y, x + w - 1, y + h - 1], outline=255))

    def fill_rect(self, x: int, y: int, w: int, h: int) -> None:
        if w <= 0 or h <= 0:
            return
        self._paint_shape(lambda draw: draw.rectangle([x, y, x + w - 1, y + h - 1], fill=255))

    def draw_ellipse(self, xc: int, yc: int, a: int, b: int) -> None:
        self._paint_shape(lambda draw: draw.ellipse([xc - a, yc - b, xc + a, yc + b], outline=255))

    def fill_ellipse(self, xc: int, yc: int, a: int, b: int) -> None:
        self._paint_shape(lambda draw: draw.ellipse([xc - a, yc - b, xc + a, yc + b], fill=255))

    def copy_alpha(self, source: EngineImage, x: int, y: int) -> None:
        raster.paste(self._pixels(), source.ensure_pixels(), x, y, channels=slice(raster.A, raster.A + 1))

    def copy_alpha_rect(self, source: EngineImage, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None:
        block = raster.region(source.ensure_pixels(), x, y, w, h)
        raster.paste(self._pixels(), block, dx, dy, channels=slice(raster.A, raster.A + 1))

    def scroll_rect(self, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None:
        pixels = self._pixels()
        block = raster.region(pixels, x, y, w, h)
        shifted = np.zeros_like(block)
        raster.paste(shifted, block, dx, dy)
        raster.paste(pixels, shifted, x, y)

    def copy_rect(self, x: int, y: int, w: int, h: int, dx: int, dy: int) -> None:
        pixels = self._pixels()
        raster.paste(pixels, raster.region(pixels, x, y, w, h), dx, dy)

    def draw_text(self, x: int, y: int, text: str | bytes) -> tuple[int, int, int, int]:
        face = self._font().face
        value = self._text(text)
        ascent, descent = _metrics(face)
        height = max(1, ascent + descent)
        width = max(1, math.ceil(face.getlength(value)))
        mask = Image.new("L", (width, height), 0)
        ImageDraw.Draw(mask).text((0, 0), value, font=face, fill=255)
        state = self._stack.active
        direction = state.direction
        advance = (width, height)
        if direction == Direction.LEFT:
            mask = mask.transpose(Image.Transpose.ROTATE_180)
        elif direction == Direction.DOWN:
            mask = mask.transpose(Image.Transpose.ROTATE_270)
            advance = (height, width)
        elif direction == Direction.UP:
            mask = mask.transpose(Image.Transpose.ROTATE_90)
            advance = (height, width)
        elif direction == Direction.ANGLE:
            mask = mask.rotate(-math.degrees(state.angle), resample=Image.Resampling.BILINEAR, expand=True)
            advance = mask.size
        coverage = raster.mask_to_coverage(mask)
        pixels = self._pixels()
        canvas = np.zeros(pixels.shape[:2], dtype=np.float32)
        raster.paste(canvas, coverage, x, y)
        self._paint(canvas)
        return (mask.size[0], mask.size[1], advance[0], advance[1])

    def fill_gradient(self, x: int, y: int, w: int, h: int, angle: float) -> None:
        gradient = self._stack.active.gradient
        if not isinstance(gradient, EngineGradient) or not gradient.stops or w <= 0 or h <= 0:
            return
        layer = raster.gradient_layer(gradient.stops, w, h, angle)
        self._paint_block(layer, np.ones((h, w), dtype=np.float32), x, y)

    def draw_polygon(self, polygon: EnginePolygon, closed: bool) -> None:
        points = list(polygon.points)
        if not points:
            return
        if len(points) == 1:
            self._paint_shape(lambda draw: draw.point(points, fill=255))
            return
        if closed:
            points.append(points[0])
        self._paint_shape(lambda draw: draw.line(points, fill=255, width=1))

    def fill_polygon(self, polygon: EnginePolygon) -> None:
        points = list(polygon.points)
        if len(points) < 3:
            return
        self._paint_shape(lambda draw: draw.polygon(points, fill=255, outline=255))

    def apply_filter(self) -> None:
        engine_filter = self._stack.active.filter
        if not isinstance(engine_filter, EngineFilter):
            return
        pixels = self._pixels()
        pixels[...] = raster.apply_kernel(
            pixels, engine_filter.entries, engine_filter.constants, engine_filter.divisors
        )

    def apply_filter_script(self, script: str) -> None:
        for name, params in parse_filter_script(script):
            if name == "tint":
                self._script_tint(params)
            elif name == "blur":
                self.blur(_param_int(params, "radius", 1))
            elif name == "sharpen":
                self.sharpen(_param_int(params, "radius", 1))
            else:
                _LOG.debug("filter_script_skipped name=%s", name)

    def _script_tint(self, params: dict[str, str]) -> None:
        pixels = self._pixels()
        height, width = pixels.shape[:2]
        x = _param_int(params, "x", 0)
        y = _param_int(params, "y", 0)
        w = _param_int(params, "w", width)
        h = _param_int(params, "h", height)
        tint = raster.bgra(
            _param_int(params, "red", 255),
            _param_int(params, "green", 255),
            _param_int(params, "blue", 255),
            _param_int(params, "alpha", 255),
        )
        view = pixels[max(0, y) : y + h, max(0, x) : x + w]
        view[...] = np.clip(np.rint(view.astype(np.float32) * tint / 255.0), 0, 255).astype(np.uint8)

    def apply_color_modifier(self) -> None:
        modifier = self._stack.active.color_modifier
        if isinstance(modifier, EngineColorModifier):
            raster.apply_tables(self._pixels(), modifier.tables)

    def apply_color_modifier_to_rectangle(self, x: int, y: int, w: int, h: int) -> None:
        modifier = self._stack.active.color_modifier
        if not isinstance(modifier, EngineColorModifier) or w <= 0 or h <= 0:
            return
        pixels = self._pixels()
        raster.apply_tables(pixels[max(0, y) : y + h, max(0, x) : x + w], modifier.tables)

    def attach_value(self, key: str, value: int) -> None:
        self._image().attached[str(key)] = int(value)

    def get_attached_value(self, key: str) -> int | None:
        return self._image().attached.get(str(key))

    def remove_attached_value(self, key: str) -> None:
        self._image().attached.pop(str(key), None)

    # fonts

    def load_font(self, name: str) -> EngineFont | None:
        cached = self._fonts.get(name)
        if cached is not None:
            return EngineFont(face=cached.face, name=name, path=cached.path)
        face_name, _, size_text = name.rpartition("/")
        if not face_name:
            face_name, size_text = name, "12"
        try:
            size = int(size_text)
        except ValueError:
            _LOG.debug("font_load_failed name=%s reason=bad_size", name)
            return None
        path = self._find_font_file(face_name)
        try:
            if face_name == "default" and path is None:
                face = ImageFont.load_default(size)
            else:
                face = ImageFont.truetype(path or face_name, size)
        except RECOVERABLE_ENGINE_ERRORS:
            _LOG.debug("font_load_failed name=%s", name, exc_info=True)
            return None
        cost = os.path.getsize(path) if path else 0
        self._fonts.put(name, CachedFont(face=face, path=path, cost=cost))
        return EngineFont(face=face, name=name, path=path)

    def _find_font_file(self, face_name: str) -> str | None:
        if os.path.isfile(face_name):
            return face_name
        for directory in self._font_path:
            for suffix in ("",) + _FONT_SUFFIXES:
                candidate = Path(directory) / f"{face_name}{suffix}"
                if candidate.is_file():
                    return str(candidate)
        return None

    def free_font(self) -> None:
        self._stack.active.font = None

    def text_size(self, text: str | bytes) -> tuple[int, int]:
        face = self._font().face
        value = self._text(text)
        ascent, descent = _metrics(face)
        size = (math.ceil(face.getlength(value)), ascent + descent)
        if self._stack.active.direction in (Direction.UP, Direction.DOWN):
            return (size[1], size[0])
        return size

    def text_advance(self, text: str | bytes) -> tuple[int, int]:
        face = self._font().face
        ascent, descent = _metrics(face)
        return (round(face.getlength(self._text(text))), ascent + descent)

    def text_inset(self, text: str | bytes) -> int:
        value = self._text(text)
        if not value:
            return 0
        return int(self._font().face.getbbox(value[:1])[0])

    def _char_edges(self, value: str) -> list[float]:
        face = self._font().face
        return [face.getlength(value[:index]) for index in range(len(value) + 1)]

    def text_index(self, text: str | bytes, x: int, y: int) -> tuple[int, int, int, int, int]:
        value = self._text(text)
        ascent, descent = _metrics(self._font().face)
        height = ascent + descent
        if y < 0 or y >= height:
            return (-1, 0, 0, 0, 0)
        edges = self._char_edges(value)
        for index in range(len(value)):
            if edges[index] <= x < edges[index + 1]:
                return (index, round(edges[index]), 0, round(edges[index + 1] - edges[index]), height)
        return (-1, 0, 0, 0, 0)

    def text_location(self, text: str | bytes, index: int) -> tuple[int, int, int, int]:
        value = self._text(text)
        if not 0 <= index < len(value):
            return (0, 0, 0, 0)
        ascent, descent = _metrics(self._font().face)
        edges = self._char_edges(value)
        return (round(edges[index]), 0, round(edges[index + 1] - edges[index]), ascent + descent)

    def font_ascent(self) -> int:
        return _metrics(self._font().face)[0]

    def font_descent(self) -> int:
        return _metrics(self._font().face)[1]

    def font_maximum_ascent(self) -> int:
        face = self._font().face
        bbox = face.getbbox(_METRIC_SAMPLE, anchor="ls")
        return max(_metrics(face)[0], -int(bbox[1]))

    def font_maximum_descent(self) -> int:
        face = self._font().face
        bbox = face.getbbox(_METRIC_SAMPLE, anchor="ls")
        return max(_metrics(face)[1], int(bbox[3]))

    def add_font_path(self, path: str) -> None:
        if path not in self._font_path:
            self._font_path.append(path)

    def remove_font_path(self, path: str) -> None:
        if path in self._font_path:
            self._font_path.remove(path)

    def list_font_path(self) -> tuple[str, ...]:
        return tuple(self._font_path)

    def list_fonts(self) -> tuple[str, ...]:
        names: set[str] = set()
        for directory in self._font_path:
            folder = Path(directory)
            if not folder.is_dir():
                continue
            for entry in folder.iterdir():
                if entry.suffix in _FONT_SUFFIXES and entry.is_file():
                    names.add(entry.stem)
        return tuple(sorted(names))

    # caches

    def cache_size(self) -> int:
        return self._images.limit

    def set_cache_size(self, size: int) -> None:
        self._images.limit = size

    def font_cache_size(self) -> int:
        return self._fonts.limit

    def set_font_cache_size(self, size: int) -> None:
        self._fonts.limit = size

    def flush_font_cache(self) -> None:
        self._fonts.clear()

    # gradients

    def create_color_range(self) -> EngineGradient:
        return EngineGradient()

    def free_color_range(self) -> None:
        gradient = self._stack.active.gradient
        if isinstance(gradient, EngineGradient):
            gradient.stops.clear()
        self._stack.active.gradient = None

    def add_color_to_color_range(self, distance: int) -> None:
        gradient = self._stack.active.gradient
        if not isinstance(gradient, EngineGradient):
            raise RuntimeError("no color range set in context")
        gradient.stops.append((int(distance), self._stack.active.color))

    # polygons

    def polygon_new(self) -> EnginePolygon:
        return EnginePolygon()

    def polygon_free(self, polygon: EnginePolygon) -> None:
        polygon.points.clear()

    def polygon_add_point(self, polygon: EnginePolygon, x: int, y: int) -> None:
        polygon.points.append((int(x), int(y)))

    def polygon_bounds(self, polygon: EnginePolygon) -> tuple[int, int, int, int]:
        if not polygon.points:
            return (0, 0, 0, 0)
        xs = [point[0] for point in polygon.points]
        ys = [point[1] for point in polygon.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def polygon_contains_point(self, polygon: EnginePolygon, x: int, y: int) -> bool:
        if len(polygon.points) < 3:
            return False
        return raster.polygon_contains(polygon.points, x, y)

    # filters

    def _filter(self) -> EngineFilter:
        engine_filter = self._stack.active.filter
        if not isinstance(engine_filter, EngineFilter):
            raise RuntimeError("no filter set in context")
        return engine_filter

    def create_filter(self, initsize: int) -> EngineFilter:
        return EngineFilter(size=int(initsize))

    def free_filter(self) -> None:
        engine_filter = self._stack.active.filter
        if isinstance(engine_filter, EngineFilter):
            for taps in engine_filter.entries.values():
                taps.clear()
        self._stack.active.filter = None

    def filter_set(self, channel: str, x: int, y: int, a: int, r: int, g: int, b: int) -> None:
        entries = self._filter().entries
        offset = (int(x), int(y))
        if channel == "all":
            entries["alpha"][offset] = (int(a), 0, 0, 0)
            entries["red"][offset] = (0, int(r), 0, 0)
            entries["green"][offset] = (0, 0, int(g), 0)
            entries["blue"][offset] = (0, 0, 0, int(b))
            return
        entries[channel][offset] = (int(a), int(r), int(g), int(b))

    def filter_constants(self, a: int, r: int, g: int, b: int) -> None:
        self._filter().constants = {"alpha": int(a), "red": int(r), "green": int(g), "blue": int(b)}

    def filter_divisors(self, a: int, r: int, g: int, b: int) -> None:
        self._filter().divisors = {"alpha": int(a), "red": int(r), "green": int(g), "blue": int(b)}

    # colour modifiers

    def _modifier(self) -> EngineColorModifier:
        modifier = self._stack.active.color_modifier
        if not isinstance(modifier, EngineColorModifier):
            raise RuntimeError("no color modifier set in context")
        return modifier

    def create_color_modifier(self) -> EngineColorModifier:
        return EngineColorModifier()

    def free_color_modifier(self) -> None:
        self._stack.active.color_modifier = None

    def modify_color_modifier_gamma(self, value: float) -> None:
        raster.modify_tables(self._modifier().tables, "gamma", float(value))

    def modify_color_modifier_brightness(self, value: float) -> None:
        raster.modify_tables(self._modifier().tables, "brightness", float(value))

    def modify_color_modifier_contrast(self, value: float) -> None:
        raster.modify_tables(self._modifier().tables, "contrast", float(value))

    def reset_color_modifier(self) -> None:
        self._modifier().tables = raster.identity_tables()


def _metrics(face: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> tuple[int, int]:
    if isinstance(face, ImageFont.FreeTypeFont):
        ascent, descent = face.getmetrics()
        return (int(ascent), int(descent))
    bbox = face.getbbox(_METRIC_SAMPLE)
    return (int(bbox[3]), 0)


def _param_int(params: dict[str, str], key: str, default: int) -> int:
    raw = params.get(key)
    if raw is None:
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default


Engine = PillowImagingEngine
