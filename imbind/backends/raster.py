"""Numpy raster helpers for the Pillow engine.

Pixel buffers are ``(height, width, 4)`` uint8 arrays in BGRA byte order,
the in-memory layout of little-endian ARGB32 words.
"""

from __future__ import annotations

import colorsys

import numpy as np
from PIL import Image

from imbind.api.enums import Operation

B, G, R, A = 0, 1, 2, 3
CHANNEL_INDEX: dict[str, int] = {"blue": B, "green": G, "red": R, "alpha": A}


def empty_pixels(width: int, height: int) -> np.ndarray:
    return np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8)


def bgra(red: float, green: float, blue: float, alpha: float) -> np.ndarray:
    values = np.array([blue, green, red, alpha], dtype=np.float32)
    return np.clip(np.rint(values), 0, 255)


def from_pil(image: Image.Image) -> np.ndarray:
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    return np.ascontiguousarray(rgba[..., [2, 1, 0, 3]])


def to_pil(pixels: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(pixels[..., [2, 1, 0, 3]]), "RGBA")


def clip_coverage(coverage: np.ndarray, cliprect: tuple[int, int, int, int]) -> np.ndarray:
    """Zero coverage outside a non-empty clip rectangle."""
    x, y, w, h = cliprect
    if w <= 0 or h <= 0:
        return coverage
    clipped = np.zeros_like(coverage)
    y0, x0 = max(0, y), max(0, x)
    clipped[y0 : y + h, x0 : x + w] = coverage[y0 : y + h, x0 : x + w]
    return clipped


def composite(
    pixels: np.ndarray,
    source: np.ndarray,
    coverage: np.ndarray,
    *,
    blend: bool,
    operation: Operation,
    merge_alpha: bool = True,
) -> None:
    """Write source into pixels in place, weighted by coverage in [0, 1]."""
    if not coverage.any():
        return
    dst = pixels.astype(np.float32)
    src = np.broadcast_to(np.asarray(source, dtype=np.float32), dst.shape)
    cov = coverage.astype(np.float32)[..., None]
    if blend:
        weight = src[..., A : A + 1] / 255.0 * cov
    else:
        weight = cov
    if operation is Operation.ADD:
        color = dst[..., :3] + src[..., :3] * weight
    elif operation is Operation.SUBTRACT:
        color = dst[..., :3] - src[..., :3] * weight
    elif operation is Operation.RESHADE:
        color = dst[..., :3] + (src[..., :3] - 127.5) * 2.0 * weight
    else:
        color = src[..., :3] * weight + dst[..., :3] * (1.0 - weight)
    if not blend:
        alpha = src[..., A : A + 1] * cov + dst[..., A : A + 1] * (1.0 - cov)
    elif merge_alpha:
        alpha = 255.0 * weight + dst[..., A : A + 1] * (1.0 - weight)
    else:
        alpha = dst[..., A : A + 1]
    out = np.concatenate([color, alpha], axis=-1)
    pixels[...] = np.clip(np.rint(out), 0, 255).astype(np.uint8)


def mask_to_coverage(mask: Image.Image) -> np.ndarray:
    return np.asarray(mask, dtype=np.float32) / 255.0


def region(pixels: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    """Copy a rectangle; areas outside the buffer read as transparent black."""
    out = np.zeros((max(0, h), max(0, w), 4), dtype=np.uint8)
    height, width = pixels.shape[:2]
    sx0, sy0 = max(0, x), max(0, y)
    sx1, sy1 = min(width, x + w), min(height, y + h)
    if sx0 >= sx1 or sy0 >= sy1:
        return out
    out[sy0 - y : sy1 - y, sx0 - x : sx1 - x] = pixels[sy0:sy1, sx0:sx1]
    return out


def paste(pixels: np.ndarray, block: np.ndarray, x: int, y: int, *, channels: slice = slice(None)) -> None:
    """Write block at (x, y), clipped to the buffer."""
    height, width = pixels.shape[:2]
    bh, bw = block.shape[:2]
    dx0, dy0 = max(0, x), max(0, y)
    dx1, dy1 = min(width, x + bw), min(height, y + bh)
    if dx0 >= dx1 or dy0 >= dy1:
        return
    target = pixels[dy0:dy1, dx0:dx1]
    target[..., channels] = block[dy0 - y : dy1 - y, dx0 - x : dx1 - x][..., channels]


def tile_axis(pixels: np.ndarray, axis: int) -> np.ndarray:
    """Blend an image with its half-rolled copy so opposite edges meet seamlessly."""
    size = pixels.shape[axis]
    if size < 2:
        return pixels.copy()
    rolled = np.roll(pixels, size // 2, axis=axis).astype(np.float32)
    weight = np.abs(np.linspace(-1.0, 1.0, size, dtype=np.float32))
    shape = [1, 1, 1]
    shape[axis] = size
    weight = weight.reshape(shape)
    out = pixels.astype(np.float32) * (1.0 - weight) + rolled * weight
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def gradient_layer(
    stops: list[tuple[int, tuple[int, int, int, int]]],
    width: int,
    height: int,
    angle: float,
) -> np.ndarray:
    """Render colour stops across a w x h box; angle 0 runs top to bottom."""
    positions = np.cumsum([float(distance) for distance, _ in stops])
    colors = np.array([bgra(*color) for _, color in stops], dtype=np.float32)
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    radians = np.deg2rad(angle)
    projection = xs * np.sin(radians) + ys * np.cos(radians)
    low, high = float(projection.min()), float(projection.max())
    if high > low:
        t = (projection - low) / (high - low)
    else:
        t = np.zeros_like(projection)
    where = positions[0] + t * (positions[-1] - positions[0])
    channels = [np.interp(where, positions, colors[:, index]) for index in range(4)]
    return np.stack(channels, axis=-1).astype(np.float32)


def apply_kernel(
    pixels: np.ndarray,
    entries: dict[str, dict[tuple[int, int], tuple[int, int, int, int]]],
    constants: dict[str, int],
    divisors: dict[str, int],
) -> np.ndarray:
    """Convolve each output channel as a weighted sum of input channels at offsets."""
    offsets = [offset for channel in entries.values() for offset in channel]
    pad = max((max(abs(ox), abs(oy)) for ox, oy in offsets), default=0)
    src = pixels.astype(np.float32)
    height, width = src.shape[:2]
    padded = np.pad(src, ((pad, pad), (pad, pad), (0, 0)), mode="edge")
    out = src.copy()
    for name, index in CHANNEL_INDEX.items():
        taps = entries.get(name) or {}
        if not taps:
            continue
        acc = np.zeros((height, width), dtype=np.float32)
        total = 0
        for (ox, oy), (wa, wr, wg, wb) in taps.items():
            shifted = padded[pad + oy : pad + oy + height, pad + ox : pad + ox + width]
            acc += wa * shifted[..., A] + wr * shifted[..., R] + wg * shifted[..., G] + wb * shifted[..., B]
            total += wa + wr + wg + wb
        divisor = divisors.get(name) or total or 1
        out[..., index] = acc / divisor + constants.get(name, 0)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def identity_tables() -> dict[str, np.ndarray]:
    return {name: np.arange(256, dtype=np.float32) for name in ("red", "green", "blue", "alpha")}


def modify_tables(tables: dict[str, np.ndarray], kind: str, value: float) -> None:
    """Apply a gamma, brightness or contrast adjustment to the colour tables."""
    for name in ("red", "green", "blue"):
        table = tables[name]
        if kind == "gamma":
            if value <= 0:
                continue
            table = 255.0 * np.power(np.clip(table, 0, 255) / 255.0, 1.0 / value)
        elif kind == "brightness":
            table = table + value * 255.0
        elif kind == "contrast":
            table = (table - 127.5) * value + 127.5
        tables[name] = np.clip(table, 0, 255)


def apply_tables(pixels: np.ndarray, tables: dict[str, np.ndarray]) -> None:
    for name, index in CHANNEL_INDEX.items():
        lut = np.rint(tables[name]).astype(np.uint8)
        pixels[..., index] = lut[pixels[..., index]]


def polygon_contains(points: list[tuple[int, int]], x: int, y: int) -> bool:
    """Even-odd ray casting test."""
    inside = False
    count = len(points)
    for index in range(count):
        x1, y1 = points[index]
        x2, y2 = points[(index + 1) % count]
        if (y1 > y) != (y2 > y):
            crossing = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
            if x < crossing:
                inside = not inside
    return inside


def hsva_to_rgba(hue: float, saturation: float, value: float, alpha: int) -> tuple[int, int, int, int]:
    r, g, b = colorsys.hsv_to_rgb((hue % 360.0) / 360.0, saturation, value)
    return (_byte(r * 255), _byte(g * 255), _byte(b * 255), _byte(alpha))


def hlsa_to_rgba(hue: float, lightness: float, saturation: float, alpha: int) -> tuple[int, int, int, int]:
    r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
    return (_byte(r * 255), _byte(g * 255), _byte(b * 255), _byte(alpha))


def cmya_to_rgba(cyan: int, magenta: int, yellow: int, alpha: int) -> tuple[int, int, int, int]:
    return (_byte(255 - cyan), _byte(255 - magenta), _byte(255 - yellow), _byte(alpha))


def rgba_to_hsva(red: int, green: int, blue: int, alpha: int) -> tuple[float, float, float, int]:
    h, s, v = colorsys.rgb_to_hsv(red / 255.0, green / 255.0, blue / 255.0)
    return (h * 360.0, s, v, alpha)


def rgba_to_hlsa(red: int, green: int, blue: int, alpha: int) -> tuple[float, float, float, int]:
    h, l, s = colorsys.rgb_to_hls(red / 255.0, green / 255.0, blue / 255.0)
    return (h * 360.0, l, s, alpha)


def rgba_to_cmya(red: int, green: int, blue: int, alpha: int) -> tuple[int, int, int, int]:
    return (255 - red, 255 - green, 255 - blue, alpha)


def _byte(value: float) -> int:
    return int(min(255, max(0, round(value))))
