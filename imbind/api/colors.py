"""Color value types and named color constants."""

from __future__ import annotations

from typing import TypeAlias

from imbind.api.geometry import Quad


class RgbaColor(Quad):
    """Red, green, blue and alpha channels (0-255)."""

    __slots__ = ("red", "green", "blue", "alpha")
    FIELDS = ("red", "green", "blue", "alpha")
    ALIASES = {"r": "red", "g": "green", "b": "blue", "a": "alpha"}
    KINDS = (int, int, int, int)


class HsvaColor(Quad):
    """Hue (degrees), saturation, value and alpha."""

    __slots__ = ("hue", "saturation", "value", "alpha")
    FIELDS = ("hue", "saturation", "value", "alpha")
    ALIASES = {"h": "hue", "s": "saturation", "v": "value", "a": "alpha"}
    KINDS = (float, float, float, int)


class HlsaColor(Quad):
    """Hue (degrees), lightness, saturation and alpha."""

    __slots__ = ("hue", "lightness", "saturation", "alpha")
    FIELDS = ("hue", "lightness", "saturation", "alpha")
    ALIASES = {"h": "hue", "l": "lightness", "s": "saturation", "a": "alpha"}
    KINDS = (float, float, float, int)


class CmyaColor(Quad):
    """Cyan, magenta, yellow and alpha channels (0-255)."""

    __slots__ = ("cyan", "magenta", "yellow", "alpha")
    FIELDS = ("cyan", "magenta", "yellow", "alpha")
    ALIASES = {"c": "cyan", "m": "magenta", "y": "yellow", "a": "alpha"}
    KINDS = (int, int, int, int)


ColorValue: TypeAlias = RgbaColor | HsvaColor | HlsaColor | CmyaColor
COLOR_VARIANTS: tuple[type[Quad], ...] = (RgbaColor, HsvaColor, HlsaColor, CmyaColor)

CLEAR = RgbaColor(0, 0, 0, 0)
TRANSPARENT = RgbaColor(0, 0, 0, 0)
TRANSLUCENT = RgbaColor(0, 0, 0, 0)
SHADOW = RgbaColor(0, 0, 0, 64)

BLACK = RgbaColor(0, 0, 0, 255)
DARKGRAY = RgbaColor(64, 64, 64, 255)
DARKGREY = RgbaColor(64, 64, 64, 255)
GRAY = RgbaColor(128, 128, 128, 255)
GREY = RgbaColor(128, 128, 128, 255)
LIGHTGRAY = RgbaColor(192, 192, 192, 255)
LIGHTGREY = RgbaColor(192, 192, 192, 255)
WHITE = RgbaColor(255, 255, 255, 255)

RED = RgbaColor(255, 0, 0, 255)
GREEN = RgbaColor(0, 255, 0, 255)
BLUE = RgbaColor(0, 0, 255, 255)
YELLOW = RgbaColor(255, 255, 0, 255)
ORANGE = RgbaColor(255, 128, 0, 255)
BROWN = RgbaColor(128, 64, 0, 255)
MAGENTA = RgbaColor(255, 0, 128, 255)
VIOLET = RgbaColor(255, 0, 255, 255)
PURPLE = RgbaColor(128, 0, 255, 255)
INDEGO = RgbaColor(128, 0, 255, 255)
CYAN = RgbaColor(0, 255, 255, 255)
AQUA = RgbaColor(0, 128, 255, 255)
AZURE = RgbaColor(0, 128, 255, 255)
TEAL = RgbaColor(0, 255, 128, 255)

DARKRED = RgbaColor(128, 0, 0, 255)
DARKGREEN = RgbaColor(0, 128, 0, 255)
DARKBLUE = RgbaColor(0, 0, 128, 255)
DARKYELLOW = RgbaColor(128, 128, 0, 255)
DARKORANGE = RgbaColor(128, 64, 0, 255)
DARKBROWN = RgbaColor(64, 32, 0, 255)
DARKMAGENTA = RgbaColor(128, 0, 64, 255)
DARKVIOLET = RgbaColor(128, 0, 128, 255)
DARKPURPLE = RgbaColor(64, 0, 128, 255)
DARKINDEGO = RgbaColor(64, 0, 128, 255)
DARKCYAN = RgbaColor(0, 128, 128, 255)
DARKAQUA = RgbaColor(0, 64, 128, 255)
DARKAZURE = RgbaColor(0, 64, 128, 255)
DARKTEAL = RgbaColor(0, 128, 64, 255)
