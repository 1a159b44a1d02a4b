"""Engine enumerations exposed on the context surface."""

from __future__ import annotations

from enum import IntEnum


class Direction(IntEnum):
    """Text drawing direction."""

    RIGHT = 0
    LEFT = 1
    DOWN = 2
    UP = 3
    ANGLE = 4


class Operation(IntEnum):
    """Pixel compositing operation."""

    COPY = 0
    ADD = 1
    SUBTRACT = 2
    RESHADE = 3


class Encoding(IntEnum):
    """Text encoding used by font rendering."""

    ISO_8859_1 = 0
    ISO_8859_2 = 1
    ISO_8859_3 = 2
    ISO_8859_4 = 3
    ISO_8859_5 = 4


ENCODING_CODECS: dict[Encoding, str] = {
    Encoding.ISO_8859_1: "iso-8859-1",
    Encoding.ISO_8859_2: "iso-8859-2",
    Encoding.ISO_8859_3: "iso-8859-3",
    Encoding.ISO_8859_4: "iso-8859-4",
    Encoding.ISO_8859_5: "iso-8859-5",
}
