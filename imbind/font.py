"""Font handle and text metrics."""

from __future__ import annotations

import logging
from typing import NamedTuple

from imbind.api.errors import FileDoesNotExist
from imbind.runtime.binding import BindingHandle, get_runtime
from imbind.runtime.operations import TEXT_INDEX
from imbind.runtime.shapes import resolve_shape

_LOG = logging.getLogger("imbind.font")


class TextIndex(NamedTuple):
    index: int
    x: int
    y: int
    w: int
    h: int


class Font(BindingHandle):
    """Loaded font face at one size, named ``"face/size"``."""

    kind = "font"

    def __init__(self, name: str) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        resource = runtime.engine.load_font(str(name))
        if resource is None:
            raise FileDoesNotExist(str(name))
        runtime.registry.bind(self, resource)
        _LOG.debug("font_loaded name=%s", name)

    @classmethod
    def load(cls, name: str) -> Font:
        return cls(name)

    def _engine(self):
        runtime = self._runtime
        runtime.stack.active.font = runtime.registry.resource(self)
        return runtime.engine

    def text_size(self, text: str | bytes) -> tuple[int, int]:
        """Bounding size of text in the active direction."""
        return self._engine().text_size(text)

    size = text_size

    def text_advance(self, text: str | bytes) -> tuple[int, int]:
        return self._engine().text_advance(text)

    def text_inset(self, text: str | bytes) -> int:
        return self._engine().text_inset(text)

    def text_index(self, text: str | bytes, *args: object) -> TextIndex:
        """Character index and box under a point; index is -1 when none."""
        record = resolve_shape(TEXT_INDEX, (text, *args))
        return TextIndex(*self._engine().text_index(text, record.x, record.y))

    def text_location(self, text: str | bytes, index: int) -> tuple[int, int, int, int]:
        return self._engine().text_location(text, int(index))

    @property
    def ascent(self) -> int:
        return self._engine().font_ascent()

    @property
    def descent(self) -> int:
        return self._engine().font_descent()

    @property
    def maximum_ascent(self) -> int:
        return self._engine().font_maximum_ascent()

    @property
    def maximum_descent(self) -> int:
        return self._engine().font_maximum_descent()

    @classmethod
    def list_fonts(cls) -> tuple[str, ...]:
        return get_runtime().engine.list_fonts()

    @classmethod
    def add_path(cls, path: str) -> None:
        get_runtime().engine.add_font_path(str(path))

    @classmethod
    def remove_path(cls, path: str) -> None:
        get_runtime().engine.remove_font_path(str(path))

    @classmethod
    def list_paths(cls) -> tuple[str, ...]:
        return get_runtime().engine.list_font_path()
