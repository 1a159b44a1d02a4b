"""Static convolution filter handle."""

from __future__ import annotations

from imbind.api.colors import RgbaColor
from imbind.runtime.binding import BindingHandle, get_runtime
from imbind.runtime.operations import FILTER_TAP
from imbind.runtime.shapes import resolve_shape


class Filter(BindingHandle):
    """Kernel of per-channel taps applied with ``Image.filter``.

    Tap weights come from an RgbaColor: alpha, red, green and blue each
    weight their own channel.
    """

    kind = "filter"

    def __init__(self, size: int = 0) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        runtime.registry.bind(self, runtime.engine.create_filter(int(size)))

    def _engine(self):
        runtime = self._runtime
        runtime.stack.active.filter = runtime.registry.resource(self)
        return runtime.engine

    def _set(self, channel: str, args: tuple[object, ...]) -> Filter:
        record = resolve_shape(FILTER_TAP, args)
        color: RgbaColor = record.trailing["color"]  # type: ignore[assignment]
        self._engine().filter_set(channel, record.x, record.y, color.alpha, color.red, color.green, color.blue)
        return self

    def set(self, *args: object) -> Filter:
        """Set the tap at ``(x, y)`` for every channel."""
        return self._set("all", args)

    def set_alpha(self, *args: object) -> Filter:
        return self._set("alpha", args)

    def set_red(self, *args: object) -> Filter:
        return self._set("red", args)

    def set_green(self, *args: object) -> Filter:
        return self._set("green", args)

    def set_blue(self, *args: object) -> Filter:
        return self._set("blue", args)

    def constants(self, color: RgbaColor) -> Filter:
        """Per-channel constant added after convolution."""
        color = RgbaColor.of(color)  # type: ignore[assignment]
        self._engine().filter_constants(color.alpha, color.red, color.green, color.blue)
        return self

    def divisors(self, color: RgbaColor) -> Filter:
        color = RgbaColor.of(color)  # type: ignore[assignment]
        self._engine().filter_divisors(color.alpha, color.red, color.green, color.blue)
        return self
