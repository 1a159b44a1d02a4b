"""Polygon handle."""

from __future__ import annotations

from imbind.runtime.binding import BindingHandle, get_runtime
from imbind.runtime.operations import POLYGON_POINT
from imbind.runtime.shapes import resolve_shape


class Polygon(BindingHandle):
    kind = "polygon"

    def __init__(self, *points: object) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        runtime.registry.bind(self, runtime.engine.polygon_new())
        for point in points:
            self.add_point(point)

    def add_point(self, *args: object) -> Polygon:
        """Append ``(x, y)``, ``[x, y]`` or ``{"x": .., "y": ..}``."""
        record = resolve_shape(POLYGON_POINT, args)
        self._runtime.engine.polygon_add_point(self._resource(), record.x, record.y)
        return self

    def bounds(self) -> tuple[int, int, int, int]:
        """Return ``(x1, y1, x2, y2)``; an empty polygon has zero bounds."""
        return self._runtime.engine.polygon_bounds(self._resource())

    def contains(self, *args: object) -> bool:
        record = resolve_shape(POLYGON_POINT, args)
        return self._runtime.engine.polygon_contains_point(self._resource(), record.x, record.y)

    contains_point = contains
