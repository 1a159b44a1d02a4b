"""Colour range handle used by gradient fills."""

from __future__ import annotations

from imbind.api.colors import ColorValue
from imbind.runtime.binding import BindingHandle, get_runtime
from imbind.runtime.color_resolver import apply_color, plan_color


class Gradient(BindingHandle):
    """Ordered colour stops at integer distances.

    ``Gradient((0, RED), (10, BLUE))`` adds each pair in order. A stop
    without a colour takes the active context colour.
    """

    kind = "gradient"

    def __init__(self, *pairs: tuple[int, ColorValue]) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        runtime.registry.bind(self, runtime.engine.create_color_range())
        for distance, color in pairs:
            self.add_color(distance, color)

    def add_color(self, distance: int, color: ColorValue | None = None) -> Gradient:
        runtime = self._runtime
        plan = plan_color(color) if color is not None else None
        runtime.stack.active.gradient = runtime.registry.resource(self)
        if plan is not None:
            apply_color(runtime.engine, plan)
        runtime.engine.add_color_to_color_range(int(distance))
        return self
