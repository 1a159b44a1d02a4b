"""Colour modifier handle (gamma, brightness and contrast tables)."""

from __future__ import annotations

from imbind.runtime.binding import BindingHandle, get_runtime


class ColorModifier(BindingHandle):
    kind = "color_modifier"

    def __init__(self) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        runtime.registry.bind(self, runtime.engine.create_color_modifier())

    def _engine(self):
        runtime = self._runtime
        runtime.stack.active.color_modifier = runtime.registry.resource(self)
        return runtime.engine

    def gamma(self, value: float) -> ColorModifier:
        self._engine().modify_color_modifier_gamma(float(value))
        return self

    def brightness(self, value: float) -> ColorModifier:
        """Shift every channel by value (1.0 is one full step of 255)."""
        self._engine().modify_color_modifier_brightness(float(value))
        return self

    def contrast(self, value: float) -> ColorModifier:
        self._engine().modify_color_modifier_contrast(float(value))
        return self

    def reset(self) -> ColorModifier:
        """Return to identity tables."""
        self._engine().reset_color_modifier()
        return self
