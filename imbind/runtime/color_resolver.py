"""Color variant disambiguation and routing to engine setters."""

from __future__ import annotations

from dataclasses import dataclass

from imbind.api.colors import CmyaColor, HlsaColor, HsvaColor, RgbaColor
from imbind.api.engine import ImagingEngine
from imbind.api.errors import TypeMismatch

# Variant test order; the first match wins.
_ROUTES: tuple[tuple[type, str], ...] = (
    (RgbaColor, "set_color"),
    (HsvaColor, "set_color_hsva"),
    (HlsaColor, "set_color_hlsa"),
    (CmyaColor, "set_color_cmya"),
)


@dataclass(frozen=True, slots=True)
class ColorPlan:
    """Validated colour ready to be applied to the engine."""

    setter: str
    channels: tuple[float | int, ...]


def plan_color(value: object) -> ColorPlan:
    """Validate a colour value without touching the engine."""
    for variant, setter in _ROUTES:
        if isinstance(value, variant):
            return ColorPlan(setter=setter, channels=value.as_tuple())
    raise TypeMismatch(
        "invalid color (not RgbaColor, HsvaColor, HlsaColor, or CmyaColor): "
        f"{type(value).__name__}"
    )


def apply_color(engine: ImagingEngine, plan: ColorPlan) -> None:
    """Install a planned colour as the active context colour."""
    getattr(engine, plan.setter)(*plan.channels)


def set_context_color(engine: ImagingEngine, value: object) -> None:
    """Validate and install a colour in one step."""
    apply_color(engine, plan_color(value))
