"""Context handle: a saved rendering-state frame for the context stack."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from imbind.api.colors import ColorValue, RgbaColor
from imbind.api.enums import Direction, Encoding, Operation
from imbind.api.errors import TypeMismatch
from imbind.color_modifier import ColorModifier
from imbind.filter import Filter
from imbind.font import Font
from imbind.gradient import Gradient
from imbind.image import Image
from imbind.runtime.binding import BindingHandle, BindingRuntime, get_runtime
from imbind.runtime.color_resolver import set_context_color
from imbind.runtime.context_stack import ContextState
from imbind.runtime.operations import RECT, RECT_FIELDS
from imbind.runtime.registry import Handle
from imbind.runtime.shapes import OperationSpec, resolve_shape

# X drawable targets are not available with the Pillow engine.
X11_SUPPORT = False

_CLIPRECT = OperationSpec("cliprect", (1,), RECT_FIELDS, (RECT,))


def _state_property(name: str, coerce: Callable[[Any], Any] | None = None, doc: str | None = None) -> property:
    def getter(self: Context) -> Any:
        with self._scope() as state:
            return getattr(state, name)

    def setter(self: Context, value: Any) -> None:
        if coerce is not None:
            try:
                value = coerce(value)
            except (TypeError, ValueError) as exc:
                raise TypeMismatch(f"invalid {name}: {value!r}") from exc
        with self._scope() as state:
            setattr(state, name, value)

    return property(getter, setter, doc=doc)


def _handle_property(name: str, wrapper: type[BindingHandle]) -> property:
    def getter(self: Context) -> BindingHandle | None:
        with self._scope() as state:
            return self._wrap(wrapper, getattr(state, name))

    def setter(self: Context, value: BindingHandle | None) -> None:
        resource = self._runtime.registry.resource(value) if value is not None else None
        with self._scope() as state:
            setattr(state, name, resource)

    return property(getter, setter)


class Context(BindingHandle):
    """Rendering-state frame.

    Reading or writing any attribute pushes this frame, touches the active
    state and pops it again, so the frame below is never disturbed.
    Handles returned by ``Context.get`` and ``Context.pop`` do not own the
    state they point at.
    """

    kind = "context"

    def __init__(self) -> None:
        runtime = get_runtime()
        self._runtime = runtime
        runtime.registry.bind(self, ContextState())

    def _scope(self):
        runtime = self._runtime
        return runtime.stack.scoped(runtime.registry.resource(self))  # type: ignore[arg-type]

    def _wrap(self, wrapper: type[BindingHandle], resource: object | None) -> BindingHandle | None:
        if resource is None:
            return None
        existing = self._runtime.registry.lookup(wrapper.kind, resource)
        if existing is not None:
            return existing  # type: ignore[return-value]
        return wrapper._adopt(resource, runtime=self._runtime, owned=False)

    # stack operations

    def push(self) -> Context:
        """Make this frame the active state."""
        runtime = self._runtime
        runtime.stack.push(runtime.registry.resource(self))  # type: ignore[arg-type]
        return self

    @classmethod
    def pop(cls) -> Context:
        """Discard the active frame and return a handle for the one now active."""
        runtime = get_runtime()
        return cls._for_state(runtime, runtime.stack.pop())

    @classmethod
    def get(cls) -> Context:
        runtime = get_runtime()
        return cls._for_state(runtime, runtime.stack.active)

    current = get

    @classmethod
    def _for_state(cls, runtime: BindingRuntime, state: ContextState) -> Context:
        existing: Handle | None = runtime.registry.lookup(cls.kind, state)
        if isinstance(existing, cls):
            return existing
        return cls._adopt(state, runtime=runtime, owned=False)

    # plain state

    dither = _state_property("dither", bool)
    dither_mask = _state_property("dither_mask", bool)
    anti_alias = _state_property("anti_alias", bool)
    blend = _state_property("blend", bool)
    operation = _state_property("operation", Operation)
    direction = _state_property("direction", Direction)
    angle = _state_property("angle", float, doc="Text angle in radians, used with Direction.ANGLE.")
    progress_granularity = _state_property("progress_granularity", int)
    encoding = _state_property("encoding", Encoding)
    display = _state_property("display")
    visual = _state_property("visual")
    colormap = _state_property("colormap")
    drawable = _state_property("drawable")
    mask = _state_property("mask")

    # resource slots

    image = _handle_property("image", Image)
    font = _handle_property("font", Font)
    gradient = _handle_property("gradient", Gradient)
    filter = _handle_property("filter", Filter)
    color_modifier = _handle_property("color_modifier", ColorModifier)
    cmod = color_modifier

    @property
    def color(self) -> RgbaColor:
        with self._scope() as state:
            return RgbaColor(*state.color)

    @color.setter
    def color(self, value: ColorValue) -> None:
        with self._scope():
            set_context_color(self._runtime.engine, value)

    @property
    def cliprect(self) -> tuple[int, int, int, int]:
        """Clip rectangle ``(x, y, w, h)``; zero width disables clipping."""
        with self._scope() as state:
            return state.cliprect

    @cliprect.setter
    def cliprect(self, value: object) -> None:
        rect = resolve_shape(_CLIPRECT, (value,)).rect
        with self._scope() as state:
            state.cliprect = rect

    def __repr__(self) -> str:
        if not self.live:
            return "<Context deleted>"
        return f"<Context depth={self._runtime.stack.depth}>"
