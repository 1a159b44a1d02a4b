"""Single chokepoint turning wrapper calls into engine primitives."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from imbind.api.engine import ImagingEngine
from imbind.api.errors import ImbindError
from imbind.runtime.color_resolver import apply_color, plan_color
from imbind.runtime.context_stack import ContextStack
from imbind.runtime.operations import operation
from imbind.runtime.registry import Handle, HandleRegistry
from imbind.runtime.shapes import resolve_shape

_LOG = logging.getLogger("imbind.dispatch")

# Leading handle slots that double as context slots.
_CONTEXT_SLOTS: tuple[str, ...] = ("font", "gradient", "color_modifier", "filter")


class RuntimeOperationDispatcher:
    """Resolve arguments, check liveness, prime the context and invoke one primitive."""

    def __init__(
        self,
        engine: ImagingEngine,
        stack: ContextStack,
        registry: HandleRegistry,
        *,
        wrap_image: Callable[[object], Handle],
        trace: bool = False,
    ) -> None:
        self._engine = engine
        self._stack = stack
        self._registry = registry
        self._wrap_image = wrap_image
        self._trace = trace

    def activate(self, target: Handle) -> ImagingEngine:
        """Make a live image the active context image and return the engine."""
        resource = self._registry.resource(target)
        self._stack.active.image = resource
        return self._engine

    def call(self, target: Handle, name: str, args: Sequence[object] = ()) -> object:
        """Run one named operation against the target image."""
        resource = self._registry.resource(target)
        entry = operation(name)
        record = resolve_shape(entry.spec, args)
        resources: dict[str, object] = {}
        for slot, value in record.leading.items():
            if isinstance(value, Handle):
                resources[slot] = self._registry.resource(value)
        plan = plan_color(record.trailing["color"]) if "color" in record.trailing else None

        state = self._stack.active
        state.image = resource
        for slot in _CONTEXT_SLOTS:
            if slot in resources:
                setattr(state, slot, resources[slot])
        if plan is not None:
            apply_color(self._engine, plan)
        if self._trace:
            _LOG.debug(
                "dispatch op=%s fields=%s color=%s",
                name,
                sorted(record.populated),
                plan.setter if plan is not None else "-",
            )
        return entry.invoke(self._engine, state, record, resources)

    def draw(self, target: Handle, name: str, args: Sequence[object] = ()) -> object:
        """Mutate the target; return the target unless the primitive yields a value."""
        result = self.call(target, name, args)
        return target if result is None else result

    def query(self, target: Handle, name: str, args: Sequence[object] = ()) -> object:
        return self.call(target, name, args)

    def transform(self, target: Handle, name: str, args: Sequence[object] = (), *, in_place: bool) -> Handle:
        """Apply a mutating transform in place or to a fresh clone."""
        subject = target if in_place else self.clone(target)
        self.call(subject, name, args)
        return subject

    def derive(self, target: Handle, name: str, args: Sequence[object] = (), *, in_place: bool) -> Handle:
        """Run a primitive that yields a new engine image; rebind or wrap it."""
        created = self.call(target, name, args)
        if created is None:
            raise ImbindError(f"{name} produced no image")
        if not in_place:
            return self._wrap_image(created)
        self._registry.rebind(target, created)
        self._stack.active.image = created
        return target

    def clone(self, target: Handle) -> Handle:
        return self.derive(target, "clone", (), in_place=False)


OperationDispatcher = RuntimeOperationDispatcher
