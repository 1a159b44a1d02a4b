"""Single-ownership registry binding host wrappers to engine resources."""

from __future__ import annotations

import itertools
import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, TypeAlias, TypeVar

from imbind.api.errors import DeletedError
from imbind.runtime.context_stack import ContextStack
from imbind.runtime.errors import RECOVERABLE_ENGINE_ERRORS, log_recoverable

_LOG = logging.getLogger("imbind.registry")

ResourceFree: TypeAlias = Callable[..., None]
THandle = TypeVar("THandle", bound="Handle")


class Handle:
    """Host wrapper bound to at most one engine resource."""

    kind: ClassVar[str] = ""

    _registry: RuntimeHandleRegistry | None = None
    _token: int | None = None

    @property
    def live(self) -> bool:
        registry = self._registry
        return registry is not None and registry.is_live(self)

    def _resource(self) -> object:
        registry = self._registry
        if registry is None:
            raise DeletedError(f"{self.kind or 'handle'} deleted")
        return registry.resource(self)


@dataclass(slots=True)
class _KindEntry:
    free: ResourceFree | None
    slot: str | None


@dataclass(slots=True)
class _Binding:
    kind: str
    resource: object | None
    owned: bool
    handle: weakref.ref[Handle]
    finalizer: weakref.finalize


class RuntimeHandleRegistry:
    """Registry that binds, checks, rebinds and releases handles by kind."""

    def __init__(self, stack: ContextStack) -> None:
        self._stack = stack
        self._kinds: dict[str, _KindEntry] = {}
        self._bindings: dict[int, _Binding] = {}
        self._owners: dict[int, int] = {}
        self._tokens = itertools.count(1)

    def register_kind(
        self,
        kind: str,
        free: ResourceFree | None = None,
        *,
        slot: str | None = None,
    ) -> None:
        """Register the freeing primitive (and optional context slot) for one kind.

        Slot kinds are installed into the active context before ``free`` is
        called without arguments; other kinds receive the resource directly.
        """
        normalized = kind.strip()
        if not normalized:
            raise ValueError("kind must not be empty")
        self._kinds[normalized] = _KindEntry(free=free, slot=slot)

    def bind(self, handle: THandle, resource: object | None, *, owned: bool = True) -> THandle:
        """Bind a fresh resource to a new handle; None yields a dead handle."""
        kind = handle.kind
        if kind not in self._kinds:
            raise KeyError(f"unknown handle kind: {kind}")
        if handle._token is not None and handle._token in self._bindings:
            raise ValueError(f"{kind} handle is already bound")
        token = next(self._tokens)
        handle._registry = self
        handle._token = token
        finalizer = weakref.finalize(handle, self._finalize, token)
        finalizer.atexit = False
        if resource is not None and owned:
            self._owners[id(resource)] = token
        self._bindings[token] = _Binding(
            kind=kind,
            resource=resource,
            owned=owned,
            handle=weakref.ref(handle),
            finalizer=finalizer,
        )
        return handle

    def resource(self, handle: Handle) -> object:
        """Return the bound resource or raise DeletedError."""
        binding = self._bindings.get(handle._token) if handle._token is not None else None
        if binding is None or binding.resource is None:
            raise DeletedError(f"{handle.kind or 'handle'} deleted")
        return binding.resource

    def is_live(self, handle: Handle) -> bool:
        binding = self._bindings.get(handle._token) if handle._token is not None else None
        return binding is not None and binding.resource is not None

    def is_owner(self, handle: Handle) -> bool:
        binding = self._bindings.get(handle._token) if handle._token is not None else None
        return binding is not None and binding.owned

    def rebind(self, handle: Handle, resource: object) -> None:
        """Swap the bound resource in place, freeing the previous one."""
        old = self.resource(handle)
        binding = self._bindings[handle._token]  # type: ignore[index]
        binding.resource = resource
        if not binding.owned:
            return
        self._owners[id(resource)] = handle._token  # type: ignore[assignment]
        if old is not resource:
            self._free(binding.kind, old)

    def release(self, handle: Handle, **options: object) -> None:
        """Explicitly release a handle; it stays dead afterwards."""
        if handle._token is None:
            return
        binding = self._bindings.pop(handle._token, None)
        if binding is None:
            return
        binding.finalizer.detach()
        if binding.resource is not None and binding.owned:
            self._free(binding.kind, binding.resource, **options)

    def lookup(self, kind: str, resource: object | None) -> Handle | None:
        """Return the live owning handle of a resource, if any."""
        if resource is None:
            return None
        token = self._owners.get(id(resource))
        if token is None:
            return None
        binding = self._bindings.get(token)
        if binding is None or binding.kind != kind or binding.resource is not resource:
            return None
        return binding.handle()

    def live_count(self, kind: str | None = None) -> int:
        return sum(
            1
            for binding in self._bindings.values()
            if binding.resource is not None
            and binding.owned
            and (kind is None or binding.kind == kind)
        )

    def clear(self) -> None:
        """Release every owned resource."""
        for token, binding in tuple(self._bindings.items()):
            self._bindings.pop(token, None)
            binding.finalizer.detach()
            if binding.resource is not None and binding.owned:
                self._free(binding.kind, binding.resource)

    def _finalize(self, token: int) -> None:
        binding = self._bindings.pop(token, None)
        if binding is None or binding.resource is None or not binding.owned:
            return
        try:
            self._free(binding.kind, binding.resource)
        except RECOVERABLE_ENGINE_ERRORS:
            log_recoverable(_LOG, f"implicit release failed kind={binding.kind}")

    def _free(self, kind: str, resource: object, **options: object) -> None:
        entry = self._kinds[kind]
        if self._owners.get(id(resource)) is not None:
            self._owners.pop(id(resource), None)
        if entry.free is None:
            return
        if entry.slot is None:
            entry.free(resource, **options)
            return
        active = self._stack.active
        previous = getattr(active, entry.slot)
        setattr(active, entry.slot, resource)
        try:
            entry.free(**options)
        finally:
            setattr(active, entry.slot, None if previous is resource else previous)


HandleRegistry = RuntimeHandleRegistry
