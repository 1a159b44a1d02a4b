"""Binding runtime composition root."""

from __future__ import annotations

import logging

from imbind.api.engine import ImagingEngine, create_imaging_engine
from imbind.runtime.config import BindingConfig, load_binding_config
from imbind.runtime.context_stack import ContextStack
from imbind.runtime.dispatch import OperationDispatcher
from imbind.runtime.logging import setup_binding_logging
from imbind.runtime.registry import Handle, HandleRegistry

_LOG = logging.getLogger("imbind.runtime")


class BindingRuntime:
    """Owns the one context stack, engine, registry and dispatcher of a process."""

    def __init__(
        self,
        engine: ImagingEngine | None = None,
        *,
        stack: ContextStack | None = None,
        config: BindingConfig | None = None,
    ) -> None:
        self.config = config if config is not None else load_binding_config()
        self.stack = stack if stack is not None else ContextStack()
        self.engine = engine if engine is not None else create_imaging_engine(self.stack, self.config)
        self.registry = HandleRegistry(self.stack)
        self.dispatcher = OperationDispatcher(
            self.engine,
            self.stack,
            self.registry,
            wrap_image=self._wrap_image,
            trace=self.config.trace_dispatch,
        )
        self._register_kinds()

    def _register_kinds(self) -> None:
        engine = self.engine
        self.registry.register_kind("image", engine.free_image, slot="image")
        self.registry.register_kind("font", engine.free_font, slot="font")
        self.registry.register_kind("gradient", engine.free_color_range, slot="gradient")
        self.registry.register_kind("filter", engine.free_filter, slot="filter")
        self.registry.register_kind("color_modifier", engine.free_color_modifier, slot="color_modifier")
        self.registry.register_kind("polygon", engine.polygon_free)
        self.registry.register_kind("context")

    def _wrap_image(self, resource: object) -> Handle:
        from imbind.image import Image

        return Image._adopt(resource, runtime=self)

    def close(self) -> None:
        """Release every owned resource."""
        self.registry.clear()


class BindingHandle(Handle):
    """Handle that remembers the runtime it was created in."""

    _runtime: BindingRuntime

    @classmethod
    def _adopt(cls, resource: object | None, *, runtime: BindingRuntime | None = None, owned: bool = True):
        handle = cls.__new__(cls)
        handle._runtime = runtime if runtime is not None else get_runtime()
        return handle._runtime.registry.bind(handle, resource, owned=owned)


_RUNTIME: BindingRuntime | None = None


def get_runtime() -> BindingRuntime:
    """Return the process runtime, creating it on first use."""
    global _RUNTIME
    if _RUNTIME is None:
        _RUNTIME = BindingRuntime()
        setup_binding_logging(_RUNTIME.config.log_level)
        _LOG.debug("binding_runtime_created engine=%s", type(_RUNTIME.engine).__name__)
    return _RUNTIME


def set_runtime(runtime: BindingRuntime) -> BindingRuntime:
    global _RUNTIME
    _RUNTIME = runtime
    return runtime


def reset_runtime() -> None:
    """Release and forget the process runtime."""
    global _RUNTIME
    if _RUNTIME is not None:
        _RUNTIME.close()
    _RUNTIME = None
