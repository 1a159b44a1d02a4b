"""Binding runtime modules."""

from imbind.runtime.binding import BindingHandle, BindingRuntime, get_runtime, reset_runtime, set_runtime
from imbind.runtime.color_resolver import ColorPlan, plan_color, set_context_color
from imbind.runtime.config import BindingConfig, load_binding_config
from imbind.runtime.context_stack import ContextStack, ContextState
from imbind.runtime.dispatch import OperationDispatcher
from imbind.runtime.logging import setup_binding_logging
from imbind.runtime.registry import Handle, HandleRegistry
from imbind.runtime.shapes import OperationSpec, resolve_shape

__all__ = [
    "BindingConfig",
    "BindingHandle",
    "BindingRuntime",
    "ColorPlan",
    "ContextStack",
    "ContextState",
    "Handle",
    "HandleRegistry",
    "OperationDispatcher",
    "OperationSpec",
    "get_runtime",
    "load_binding_config",
    "plan_color",
    "reset_runtime",
    "resolve_shape",
    "set_context_color",
    "set_runtime",
    "setup_binding_logging",
]
