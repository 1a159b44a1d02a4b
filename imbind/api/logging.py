"""Public binding logging API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BindingLoggingConfig:
    """Binding logging pipeline configuration."""

    level_name: str = "INFO"
    console_format: str = "text"  # text|json
    file_path: str | None = None
    file_format: str = "json"  # text|json


def configure_binding_logging(config: BindingLoggingConfig) -> None:
    """Configure root logging for binding hosts."""
    from imbind.runtime.logging import configure_binding_logging as _configure

    _configure(config)
