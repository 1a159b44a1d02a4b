"""Binding configuration sourced from environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_IMAGE_CACHE_BYTES = 4 * 1024 * 1024
DEFAULT_FONT_CACHE_BYTES = 512 * 1024


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return minimum
    return value


def _csv(name: str, *, env: Mapping[str, str] | None = None) -> tuple[str, ...]:
    raw = _raw(name, env=env)
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True, slots=True)
class BindingConfig:
    """Immutable binding configuration."""

    image_cache_bytes: int = DEFAULT_IMAGE_CACHE_BYTES
    font_cache_bytes: int = DEFAULT_FONT_CACHE_BYTES
    font_path: tuple[str, ...] = field(default_factory=tuple)
    trace_dispatch: bool = False
    log_level: str = "INFO"


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with binding-prefixed override."""
    value = _raw("IMBIND_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper()


def load_binding_config(*, env: Mapping[str, str] | None = None) -> BindingConfig:
    """Load immutable binding configuration from env vars."""
    return BindingConfig(
        image_cache_bytes=_int(
            "IMBIND_IMAGE_CACHE_BYTES", DEFAULT_IMAGE_CACHE_BYTES, minimum=0, env=env
        ),
        font_cache_bytes=_int("IMBIND_FONT_CACHE_BYTES", DEFAULT_FONT_CACHE_BYTES, minimum=0, env=env),
        font_path=_csv("IMBIND_FONT_PATH", env=env),
        trace_dispatch=_flag("IMBIND_TRACE_DISPATCH", False, env=env),
        log_level=resolve_log_level_name(env=env),
    )
