"""Shared binding exception policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias

# Bounded set of failures tolerated on silent entry points and implicit release.
RecoverableEngineErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_ENGINE_ERRORS: RecoverableEngineErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    MemoryError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)
