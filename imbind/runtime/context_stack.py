"""Process-wide stack of rendering-state frames."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, fields

from imbind.api.enums import Direction, Encoding, Operation

_LOG = logging.getLogger("imbind.context")


@dataclass(slots=True)
class ContextState:
    """Mutable rendering state read by every engine primitive."""

    dither: bool = False
    dither_mask: bool = False
    anti_alias: bool = True
    blend: bool = True
    color_modifier: object | None = None
    operation: Operation = Operation.COPY
    font: object | None = None
    direction: Direction = Direction.RIGHT
    angle: float = 0.0
    color: tuple[int, int, int, int] = (255, 255, 255, 255)
    gradient: object | None = None
    filter: object | None = None
    image: object | None = None
    cliprect: tuple[int, int, int, int] = (0, 0, 0, 0)
    progress_granularity: int = 0
    encoding: Encoding = Encoding.ISO_8859_1
    display: object | None = None
    visual: object | None = None
    colormap: object | None = None
    drawable: object | None = None
    mask: object | None = None

    def snapshot(self) -> dict[str, object]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


class RuntimeContextStack:
    """Stack of context frames; the top frame is the active state."""

    def __init__(self, root: ContextState | None = None) -> None:
        self._frames: list[ContextState] = [root if root is not None else ContextState()]

    @property
    def active(self) -> ContextState:
        """Return the state every primitive currently reads."""
        return self._frames[-1]

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, state: ContextState) -> None:
        """Make state active, keeping the previous frame beneath it."""
        self._frames.append(state)

    def pop(self) -> ContextState:
        """Discard the top frame and return the now-active state."""
        if len(self._frames) == 1:
            _LOG.debug("context_pop_ignored reason=root_frame")
            return self._frames[0]
        self._frames.pop()
        return self._frames[-1]

    @contextmanager
    def scoped(self, state: ContextState) -> Iterator[ContextState]:
        """Push state for the body and pop it afterwards, also on error."""
        self.push(state)
        try:
            yield state
        finally:
            self.pop()

    def frames(self) -> tuple[ContextState, ...]:
        """Return bottom-first snapshot of frames."""
        return tuple(self._frames)


ContextStack = RuntimeContextStack
