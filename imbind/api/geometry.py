"""Four-edge values and the canonical parameter record."""

from __future__ import annotations

import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from imbind.api.errors import TypeMismatch

RECORD_FIELDS: tuple[str, ...] = ("x", "y", "w", "h", "dx", "dy", "dw", "dh", "angle")


def is_composite(value: object) -> bool:
    """Return True for a non-string sequence or a mapping."""
    return isinstance(value, Mapping) or is_sequence(value)


def is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_scalar(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class Quad:
    """Four named channels built from scalars, one sequence or one mapping."""

    __slots__: ClassVar[tuple[str, ...]] = ()
    FIELDS: ClassVar[tuple[str, str, str, str]]
    ALIASES: ClassVar[dict[str, str]] = {}
    KINDS: ClassVar[tuple[type, type, type, type]]

    def __init__(self, *args: object) -> None:
        if len(args) == 4:
            values: Sequence[object] = args
        elif len(args) == 1 and isinstance(args[0], Mapping):
            source = args[0]
            missing = [name for name in self.FIELDS if name not in source]
            if missing:
                raise TypeMismatch(
                    f"{type(self).__name__} mapping is missing keys: {', '.join(missing)}"
                )
            values = [source[name] for name in self.FIELDS]
        elif len(args) == 1 and is_sequence(args[0]):
            values = args[0]  # type: ignore[assignment]
            if len(values) != 4:
                raise TypeMismatch(f"{type(self).__name__} needs 4 values, got {len(values)}")
        elif not args:
            values = (0, 0, 0, 0)
        else:
            raise TypeMismatch(
                f"{type(self).__name__} accepts 4 values, one sequence or one mapping"
            )
        for name, kind, value in zip(self.FIELDS, self.KINDS, values, strict=True):
            object.__setattr__(self, name, self._coerce(name, kind, value))

    def _coerce(self, name: str, kind: type, value: object) -> object:
        try:
            return kind(value)
        except (TypeError, ValueError) as exc:
            raise TypeMismatch(f"{type(self).__name__}.{name} must be a number, got {value!r}") from exc

    @classmethod
    def of(cls, value: object) -> Quad:
        """Coerce an instance, a sequence or a mapping."""
        if isinstance(value, cls):
            return value
        return cls(value)

    def __getattr__(self, name: str) -> object:
        target = type(self).ALIASES.get(name)
        if target is None:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        return getattr(self, target)

    def __setattr__(self, name: str, value: object) -> None:
        target = type(self).ALIASES.get(name, name)
        if target in self.FIELDS:
            kind = self.KINDS[self.FIELDS.index(target)]
            object.__setattr__(self, target, self._coerce(target, kind, value))
            return
        object.__setattr__(self, name, value)

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, name) for name in self.FIELDS)

    def __iter__(self):
        return iter(self.as_tuple())

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.FIELDS)
        return f"{type(self).__name__}({body})"


class Border(Quad):
    """Non-scaling image edges in pixels."""

    __slots__ = ("left", "top", "right", "bottom")
    FIELDS = ("left", "top", "right", "bottom")
    ALIASES = {"l": "left", "t": "top", "r": "right", "b": "bottom"}
    KINDS = (int, int, int, int)


@dataclass(slots=True)
class ShapeRecord:
    """Normalized call parameters for one dispatched operation."""

    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0
    dx: int = 0
    dy: int = 0
    dw: int = 0
    dh: int = 0
    angle: float = 0.0
    populated: set[str] = field(default_factory=set)
    leading: dict[str, object] = field(default_factory=dict)
    trailing: dict[str, object] = field(default_factory=dict)

    @property
    def rect(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)

    @property
    def dest_rect(self) -> tuple[int, int, int, int]:
        return (self.dx, self.dy, self.dw, self.dh)

    @property
    def is_empty(self) -> bool:
        return not self.populated
