"""Argument-shape resolution into canonical parameter records."""

from __future__ import annotations

import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from imbind.api.colors import COLOR_VARIANTS, RgbaColor
from imbind.api.enums import Direction
from imbind.api.errors import TypeMismatch
from imbind.api.geometry import ShapeRecord, is_composite, is_scalar, is_sequence
from imbind.runtime.registry import Handle


class SlotKind(StrEnum):
    """Kinds of non-shape positional arguments."""

    IMAGE = "image"
    FONT = "font"
    GRADIENT = "gradient"
    POLYGON = "polygon"
    COLOR_MODIFIER = "color_modifier"
    FILTER = "filter"
    TEXT = "text"
    COLOR = "color"
    RGBA = "rgba"
    FLAG = "flag"
    DIRECTION = "direction"
    NUMBER = "number"


HANDLE_SLOT_KINDS: frozenset[SlotKind] = frozenset(
    {
        SlotKind.IMAGE,
        SlotKind.FONT,
        SlotKind.GRADIENT,
        SlotKind.POLYGON,
        SlotKind.COLOR_MODIFIER,
        SlotKind.FILTER,
    }
)


_DIRECTION_VALUES: frozenset[int] = frozenset(member.value for member in Direction)


def is_direction(value: object) -> bool:
    """Return True for a Direction or an integer naming one."""
    if not isinstance(value, numbers.Integral) or isinstance(value, bool):
        return False
    return int(value) in _DIRECTION_VALUES


@dataclass(frozen=True, slots=True)
class Slot:
    name: str
    kind: SlotKind
    required: bool = True


@dataclass(frozen=True, slots=True)
class FieldGroup:
    """Record fields one composite argument may supply, with their mapping keys."""

    fields: tuple[str, ...]
    keys: tuple[str, ...] = ()

    @property
    def mapping_keys(self) -> tuple[str, ...]:
        return self.keys or self.fields


@dataclass(frozen=True, slots=True)
class OperationSpec:
    """Arity table entry for one dispatched operation."""

    name: str
    counts: tuple[int, ...]
    fields: tuple[str, ...] = ()
    groups: tuple[FieldGroup, ...] = ()
    leading: tuple[Slot, ...] = ()
    trailing: tuple[Slot, ...] = ()
    allow_empty: bool = False

    def describe_counts(self) -> str:
        return ", ".join(str(count) for count in self.counts)


def accepts(kind: SlotKind, value: object) -> bool:
    """Return True when value may fill a slot of the given kind."""
    if kind in HANDLE_SLOT_KINDS:
        return isinstance(value, Handle) and value.kind == kind.value
    if kind is SlotKind.TEXT:
        return isinstance(value, (str, bytes))
    if kind is SlotKind.NUMBER:
        return is_scalar(value)
    if kind is SlotKind.RGBA:
        return isinstance(value, RgbaColor)
    if kind is SlotKind.FLAG:
        return isinstance(value, bool)
    if kind is SlotKind.DIRECTION:
        return is_direction(value)
    if kind is SlotKind.COLOR:
        # Colour slots take any non-integer value; variant validation happens later.
        return isinstance(value, COLOR_VARIANTS) or not (is_scalar(value) or isinstance(value, bool))
    return False


def resolve_shape(spec: OperationSpec, args: Sequence[object]) -> ShapeRecord:
    """Normalize raw call arguments into a ShapeRecord for spec."""
    if len(args) not in spec.counts:
        raise TypeMismatch(
            f"{spec.name}: invalid argument count {len(args)} (expected {spec.describe_counts()})"
        )
    record = ShapeRecord()
    position = 0
    for slot in spec.leading:
        value = args[position] if position < len(args) else None
        if value is None or not accepts(slot.kind, value):
            raise TypeMismatch(
                f"{spec.name}: argument {position + 1} must be a {slot.kind.value}"
            )
        record.leading[slot.name] = value
        position += 1

    cursor = 0
    while cursor < len(spec.fields) and position < len(args):
        value = args[position]
        if is_composite(value):
            group = _match_group(spec, cursor, value)
            if group is None:
                raise _shape_error(spec)
            for name, raw in zip(group.fields, _group_values(group, value), strict=True):
                _assign(spec, record, name, raw)
            cursor += len(group.fields)
        elif is_scalar(value):
            _assign(spec, record, spec.fields[cursor], value)
            cursor += 1
        else:
            break
        position += 1

    if cursor < len(spec.fields) and not (cursor == 0 and spec.allow_empty):
        raise _shape_error(spec)

    slot_index = 0
    for value in args[position:]:
        while slot_index < len(spec.trailing) and not accepts(spec.trailing[slot_index].kind, value):
            if spec.trailing[slot_index].required:
                raise _shape_error(spec)
            slot_index += 1
        if slot_index >= len(spec.trailing):
            raise _shape_error(spec)
        record.trailing[spec.trailing[slot_index].name] = value
        slot_index += 1
    for slot in spec.trailing[slot_index:]:
        if slot.required:
            raise _shape_error(spec)
    return record


def _match_group(spec: OperationSpec, cursor: int, value: object) -> FieldGroup | None:
    remaining = spec.fields[cursor:]
    candidates = [
        group
        for group in spec.groups
        if remaining[: len(group.fields)] == group.fields
    ]
    candidates.sort(key=lambda group: len(group.fields), reverse=True)
    for group in candidates:
        if isinstance(value, Mapping):
            if all(key in value for key in group.mapping_keys):
                return group
        elif is_sequence(value) and len(value) == len(group.fields):  # type: ignore[arg-type]
            return group
    return None


def _group_values(group: FieldGroup, value: object) -> list[object]:
    if isinstance(value, Mapping):
        return [value[key] for key in group.mapping_keys]
    return list(value)  # type: ignore[call-overload]


def _assign(spec: OperationSpec, record: ShapeRecord, name: str, raw: object) -> None:
    if not is_scalar(raw):
        raise TypeMismatch(f"{spec.name}: {name} must be a number, got {type(raw).__name__}")
    if name == "angle":
        record.angle = float(raw)  # type: ignore[arg-type]
    else:
        setattr(record, name, int(raw))  # type: ignore[call-overload]
    record.populated.add(name)


def _shape_error(spec: OperationSpec) -> TypeMismatch:
    return TypeMismatch(
        f"{spec.name}: invalid argument shape (accepted counts: {spec.describe_counts()})"
    )
