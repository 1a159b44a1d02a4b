"""Arity tables and engine invokers for every dispatched image operation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

from imbind.api.engine import ImagingEngine
from imbind.api.enums import Direction
from imbind.api.geometry import ShapeRecord
from imbind.runtime.context_stack import ContextState
from imbind.runtime.shapes import FieldGroup, OperationSpec, Slot, SlotKind

Invoker: TypeAlias = Callable[[ImagingEngine, ContextState, ShapeRecord, dict[str, object]], object]

POINT = FieldGroup(("x", "y"))
SIZE = FieldGroup(("w", "h"))
RECT = FieldGroup(("x", "y", "w", "h"))
OFFSET = FieldGroup(("dx", "dy"))
RECT_OFFSET = FieldGroup(("x", "y", "w", "h", "dx", "dy"))
SCALED_RECT = FieldGroup(("x", "y", "w", "h", "dw", "dh"))
LINE_END = FieldGroup(("dx", "dy"), ("x", "y"))
DEST_RECT = FieldGroup(("dx", "dy", "dw", "dh"), ("x", "y", "w", "h"))
DEST_POINT = FieldGroup(("dx", "dy"), ("x", "y"))
DEST_SIZE = FieldGroup(("dw", "dh"), ("w", "h"))

RECT_FIELDS = ("x", "y", "w", "h")
RECT_GROUPS = (RECT, POINT, SIZE)
COPY_FIELDS = ("x", "y", "w", "h", "dx", "dy")
COPY_GROUPS = (RECT_OFFSET, RECT, POINT, SIZE, OFFSET)

COLOR = Slot("color", SlotKind.COLOR, required=False)


@dataclass(frozen=True, slots=True)
class OperationEntry:
    spec: OperationSpec
    invoke: Invoker


OPERATIONS: dict[str, OperationEntry] = {}


def register_operation(spec: OperationSpec, invoke: Invoker) -> None:
    """Register one operation under its name."""
    OPERATIONS[spec.name] = OperationEntry(spec=spec, invoke=invoke)


def operation(name: str) -> OperationEntry:
    entry = OPERATIONS.get(name)
    if entry is None:
        raise KeyError(f"unknown operation: {name}")
    return entry


def _simple(name: str, call: Callable[[ImagingEngine], object]) -> None:
    register_operation(OperationSpec(name=name, counts=(0,)), lambda engine, state, record, res: call(engine))


def _draw_text(engine: ImagingEngine, state: ContextState, record: ShapeRecord, res: dict[str, object]) -> object:
    direction = record.trailing.get("direction")
    if direction is None:
        return engine.draw_text(record.x, record.y, record.leading["text"])  # type: ignore[arg-type]
    previous = state.direction
    state.direction = Direction(int(direction))  # type: ignore[call-overload]
    try:
        return engine.draw_text(record.x, record.y, record.leading["text"])  # type: ignore[arg-type]
    finally:
        state.direction = previous


def _apply_cmod(engine: ImagingEngine, state: ContextState, record: ShapeRecord, res: dict[str, object]) -> object:
    if record.is_empty:
        return engine.apply_color_modifier()
    return engine.apply_color_modifier_to_rectangle(*record.rect)


# drawing
register_operation(
    OperationSpec("draw_pixel", (1, 2, 3), ("x", "y"), (POINT,), trailing=(COLOR,)),
    lambda engine, state, record, res: engine.draw_pixel(record.x, record.y),
)
register_operation(
    OperationSpec("draw_line", (2, 3, 4, 5), ("x", "y", "dx", "dy"), (POINT, LINE_END), trailing=(COLOR,)),
    lambda engine, state, record, res: engine.draw_line(record.x, record.y, record.dx, record.dy),
)
for _name in ("draw_rect", "fill_rect", "draw_ellipse", "fill_ellipse"):
    register_operation(
        OperationSpec(_name, (1, 2, 3, 4, 5), RECT_FIELDS, RECT_GROUPS, trailing=(COLOR,)),
        lambda engine, state, record, res, _name=_name: getattr(engine, _name)(*record.rect),
    )
register_operation(
    OperationSpec(
        "draw_text",
        (3, 4, 5, 6),
        ("x", "y"),
        (POINT,),
        leading=(Slot("font", SlotKind.FONT), Slot("text", SlotKind.TEXT)),
        trailing=(COLOR, Slot("direction", SlotKind.DIRECTION, required=False)),
    ),
    _draw_text,
)
register_operation(
    OperationSpec(
        "fill_gradient",
        (3, 4, 6),
        RECT_FIELDS + ("angle",),
        RECT_GROUPS,
        leading=(Slot("gradient", SlotKind.GRADIENT),),
    ),
    lambda engine, state, record, res: engine.fill_gradient(*record.rect, record.angle),
)
register_operation(
    OperationSpec(
        "draw_poly",
        (1, 2, 3),
        leading=(Slot("polygon", SlotKind.POLYGON),),
        trailing=(Slot("closed", SlotKind.FLAG, required=False), COLOR),
    ),
    lambda engine, state, record, res: engine.draw_polygon(
        res["polygon"], bool(record.trailing.get("closed", True))  # type: ignore[arg-type]
    ),
)
register_operation(
    OperationSpec("fill_poly", (1, 2), leading=(Slot("polygon", SlotKind.POLYGON),), trailing=(COLOR,)),
    lambda engine, state, record, res: engine.fill_polygon(res["polygon"]),  # type: ignore[arg-type]
)
register_operation(
    OperationSpec("copy_alpha", (2, 3), ("x", "y"), (POINT,), leading=(Slot("source", SlotKind.IMAGE),)),
    lambda engine, state, record, res: engine.copy_alpha(res["source"], record.x, record.y),  # type: ignore[arg-type]
)
register_operation(
    OperationSpec(
        "copy_alpha_rect",
        (2, 3, 4, 5, 6, 7),
        COPY_FIELDS,
        COPY_GROUPS,
        leading=(Slot("source", SlotKind.IMAGE),),
    ),
    lambda engine, state, record, res: engine.copy_alpha_rect(
        res["source"], *record.rect, record.dx, record.dy  # type: ignore[arg-type]
    ),
)
for _name in ("scroll_rect", "copy_rect"):
    register_operation(
        OperationSpec(_name, (1, 2, 3, 4, 5, 6), COPY_FIELDS, COPY_GROUPS),
        lambda engine, state, record, res, _name=_name: getattr(engine, _name)(
            *record.rect, record.dx, record.dy
        ),
    )
register_operation(
    OperationSpec(
        "apply_color_modifier",
        (1, 2, 5),
        RECT_FIELDS,
        RECT_GROUPS,
        leading=(Slot("color_modifier", SlotKind.COLOR_MODIFIER),),
        allow_empty=True,
    ),
    _apply_cmod,
)
register_operation(
    OperationSpec("static_filter", (1,), leading=(Slot("filter", SlotKind.FILTER),)),
    lambda engine, state, record, res: engine.apply_filter(),
)
register_operation(
    OperationSpec("script_filter", (1,), leading=(Slot("script", SlotKind.TEXT),)),
    lambda engine, state, record, res: engine.apply_filter_script(str(record.leading["script"])),
)

# transforms
for _name in (
    "flip_horizontal",
    "flip_vertical",
    "flip_diagonal",
    "tile_horizontal",
    "tile_vertical",
    "tile",
    "clear",
):
    _simple(_name, lambda engine, _name=_name: getattr(engine, _name)())
for _name in ("blur", "sharpen", "orientate"):
    register_operation(
        OperationSpec(_name, (1,), leading=(Slot("amount", SlotKind.NUMBER),)),
        lambda engine, state, record, res, _name=_name: getattr(engine, _name)(int(record.leading["amount"])),  # type: ignore[call-overload]
    )
register_operation(
    OperationSpec("clear_color", (1,), leading=(Slot("color", SlotKind.RGBA),)),
    lambda engine, state, record, res: engine.clear_color(*record.leading["color"].as_tuple()),  # type: ignore[attr-defined]
)
register_operation(
    OperationSpec(
        "blend",
        (3, 4, 5, 6, 9, 10),
        ("x", "y", "w", "h", "dx", "dy", "dw", "dh"),
        (RECT, POINT, SIZE, DEST_RECT, DEST_POINT, DEST_SIZE),
        leading=(Slot("source", SlotKind.IMAGE),),
        trailing=(Slot("merge_alpha", SlotKind.FLAG, required=False),),
    ),
    lambda engine, state, record, res: engine.blend(
        res["source"],  # type: ignore[arg-type]
        bool(record.trailing.get("merge_alpha", True)),
        *record.rect,
        *record.dest_rect,
    ),
)

# derivations returning a fresh engine image
_simple("clone", lambda engine: engine.clone_image())
register_operation(
    OperationSpec("crop", (1, 4), RECT_FIELDS, (RECT,)),
    lambda engine, state, record, res: engine.crop(*record.rect),
)
register_operation(
    OperationSpec("crop_scaled", (1, 6), ("x", "y", "w", "h", "dw", "dh"), (SCALED_RECT,)),
    lambda engine, state, record, res: engine.crop_scaled(*record.rect, record.dw, record.dh),
)
register_operation(
    OperationSpec("rotate", (1,), leading=(Slot("angle", SlotKind.NUMBER),)),
    lambda engine, state, record, res: engine.rotate(float(record.leading["angle"])),  # type: ignore[arg-type]
)

# queries
for _name in ("query_pixel", "query_pixel_hsva", "query_pixel_hlsa", "query_pixel_cmya"):
    register_operation(
        OperationSpec(_name, (1, 2), ("x", "y"), (POINT,)),
        lambda engine, state, record, res, _name=_name: getattr(engine, _name)(record.x, record.y),
    )

# non-image operations that only need shape resolution
POLYGON_POINT = OperationSpec("polygon_point", (1, 2), ("x", "y"), (POINT,))
TEXT_INDEX = OperationSpec(
    "text_index", (2, 3), ("x", "y"), (POINT,), leading=(Slot("text", SlotKind.TEXT),)
)
FILTER_TAP = OperationSpec(
    "filter_set", (2, 3), ("x", "y"), (POINT,), trailing=(Slot("color", SlotKind.RGBA),)
)
