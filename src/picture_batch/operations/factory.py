from __future__ import annotations

from typing import Any

from picture_batch.errors import ConfigurationError
from picture_batch.operations.base import Operation
from picture_batch.operations.draw import Arc, Draw, Ellipse, Rectangle, Text
from picture_batch.operations.rotate import Rotate
from picture_batch.operations.scale import Scale
from picture_batch.tables import as_table_list, get_bool, get_float, get_int, get_size, get_str

OPERATION_TYPES: tuple[str, ...] = ("rotate", "scale", "draw", "rectangle", "ellipse", "arc", "text")


def _shape_style(table: dict[str, Any]) -> dict[str, Any]:
    return {
        "stroke": get_str(table, "stroke", "black"),
        "fill": get_str(table, "fill", "transparent"),
        "strokewidth": get_int(table, "strokewidth", 0),
    }


def build_operation(table: dict[str, Any]) -> Operation:
    op_type = table.get("type")
    if not isinstance(op_type, str):
        raise ConfigurationError("config: every operation needs a string 'type'")
    op_type = op_type.strip().lower()

    if op_type == "rotate":
        return Rotate(angle=get_float(table, "angle", 0.0))
    if op_type == "scale":
        return Scale(
            width=get_size(table, "width", "100%"),
            height=get_size(table, "height", "100%"),
            proportions=get_str(table, "proportions", "ignore"),
        )
    if op_type == "draw":
        return Draw(
            xloc=get_int(table, "xloc", 0),
            yloc=get_int(table, "yloc", 0),
            primitives=tuple(
                build_operation(x) for x in as_table_list(table.get("primitives"), "operations.primitives")
            ),  # type: ignore[arg-type]
        )
    if op_type == "rectangle":
        return Rectangle(
            width=get_int(table, "width", 0),
            height=get_int(table, "height", 0),
            arcwidth=get_int(table, "arcwidth", 0),
            archeight=get_int(table, "archeight", 0),
            **_shape_style(table),
        )
    if op_type == "ellipse":
        return Ellipse(
            width=get_int(table, "width", 0),
            height=get_int(table, "height", 0),
            **_shape_style(table),
        )
    if op_type == "arc":
        return Arc(
            width=get_int(table, "width", 0),
            height=get_int(table, "height", 0),
            start=get_float(table, "start", 0.0),
            stop=get_float(table, "stop", 0.0),
            type=get_str(table, "arc_type", "open"),
            **_shape_style(table),
        )
    if op_type == "text":
        return Text(
            string=get_str(table, "string", ""),
            font=get_str(table, "font", ""),
            point=get_int(table, "point", 10),
            color=get_str(table, "color", "black"),
            bold=get_bool(table, "bold", False),
            italic=get_bool(table, "italic", False),
        )
    raise ConfigurationError(
        f"unknown operation type {op_type!r}; use any of {', '.join(OPERATION_TYPES)}"
    )


def build_operations(tables: list[dict[str, Any]]) -> tuple[Operation, ...]:
    return tuple(build_operation(x) for x in tables)
