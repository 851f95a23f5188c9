from picture_batch.operations.base import DrawPrimitive, Operation, OperationKind, TransformOperation
from picture_batch.operations.draw import Arc, Draw, Ellipse, Rectangle, Text
from picture_batch.operations.factory import build_operation, build_operations
from picture_batch.operations.rotate import Rotate
from picture_batch.operations.scale import Scale

__all__ = [
    "Arc",
    "Draw",
    "DrawPrimitive",
    "Ellipse",
    "Operation",
    "OperationKind",
    "Rectangle",
    "Rotate",
    "Scale",
    "Text",
    "TransformOperation",
    "build_operation",
    "build_operations",
]
