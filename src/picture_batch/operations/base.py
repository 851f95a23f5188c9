from __future__ import annotations

from enum import Enum
from typing import Protocol

from PIL import Image


class OperationKind(Enum):
    TRANSFORM = "transform"
    CONFIG_ONLY = "config_only"


class Operation(Protocol):
    @property
    def kind(self) -> OperationKind:
        ...


class TransformOperation(Operation, Protocol):
    def apply(self, image: Image.Image) -> Image.Image:
        ...


class DrawPrimitive(Operation, Protocol):
    """A shape meant to be rendered by `Draw`, never applied to an image directly."""

    def render(self) -> Image.Image:
        ...
