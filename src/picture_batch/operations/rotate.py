from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from PIL import Image

from picture_batch.operations.base import OperationKind


@dataclass(frozen=True, slots=True)
class Rotate:
    """Rotates clockwise by `angle` degrees around the center, growing the canvas to fit."""

    kind: ClassVar[OperationKind] = OperationKind.TRANSFORM

    angle: float = 0.0

    def apply(self, image: Image.Image) -> Image.Image:
        if self.angle % 360 == 0:
            return image.copy()
        # Pillow rotates counter-clockwise.
        return image.rotate(
            -self.angle,
            resample=Image.Resampling.BICUBIC,
            expand=True,
        )
