from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from PIL import Image

from picture_batch.errors import ConfigurationError
from picture_batch.operations.base import OperationKind

PROPORTIONS: tuple[str, ...] = ("ignore", "width", "height", "cover", "fit")


def _parse_size(value: str, name: str) -> tuple[float, bool]:
    """
    Returns (amount, is_percent) for "120" or "50%".
    """
    text = value.strip()
    is_percent = text.endswith("%")
    if is_percent:
        text = text[:-1].strip()
    try:
        amount = float(text)
    except ValueError as e:
        raise ConfigurationError(f"scale: {name} must be a number or a percentage, got {value!r}") from e
    if amount <= 0:
        raise ConfigurationError(f"scale: {name} must be > 0, got {value!r}")
    return amount, is_percent


@dataclass(frozen=True, slots=True)
class Scale:
    kind: ClassVar[OperationKind] = OperationKind.TRANSFORM

    width: str = "100%"
    height: str = "100%"
    proportions: str = "ignore"

    def __post_init__(self) -> None:
        _parse_size(self.width, "width")
        _parse_size(self.height, "height")
        if self.proportions not in PROPORTIONS:
            raise ConfigurationError(
                f"scale: proportions must be one of {', '.join(PROPORTIONS)}, got {self.proportions!r}"
            )

    def factors(self, size: tuple[int, int]) -> tuple[float, float]:
        w, h = size
        width, width_pct = _parse_size(self.width, "width")
        height, height_pct = _parse_size(self.height, "height")
        x = width / 100.0 if width_pct else width / w
        y = height / 100.0 if height_pct else height / h

        if self.proportions == "width":
            y = x
        elif self.proportions == "height":
            x = y
        elif self.proportions == "cover":
            x = y = max(x, y)
        elif self.proportions == "fit":
            x = y = min(x, y)
        return x, y

    def apply(self, image: Image.Image) -> Image.Image:
        x, y = self.factors(image.size)
        new_size = (max(1, round(image.width * x)), max(1, round(image.height * y)))
        if new_size == image.size:
            return image.copy()
        return image.resize(new_size, resample=Image.Resampling.BICUBIC)
