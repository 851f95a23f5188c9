from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from PIL import Image, ImageColor, ImageDraw, ImageFont

from picture_batch.errors import ConfigurationError
from picture_batch.operations.base import DrawPrimitive, OperationKind

LOGGER = logging.getLogger(__name__)

TRANSPARENT = "transparent"
ARC_TYPES: tuple[str, ...] = ("open", "chord", "pie")


def _color(value: str) -> tuple[int, int, int, int] | None:
    if value.strip().lower() == TRANSPARENT:
        return None
    try:
        return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]
    except ValueError as e:
        raise ConfigurationError(f"draw: unknown color {value!r}") from e


def _layer(width: int, height: int) -> Image.Image:
    return Image.new("RGBA", (max(1, width), max(1, height)), (0, 0, 0, 0))


def _check_positive(name: str, value: int) -> None:
    if value <= 0:
        raise ConfigurationError(f"draw: {name} must be > 0, got {value}")


@dataclass(frozen=True, slots=True)
class Rectangle:
    kind: ClassVar[OperationKind] = OperationKind.CONFIG_ONLY

    width: int = 0
    height: int = 0
    arcwidth: int = 0
    archeight: int = 0
    stroke: str = "black"
    fill: str = TRANSPARENT
    strokewidth: int = 0

    def __post_init__(self) -> None:
        _check_positive("rectangle width", self.width)
        _check_positive("rectangle height", self.height)
        _color(self.stroke)
        _color(self.fill)

    def render(self) -> Image.Image:
        layer = _layer(self.width, self.height)
        draw = ImageDraw.Draw(layer)
        box = (0, 0, self.width - 1, self.height - 1)
        outline = _color(self.stroke) if self.strokewidth > 0 else None
        radius = min(self.arcwidth, self.archeight) // 2
        if radius > 0:
            draw.rounded_rectangle(
                box, radius=radius, fill=_color(self.fill), outline=outline, width=self.strokewidth
            )
        else:
            draw.rectangle(box, fill=_color(self.fill), outline=outline, width=self.strokewidth)
        return layer


@dataclass(frozen=True, slots=True)
class Ellipse:
    kind: ClassVar[OperationKind] = OperationKind.CONFIG_ONLY

    width: int = 0
    height: int = 0
    stroke: str = "black"
    fill: str = TRANSPARENT
    strokewidth: int = 0

    def __post_init__(self) -> None:
        _check_positive("ellipse width", self.width)
        _check_positive("ellipse height", self.height)
        _color(self.stroke)
        _color(self.fill)

    def render(self) -> Image.Image:
        layer = _layer(self.width, self.height)
        draw = ImageDraw.Draw(layer)
        outline = _color(self.stroke) if self.strokewidth > 0 else None
        draw.ellipse(
            (0, 0, self.width - 1, self.height - 1),
            fill=_color(self.fill),
            outline=outline,
            width=self.strokewidth,
        )
        return layer


@dataclass(frozen=True, slots=True)
class Arc:
    """
    Part of an ellipse between `start` and `start + stop` degrees, counter-clockwise
    from three o'clock. `type` closes the outline: open, chord or pie.
    """

    kind: ClassVar[OperationKind] = OperationKind.CONFIG_ONLY

    width: int = 0
    height: int = 0
    start: float = 0.0
    stop: float = 0.0
    type: str = "open"
    stroke: str = "black"
    fill: str = TRANSPARENT
    strokewidth: int = 0

    def __post_init__(self) -> None:
        _check_positive("arc width", self.width)
        _check_positive("arc height", self.height)
        if self.type not in ARC_TYPES:
            raise ConfigurationError(f"draw: arc type must be one of {', '.join(ARC_TYPES)}, got {self.type!r}")
        _color(self.stroke)
        _color(self.fill)

    def render(self) -> Image.Image:
        layer = _layer(self.width, self.height)
        draw = ImageDraw.Draw(layer)
        box = (0, 0, self.width - 1, self.height - 1)
        # Pillow measures angles clockwise.
        begin, end = -(self.start + self.stop), -self.start
        outline = _color(self.stroke) if self.strokewidth > 0 else None
        width = max(self.strokewidth, 1)

        if self.type == "pie":
            draw.pieslice(box, begin, end, fill=_color(self.fill), outline=outline, width=width)
        elif self.type == "chord":
            draw.chord(box, begin, end, fill=_color(self.fill), outline=outline, width=width)
        else:
            color = _color(self.stroke)
            if color is not None:
                draw.arc(box, begin, end, fill=color, width=width)
        return layer


@dataclass(frozen=True, slots=True)
class Text:
    kind: ClassVar[OperationKind] = OperationKind.CONFIG_ONLY

    string: str = ""
    font: str = ""
    point: int = 10
    color: str = "black"
    bold: bool = False
    italic: bool = False

    def __post_init__(self) -> None:
        _check_positive("text point", self.point)
        _color(self.color)

    def _load_font(self) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
        if self.font:
            try:
                return ImageFont.truetype(self.font, self.point)
            except OSError:
                LOGGER.warning("Font %r not found, using the default font", self.font)
        return ImageFont.load_default(size=self.point)

    def render(self) -> Image.Image:
        font = self._load_font()
        left, top, right, bottom = font.getbbox(self.string)
        layer = _layer(int(right - left) + 2, int(bottom - top) + 2)
        draw = ImageDraw.Draw(layer)
        # Synthetic bold: a one-pixel stroke in the text color.
        stroke_width = 1 if self.bold else 0
        draw.text((-left, -top), self.string, fill=_color(self.color), font=font, stroke_width=stroke_width)
        if self.italic:
            shear = 0.2
            layer = layer.transform(
                (layer.width + int(layer.height * shear), layer.height),
                Image.Transform.AFFINE,
                (1, shear, -layer.height * shear, 0, 1, 0),
                resample=Image.Resampling.BICUBIC,
            )
        return layer


@dataclass(frozen=True, slots=True)
class Draw:
    """Renders each nested primitive and composites it onto the image at (xloc, yloc)."""

    kind: ClassVar[OperationKind] = OperationKind.TRANSFORM

    xloc: int = 0
    yloc: int = 0
    primitives: tuple[DrawPrimitive, ...] = ()

    def apply(self, image: Image.Image) -> Image.Image:
        canvas = image.convert("RGBA")
        for primitive in self.primitives:
            if primitive.kind is not OperationKind.CONFIG_ONLY:
                LOGGER.warning("Not a drawing primitive, ignored inside draw: %r", primitive)
                continue
            layer = primitive.render()
            overlay = _layer(canvas.width, canvas.height)
            overlay.paste(layer, (self.xloc, self.yloc))
            canvas = Image.alpha_composite(canvas, overlay)

        if image.mode == "RGBA":
            return canvas
        if image.mode in ("RGB", "L", "LA"):
            return canvas.convert(image.mode)
        return canvas.convert("RGB")
