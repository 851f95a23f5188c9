from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

import pytest
from PIL import Image, ImageOps

from picture_batch.chain import OperationChain
from picture_batch.operations import OperationKind, Rectangle


@dataclass(frozen=True, slots=True)
class PaintCorner:
    kind: ClassVar[OperationKind] = OperationKind.TRANSFORM

    color: tuple[int, int, int] = (255, 0, 0)

    def apply(self, image: Image.Image) -> Image.Image:
        out = image.copy()
        out.putpixel((0, 0), self.color)
        return out


@dataclass(frozen=True, slots=True)
class Mirror:
    kind: ClassVar[OperationKind] = OperationKind.TRANSFORM

    def apply(self, image: Image.Image) -> Image.Image:
        return ImageOps.mirror(image)


def _white(size: tuple[int, int] = (4, 3)) -> Image.Image:
    return Image.new("RGB", size, (255, 255, 255))


def test_empty_chain_returns_image_unchanged() -> None:
    image = _white()
    assert OperationChain().apply(image).tobytes() == image.tobytes()


def test_chain_is_order_sensitive() -> None:
    paint_then_mirror = OperationChain([PaintCorner(), Mirror()]).apply(_white())
    mirror_then_paint = OperationChain([Mirror(), PaintCorner()]).apply(_white())

    assert paint_then_mirror.tobytes() != mirror_then_paint.tobytes()
    assert paint_then_mirror.getpixel((3, 0)) == (255, 0, 0)
    assert mirror_then_paint.getpixel((0, 0)) == (255, 0, 0)


def test_chain_does_not_mutate_input() -> None:
    image = _white()
    OperationChain([PaintCorner()]).apply(image)
    assert image.getpixel((0, 0)) == (255, 255, 255)


def test_config_only_node_is_skipped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    chain = OperationChain([Rectangle(width=2, height=2, fill="blue"), PaintCorner(color=(0, 255, 0))])

    with caplog.at_level(logging.WARNING, logger="picture_batch"):
        out = chain.apply(_white())

    assert out.getpixel((0, 0)) == (0, 255, 0)
    assert out.getpixel((1, 1)) == (255, 255, 255)
    assert any("Not a transform operation" in m for m in caplog.messages)
    assert len(chain) == 2
