from __future__ import annotations

import logging
from collections.abc import Iterable

from PIL import Image

from picture_batch.operations.base import Operation, OperationKind

LOGGER = logging.getLogger(__name__)


class OperationChain:
    """
    Ordered operations applied to one image as a strict left fold.

    Only transform operations touch the image; configuration-only nodes found at
    the top level are reported and passed over. The chain holds no per-image
    state, so one instance can serve many images at once.
    """

    def __init__(self, operations: Iterable[Operation] = ()) -> None:
        self._operations: tuple[Operation, ...] = tuple(operations)

    @property
    def operations(self) -> tuple[Operation, ...]:
        return self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def apply(self, image: Image.Image) -> Image.Image:
        for op in self._operations:
            if op.kind is OperationKind.TRANSFORM:
                image = op.apply(image)  # type: ignore[attr-defined]
            else:
                LOGGER.warning("Not a transform operation: %r", op)
        return image
