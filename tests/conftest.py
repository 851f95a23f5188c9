from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

BASE_NS = 1_600_000_000 * 1_000_000_000


@pytest.fixture
def make_image() -> Callable[..., Path]:
    def _make(
        path: Path,
        *,
        color: tuple[int, ...] = (255, 0, 0),
        size: tuple[int, int] = (8, 6),
        fmt: str = "PNG",
        mode: str = "RGB",
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def set_mtime() -> Callable[[Path, int], None]:
    """Sets both access and modification time to BASE + `offset_s` seconds."""

    def _set(path: Path, offset_s: int) -> None:
        ns = BASE_NS + offset_s * 1_000_000_000
        os.utime(path, ns=(ns, ns))

    return _set
