from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from picture_batch.errors import DecodeUnavailableError, EncodeUnavailableError


@dataclass(frozen=True, slots=True)
class DecodedImage:
    image: Image.Image
    format: str


class ImageCodec(Protocol):
    def decode(self, path: Path) -> DecodedImage:
        ...

    def probe_format(self, path: Path) -> str:
        ...

    def encode(self, image: Image.Image, format_name: str, destination: Path) -> None:
        ...

    def supported_formats(self) -> set[str]:
        ...


class PillowCodec:
    """
    Decodes the first frame of anything Pillow can open and writes through any
    Pillow save plugin. Format names are case-insensitive and may be given as a
    Pillow format id ("jpeg") or a registered extension ("jpg").
    """

    def supported_formats(self) -> set[str]:
        Image.init()
        names = {fmt.lower() for fmt in Image.SAVE}
        names.update(
            ext.lstrip(".").lower() for ext, fmt in Image.registered_extensions().items() if fmt in Image.SAVE
        )
        return names

    def resolve_format(self, format_name: str) -> str | None:
        Image.init()
        wanted = format_name.strip().upper()
        if wanted in Image.SAVE:
            return wanted
        fmt = Image.registered_extensions().get(f".{wanted.lower()}")
        if fmt is not None and fmt in Image.SAVE:
            return fmt
        return None

    def probe_format(self, path: Path) -> str:
        try:
            with Image.open(path) as im:
                fmt = im.format
        except UnidentifiedImageError as e:
            raise DecodeUnavailableError(f"No decoder available for {path}") from e
        if fmt is None:
            raise DecodeUnavailableError(f"No decoder available for {path}")
        return fmt

    def decode(self, path: Path) -> DecodedImage:
        try:
            im = Image.open(path)
        except UnidentifiedImageError as e:
            raise DecodeUnavailableError(f"No decoder available for {path}") from e

        with im:
            fmt = im.format
            if fmt is None:
                raise DecodeUnavailableError(f"No decoder available for {path}")
            # Multi-frame content: only the first frame is used.
            if getattr(im, "n_frames", 1) > 1:
                im.seek(0)
            im.load()
            image = im.copy()
        return DecodedImage(image=image, format=fmt)

    def encode(self, image: Image.Image, format_name: str, destination: Path) -> None:
        fmt = self.resolve_format(format_name)
        if fmt is None:
            raise EncodeUnavailableError(f"No writer available for format {format_name!r}")

        # Write next to the destination and swap it in, so replacing the source
        # file in place never leaves a truncated image behind.
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                image.save(f, format=fmt)
            # mkstemp creates the file as 0600.
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, destination)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
