from __future__ import annotations

from pathlib import Path


class PictureBatchError(Exception):
    """Base class for every error raised by picture_batch."""


class ConfigurationError(PictureBatchError, ValueError):
    """Invalid run setup, raised before any file is touched."""


class DecodeUnavailableError(PictureBatchError):
    """No decoder recognizes the source content."""


class EncodeUnavailableError(PictureBatchError):
    """No writer is available for the requested output format."""


class DestinationSetupError(PictureBatchError):
    """The destination's parent directory could not be created."""


class TransformFailure(PictureBatchError):
    def __init__(self, *, source: Path, destination: Path, cause: BaseException) -> None:
        super().__init__(f"Error processing {source} -> {destination}: {cause}")
        self.source = source
        self.destination = destination
        self.cause = cause
