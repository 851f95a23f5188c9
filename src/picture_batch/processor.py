from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from picture_batch.chain import OperationChain
from picture_batch.codec import ImageCodec
from picture_batch.config import RunConfig
from picture_batch.errors import (
    DecodeUnavailableError,
    DestinationSetupError,
    EncodeUnavailableError,
    TransformFailure,
)
from picture_batch.freshness import prepare_destination

LOGGER = logging.getLogger(__name__)


class UnitStatus(Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ProcessingUnit:
    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class UnitResult:
    source: Path
    destination: Path
    status: UnitStatus
    reason: str = ""


class OutputFormat:
    """
    Output format shared by every unit of a run.

    An explicit format always wins. Otherwise the first detected format becomes
    the default for all later files of the run, even if those decode as
    something else.
    """

    def __init__(self, explicit: str | None = None) -> None:
        self._value = explicit
        self._lock = threading.Lock()

    @property
    def value(self) -> str | None:
        return self._value

    def resolve(self, detected: str) -> str:
        with self._lock:
            if self._value is None:
                self._value = detected
            return self._value


def _ensure_parent(destination: Path) -> None:
    parent = destination.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DestinationSetupError(f"Failed to create parent directory {parent}") from e
    if not parent.is_dir():
        raise DestinationSetupError(f"Failed to create parent directory {parent}")


class FileProcessor:
    def __init__(
        self,
        *,
        codec: ImageCodec,
        chain: OperationChain,
        config: RunConfig,
        output_format: OutputFormat | None = None,
    ) -> None:
        self._codec = codec
        self._chain = chain
        self._config = config
        self.output_format = output_format or OutputFormat(config.format)

    def process(self, source: Path, destination: Path) -> UnitResult:
        LOGGER.info("Processing file: %s", source)
        try:
            try:
                decoded = self._codec.decode(source)
            except DecodeUnavailableError:
                LOGGER.info("No decoder available for %s, skipping", source)
                return UnitResult(source, destination, UnitStatus.SKIPPED, "no decoder")

            fmt = self.output_format.resolve(decoded.format)
            image = self._chain.apply(decoded.image)

            _ensure_parent(destination)

            if self._config.overwrite and destination.exists():
                prepare_destination(source, destination)

            try:
                self._codec.encode(image, fmt, destination)
            except EncodeUnavailableError as e:
                LOGGER.error("Failed to save the transformed file %s: %s", destination, e)
                return UnitResult(source, destination, UnitStatus.FAILED, str(e))
        except Exception as e:
            prepare_destination(source, destination)
            if self._config.fail_on_error:
                raise TransformFailure(source=source, destination=destination, cause=e) from e
            LOGGER.error("Error processing file %s: %s", source, e)
            return UnitResult(source, destination, UnitStatus.FAILED, str(e))

        return UnitResult(source, destination, UnitStatus.WRITTEN)
