from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class Decision(Enum):
    SKIP = "skip"
    PROCEED = "proceed"


def decide(
    *,
    source_mtime: int,
    destination_exists: bool,
    destination_mtime: int | None,
    overwrite: bool,
) -> Decision:
    if not destination_exists:
        return Decision.PROCEED
    if not overwrite and destination_mtime is not None and source_mtime <= destination_mtime:
        return Decision.SKIP
    return Decision.PROCEED


def check(source: Path, destination: Path, *, overwrite: bool) -> Decision:
    """
    Decides from live filesystem metadata whether `destination` has to be (re)built.
    """
    source_mtime = source.stat().st_mtime_ns
    try:
        destination_mtime: int | None = destination.stat().st_mtime_ns
    except FileNotFoundError:
        destination_mtime = None

    decision = decide(
        source_mtime=source_mtime,
        destination_exists=destination_mtime is not None,
        destination_mtime=destination_mtime,
        overwrite=overwrite,
    )
    if decision is Decision.SKIP:
        LOGGER.debug("%s omitted as %s is up to date.", source, destination)
    return decision


def same_file(source: Path, destination: Path) -> bool:
    return source.resolve() == destination.resolve()


def prepare_destination(source: Path, destination: Path) -> bool:
    """
    Removes a stale `destination` so it can be written from scratch.

    Never touches the file when `source` and `destination` are the same file.
    Returns True when the destination is absent afterwards (or is the source itself).
    """
    if same_file(source, destination):
        return True
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        LOGGER.debug("Could not delete %s: %s", destination, e)
        return False
    return True
