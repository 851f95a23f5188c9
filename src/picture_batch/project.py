from __future__ import annotations

from pathlib import Path

PROJECT_MARKERS: tuple[str, ...] = ("pyproject.toml", "picture_batch.toml")


def find_project_root(start: Path) -> Path:
    """
    Walk upwards from `start` (usually the config file) to the first directory holding
    `pyproject.toml` or `picture_batch.toml`. Falls back to the directory of `start`.
    """
    cursor = start.resolve()
    if cursor.is_file():
        cursor = cursor.parent

    for parent in (cursor, *cursor.parents):
        if any((parent / marker).exists() for marker in PROJECT_MARKERS):
            return parent

    return cursor


def resolve_from(base_dir: Path, maybe_relative: Path | None) -> Path | None:
    if maybe_relative is None:
        return None
    if maybe_relative.is_absolute():
        return maybe_relative
    return (base_dir / maybe_relative).resolve()
