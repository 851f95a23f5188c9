from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path

DEFAULT_INCLUDES: tuple[str, ...] = ("*",)


@dataclass(frozen=True, slots=True)
class SourceRoot:
    dir: Path
    names: tuple[str, ...]


def _matches_any(name: str, patterns: tuple[str, ...]) -> bool:
    # fnmatch's "*" also crosses "/", so "*.png" selects nested files too.
    return any(fnmatch.fnmatchcase(name, p) or fnmatch.fnmatchcase(name, p.removeprefix("**/")) for p in patterns)


def iter_source_names(
    *,
    input_dir: Path,
    recursive: bool,
    includes: tuple[str, ...] = DEFAULT_INCLUDES,
    excludes: tuple[str, ...] = (),
) -> list[str]:
    """
    Lists files under `input_dir` as sorted POSIX-style relative names,
    keeping those matching an include pattern and no exclude pattern.
    """
    if recursive:
        candidates = input_dir.rglob("*")
    else:
        candidates = input_dir.glob("*")

    names: list[str] = []
    for p in candidates:
        if not p.is_file():
            continue
        rel = p.relative_to(input_dir).as_posix()
        if not _matches_any(rel, includes):
            continue
        if excludes and _matches_any(rel, excludes):
            continue
        names.append(rel)

    names.sort()
    return names


def discover(
    *,
    input_dir: Path,
    recursive: bool = True,
    includes: tuple[str, ...] = DEFAULT_INCLUDES,
    excludes: tuple[str, ...] = (),
) -> SourceRoot:
    if not input_dir.is_dir():
        raise FileNotFoundError(f"source directory not found: {input_dir}")
    names = iter_source_names(input_dir=input_dir, recursive=recursive, includes=includes, excludes=excludes)
    return SourceRoot(dir=input_dir, names=tuple(names))


def map_output_path(*, output_dir: Path, name: str) -> Path:
    return (output_dir / name).absolute()
