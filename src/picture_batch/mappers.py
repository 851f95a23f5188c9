from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Protocol

from picture_batch.errors import ConfigurationError


class NameMapper(Protocol):
    def map(self, source_name: str) -> list[str] | None:
        ...


def _normalize_dirsep(name: str) -> str:
    return name.replace("\\", "/")


@dataclass(frozen=True, slots=True)
class IdentityMapper:
    def map(self, source_name: str) -> list[str] | None:
        return [source_name]


@dataclass(frozen=True, slots=True)
class FlattenMapper:
    def map(self, source_name: str) -> list[str] | None:
        return [posixpath.basename(_normalize_dirsep(source_name))]


@dataclass(frozen=True, slots=True)
class MergeMapper:
    to: str

    def map(self, source_name: str) -> list[str] | None:
        return [self.to]


@dataclass(frozen=True, slots=True)
class GlobMapper:
    """
    Rename with a single-wildcard pattern pair, e.g. `*.jpg` -> `thumbs/*.png`.

    The part of the name matched by `*` in `from_pattern` replaces `*` in `to_pattern`.
    A `to_pattern` without `*` is returned as is for every matching name.
    """

    from_pattern: str
    to_pattern: str
    case_sensitive: bool = True
    handle_dirsep: bool = False

    def __post_init__(self) -> None:
        if self.from_pattern.count("*") > 1 or self.to_pattern.count("*") > 1:
            raise ConfigurationError("glob mapper: patterns may contain at most one '*'")

    def _prepare(self, value: str) -> str:
        if self.handle_dirsep:
            value = _normalize_dirsep(value)
        if not self.case_sensitive:
            value = value.lower()
        return value

    def map(self, source_name: str) -> list[str] | None:
        name = self._prepare(source_name)
        pattern = self._prepare(self.from_pattern)

        if "*" not in pattern:
            if name != pattern:
                return None
            return [self.to_pattern]

        prefix, postfix = pattern.split("*", 1)
        if len(name) < len(prefix) + len(postfix):
            return None
        if not (name.startswith(prefix) and name.endswith(postfix)):
            return None

        # Take the wildcard part from the original name to keep its case.
        middle = source_name[len(prefix) : len(source_name) - len(postfix)]
        if "*" not in self.to_pattern:
            return [self.to_pattern]
        to_prefix, to_postfix = self.to_pattern.split("*", 1)
        return [f"{to_prefix}{middle}{to_postfix}"]


_GROUP_REF = re.compile(r"\\(\d)")


@dataclass(frozen=True, slots=True)
class RegexpMapper:
    r"""
    Rename with a regular expression. `\0` in `to_pattern` is the whole match,
    `\1`..`\9` the capture groups; names that do not match are not handled.
    """

    from_pattern: str
    to_pattern: str
    case_sensitive: bool = True
    handle_dirsep: bool = False
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            regex = re.compile(self.from_pattern, flags)
        except re.error as e:
            raise ConfigurationError(f"regexp mapper: invalid pattern {self.from_pattern!r}: {e}") from e
        object.__setattr__(self, "_regex", regex)

    def map(self, source_name: str) -> list[str] | None:
        name = _normalize_dirsep(source_name) if self.handle_dirsep else source_name
        match = self._regex.search(name)
        if match is None:
            return None

        def _group(ref: re.Match[str]) -> str:
            index = int(ref.group(1))
            if index > self._regex.groups:
                return ""
            return match.group(index) or ""

        return [_GROUP_REF.sub(_group, self.to_pattern)]


@dataclass(frozen=True, slots=True)
class CompositeMapper:
    """Union of the results of every nested mapper, in order and without duplicates."""

    mappers: tuple[NameMapper, ...]

    def map(self, source_name: str) -> list[str] | None:
        results: dict[str, None] = {}
        for mapper in self.mappers:
            mapped = mapper.map(source_name)
            if mapped:
                results.update(dict.fromkeys(mapped))
        return list(results) or None


@dataclass(frozen=True, slots=True)
class ChainedMapper:
    """Feeds the output of each nested mapper into the next one."""

    mappers: tuple[NameMapper, ...]

    def map(self, source_name: str) -> list[str] | None:
        names = [source_name]
        for mapper in self.mappers:
            next_names: dict[str, None] = {}
            for name in names:
                mapped = mapper.map(name)
                if mapped:
                    next_names.update(dict.fromkeys(mapped))
            if not next_names:
                return None
            names = list(next_names)
        return names


@dataclass(frozen=True, slots=True)
class MapperConfig:
    type: str = "identity"
    from_pattern: str | None = None
    to_pattern: str | None = None
    case_sensitive: bool = True
    handle_dirsep: bool = False
    mappers: tuple[MapperConfig, ...] = ()


MAPPER_TYPES: tuple[str, ...] = ("identity", "flatten", "glob", "regexp", "merge", "composite", "chained")


def _require(value: str | None, mapper_type: str, key: str) -> str:
    if value is None:
        raise ConfigurationError(f"{mapper_type} mapper: '{key}' is required")
    return value


def build_mapper(config: MapperConfig) -> NameMapper:
    mapper_type = config.type
    if mapper_type == "identity":
        return IdentityMapper()
    if mapper_type == "flatten":
        return FlattenMapper()
    if mapper_type == "merge":
        return MergeMapper(to=_require(config.to_pattern, mapper_type, "to"))
    if mapper_type == "glob":
        return GlobMapper(
            from_pattern=_require(config.from_pattern, mapper_type, "from"),
            to_pattern=_require(config.to_pattern, mapper_type, "to"),
            case_sensitive=config.case_sensitive,
            handle_dirsep=config.handle_dirsep,
        )
    if mapper_type == "regexp":
        return RegexpMapper(
            from_pattern=_require(config.from_pattern, mapper_type, "from"),
            to_pattern=_require(config.to_pattern, mapper_type, "to"),
            case_sensitive=config.case_sensitive,
            handle_dirsep=config.handle_dirsep,
        )
    if mapper_type in ("composite", "chained"):
        if not config.mappers:
            raise ConfigurationError(f"{mapper_type} mapper: at least one nested mapper is required")
        nested = tuple(build_mapper(x) for x in config.mappers)
        if mapper_type == "composite":
            return CompositeMapper(mappers=nested)
        return ChainedMapper(mappers=nested)
    raise ConfigurationError(
        f"unknown mapper type {mapper_type!r}; use any of {', '.join(MAPPER_TYPES)}"
    )
