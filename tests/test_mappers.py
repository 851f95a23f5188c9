from __future__ import annotations

import pytest

from picture_batch.errors import ConfigurationError
from picture_batch.mappers import (
    ChainedMapper,
    CompositeMapper,
    FlattenMapper,
    GlobMapper,
    IdentityMapper,
    MapperConfig,
    MergeMapper,
    RegexpMapper,
    build_mapper,
)


def test_identity() -> None:
    assert IdentityMapper().map("sub/a.png") == ["sub/a.png"]


def test_flatten() -> None:
    assert FlattenMapper().map("sub/deeper/a.png") == ["a.png"]


def test_merge() -> None:
    assert MergeMapper(to="all.png").map("whatever.jpg") == ["all.png"]


def test_glob_renames_extension() -> None:
    mapper = GlobMapper(from_pattern="*.jpg", to_pattern="thumbs/*.png")
    assert mapper.map("sub/a.jpg") == ["thumbs/sub/a.png"]
    assert mapper.map("a.gif") is None


def test_glob_without_wildcard_in_to() -> None:
    mapper = GlobMapper(from_pattern="*.jpg", to_pattern="cover.png")
    assert mapper.map("x.jpg") == ["cover.png"]


def test_glob_case_insensitive_keeps_original_case() -> None:
    mapper = GlobMapper(from_pattern="*.jpg", to_pattern="*.png", case_sensitive=False)
    assert mapper.map("Photo.JPG") == ["Photo.png"]


def test_glob_rejects_two_wildcards() -> None:
    with pytest.raises(ConfigurationError):
        GlobMapper(from_pattern="*.*", to_pattern="*")


def test_regexp_groups() -> None:
    mapper = RegexpMapper(from_pattern=r"^(.*)\.(jpe?g)$", to_pattern=r"\1-from-\2.png")
    assert mapper.map("dir/a.jpeg") == ["dir/a-from-jpeg.png"]
    assert mapper.map("a.png") is None


def test_regexp_whole_match() -> None:
    mapper = RegexpMapper(from_pattern=r"[a-z]+\.png", to_pattern=r"copy-\0")
    assert mapper.map("a.png") == ["copy-a.png"]


def test_regexp_invalid_pattern() -> None:
    with pytest.raises(ConfigurationError):
        RegexpMapper(from_pattern="(", to_pattern="x")


def test_composite_fans_out_without_duplicates() -> None:
    mapper = CompositeMapper(
        mappers=(
            IdentityMapper(),
            GlobMapper(from_pattern="*.png", to_pattern="small/*.png"),
            IdentityMapper(),
        )
    )
    assert mapper.map("a.png") == ["a.png", "small/a.png"]


def test_composite_unhandled() -> None:
    mapper = CompositeMapper(mappers=(GlobMapper(from_pattern="*.png", to_pattern="*.gif"),))
    assert mapper.map("a.jpg") is None


def test_chained() -> None:
    mapper = ChainedMapper(
        mappers=(FlattenMapper(), GlobMapper(from_pattern="*.jpg", to_pattern="*.png"))
    )
    assert mapper.map("x/y/a.jpg") == ["a.png"]
    assert mapper.map("x/y/a.gif") is None


def test_build_mapper_nested() -> None:
    mapper = build_mapper(
        MapperConfig(
            type="composite",
            mappers=(
                MapperConfig(type="identity"),
                MapperConfig(type="glob", from_pattern="*.png", to_pattern="*.gif"),
            ),
        )
    )
    assert mapper.map("a.png") == ["a.png", "a.gif"]


def test_build_mapper_errors() -> None:
    with pytest.raises(ConfigurationError):
        build_mapper(MapperConfig(type="package"))
    with pytest.raises(ConfigurationError):
        build_mapper(MapperConfig(type="glob", from_pattern="*.png"))
    with pytest.raises(ConfigurationError):
        build_mapper(MapperConfig(type="chained"))
