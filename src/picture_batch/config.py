from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from picture_batch.errors import ConfigurationError
from picture_batch.mappers import MapperConfig
from picture_batch.operations import Operation, build_operations
from picture_batch.paths import DEFAULT_INCLUDES
from picture_batch.tables import (
    as_dict_table,
    as_table_list,
    get_bool,
    get_int,
    get_optional_str,
    get_path,
    get_str,
    get_str_list,
)


@dataclass(frozen=True, slots=True)
class FileSetConfig:
    dir: Path
    recursive: bool = True
    includes: tuple[str, ...] = DEFAULT_INCLUDES
    excludes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class InputConfig:
    dir: Path | None = None
    recursive: bool = True
    includes: tuple[str, ...] = DEFAULT_INCLUDES
    excludes: tuple[str, ...] = ()
    filesets: tuple[FileSetConfig, ...] = ()


@dataclass(frozen=True, slots=True)
class OutputConfig:
    dir: Path | None = None
    report: Path | None = None


@dataclass(frozen=True, slots=True)
class RunConfig:
    overwrite: bool = False
    fail_on_error: bool = True
    format: str | None = None
    gc: bool = False
    workers: int = 1
    progress: bool = False


@dataclass(frozen=True, slots=True)
class AppConfig:
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    run: RunConfig = field(default_factory=RunConfig)
    mapper: MapperConfig | None = None
    operations: tuple[Operation, ...] = ()


def _parse_fileset(table: dict[str, Any]) -> FileSetConfig:
    directory = get_path(table, "dir", "input.filesets.dir")
    if directory is None:
        raise ConfigurationError("config: input.filesets.dir is required")
    return FileSetConfig(
        dir=directory,
        recursive=get_bool(table, "recursive", True),
        includes=get_str_list(table, "includes", DEFAULT_INCLUDES),
        excludes=get_str_list(table, "excludes", ()),
    )


def _parse_mapper(table: dict[str, Any]) -> MapperConfig:
    return MapperConfig(
        type=get_str(table, "type", "identity").strip().lower(),
        from_pattern=get_optional_str(table, "from"),
        to_pattern=get_optional_str(table, "to"),
        case_sensitive=get_bool(table, "case_sensitive", True),
        handle_dirsep=get_bool(table, "handle_dirsep", False),
        mappers=tuple(_parse_mapper(x) for x in as_table_list(table.get("mappers"), "mapper.mappers")),
    )


def _validate(config: AppConfig) -> None:
    if config.run.workers <= 0:
        raise ConfigurationError("config: run.workers must be > 0")
    if config.input.dir is None and not config.input.filesets:
        raise ConfigurationError("config: specify at least one source, input.dir or [[input.filesets]]")


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise FileNotFoundError(f"config not found: {path}")

    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"config: {path} is not valid TOML: {e}") from e

    input_table = as_dict_table(data.get("input"), "input")
    output_table = as_dict_table(data.get("output"), "output")
    run_table = as_dict_table(data.get("run"), "run")

    mapper_tables = as_table_list(data.get("mapper"), "mapper")
    if len(mapper_tables) > 1:
        raise ConfigurationError("Cannot define more than one mapper")

    config = AppConfig(
        input=InputConfig(
            dir=get_path(input_table, "dir", "input.dir"),
            recursive=get_bool(input_table, "recursive", True),
            includes=get_str_list(input_table, "includes", DEFAULT_INCLUDES),
            excludes=get_str_list(input_table, "excludes", ()),
            filesets=tuple(
                _parse_fileset(x) for x in as_table_list(input_table.get("filesets"), "input.filesets")
            ),
        ),
        output=OutputConfig(
            dir=get_path(output_table, "dir", "output.dir"),
            report=get_path(output_table, "report", "output.report"),
        ),
        run=RunConfig(
            overwrite=get_bool(run_table, "overwrite", False),
            fail_on_error=get_bool(run_table, "fail_on_error", True),
            format=get_optional_str(run_table, "format"),
            gc=get_bool(run_table, "gc", False),
            workers=get_int(run_table, "workers", 1),
            progress=get_bool(run_table, "progress", False),
        ),
        mapper=_parse_mapper(mapper_tables[0]) if mapper_tables else None,
        operations=build_operations(as_table_list(data.get("operations"), "operations")),
    )

    _validate(config)
    return config
