from __future__ import annotations

import logging
from pathlib import Path

from picture_batch.chain import OperationChain
from picture_batch.codec import ImageCodec, PillowCodec
from picture_batch.config import AppConfig, FileSetConfig, RunConfig
from picture_batch.errors import ConfigurationError
from picture_batch.mappers import IdentityMapper, NameMapper, build_mapper
from picture_batch.operations import Operation
from picture_batch.output import write_run_report
from picture_batch.paths import DEFAULT_INCLUDES, discover
from picture_batch.processor import FileProcessor
from picture_batch.project import find_project_root, resolve_from
from picture_batch.runner import BatchRunner, RunCounters, validate_run

LOGGER = logging.getLogger(__name__)


class BatchJob:
    """
    Collects the sources, destination, mapper and operations of one run, then
    validates and executes it.
    """

    def __init__(self, *, run: RunConfig | None = None, codec: ImageCodec | None = None) -> None:
        self._run = run or RunConfig()
        self._codec = codec or PillowCodec()
        self._source_dir: FileSetConfig | None = None
        self._filesets: list[FileSetConfig] = []
        self._destination_dir: Path | None = None
        self._operations: list[Operation] = []
        self._mapper: NameMapper | None = None

    def set_source_dir(
        self,
        directory: Path,
        *,
        recursive: bool = True,
        includes: tuple[str, ...] = DEFAULT_INCLUDES,
        excludes: tuple[str, ...] = (),
    ) -> None:
        self._source_dir = FileSetConfig(dir=directory, recursive=recursive, includes=includes, excludes=excludes)

    def add_fileset(
        self,
        directory: Path,
        *,
        recursive: bool = True,
        includes: tuple[str, ...] = DEFAULT_INCLUDES,
        excludes: tuple[str, ...] = (),
    ) -> None:
        self._filesets.append(
            FileSetConfig(dir=directory, recursive=recursive, includes=includes, excludes=excludes)
        )

    def set_destination_dir(self, directory: Path) -> None:
        self._destination_dir = directory

    def add_operation(self, operation: Operation) -> None:
        self._operations.append(operation)

    def set_mapper(self, mapper: NameMapper) -> None:
        if self._mapper is not None:
            raise ConfigurationError("Cannot define more than one mapper")
        self._mapper = mapper

    def validate(self) -> Path:
        return validate_run(
            source_dir=self._source_dir.dir if self._source_dir else None,
            filesets=[x.dir for x in self._filesets],
            destination_dir=self._destination_dir,
            explicit_format=self._run.format,
            supported_formats=self._codec.supported_formats(),
        )

    def run(self) -> RunCounters:
        destination_dir = self.validate()

        sources = [self._source_dir] if self._source_dir else []
        sources.extend(self._filesets)
        roots = [
            discover(input_dir=x.dir, recursive=x.recursive, includes=x.includes, excludes=x.excludes)
            for x in sources
        ]
        LOGGER.info(
            "Found %d source files under %d root(s)", sum(len(r.names) for r in roots), len(roots)
        )

        processor = FileProcessor(codec=self._codec, chain=OperationChain(self._operations), config=self._run)
        runner = BatchRunner(
            mapper=self._mapper or IdentityMapper(),
            processor=processor,
            config=self._run,
            codec=self._codec,
        )
        return runner.run(roots, destination_dir)


def build_job(*, config: AppConfig, config_path: Path, codec: ImageCodec | None = None) -> BatchJob:
    project_root = find_project_root(config_path)

    job = BatchJob(run=config.run, codec=codec)

    source_dir = resolve_from(project_root, config.input.dir)
    if source_dir is not None:
        job.set_source_dir(
            source_dir,
            recursive=config.input.recursive,
            includes=config.input.includes,
            excludes=config.input.excludes,
        )
    for fileset in config.input.filesets:
        job.add_fileset(
            resolve_from(project_root, fileset.dir) or fileset.dir,
            recursive=fileset.recursive,
            includes=fileset.includes,
            excludes=fileset.excludes,
        )

    destination_dir = resolve_from(project_root, config.output.dir)
    if destination_dir is not None:
        job.set_destination_dir(destination_dir)

    if config.mapper is not None:
        job.set_mapper(build_mapper(config.mapper))

    for operation in config.operations:
        job.add_operation(operation)

    return job


def run_pipeline(*, config: AppConfig, config_path: Path, codec: ImageCodec | None = None) -> RunCounters:
    job = build_job(config=config, config_path=config_path, codec=codec)
    counters = job.run()

    report_path = resolve_from(find_project_root(config_path), config.output.report)
    if report_path is not None:
        write_run_report(
            output_path=report_path,
            images_written=counters.images_written,
            skipped_up_to_date=counters.skipped_up_to_date,
            skipped_undecodable=counters.skipped_undecodable,
            failed=counters.failed,
            results=counters.results,
        )
        LOGGER.info("Wrote run report to %s", report_path)

    return counters
