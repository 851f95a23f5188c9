from __future__ import annotations

import gc
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from picture_batch.codec import ImageCodec
from picture_batch.config import RunConfig
from picture_batch.errors import ConfigurationError, DecodeUnavailableError, TransformFailure
from picture_batch.freshness import Decision, check, prepare_destination
from picture_batch.mappers import NameMapper
from picture_batch.paths import SourceRoot, map_output_path
from picture_batch.processor import FileProcessor, ProcessingUnit, UnitResult, UnitStatus

LOGGER = logging.getLogger(__name__)

FreshnessCheck = Callable[..., Decision]


@dataclass(slots=True)
class RunCounters:
    images_written: int = 0
    skipped_up_to_date: int = 0
    skipped_undecodable: int = 0
    failed: int = 0
    results: list[UnitResult] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, result: UnitResult) -> None:
        with self._lock:
            self.results.append(result)
            if result.status is UnitStatus.WRITTEN:
                self.images_written += 1
            elif result.status is UnitStatus.SKIPPED:
                self.skipped_undecodable += 1
            else:
                self.failed += 1

    def record_up_to_date(self) -> None:
        with self._lock:
            self.skipped_up_to_date += 1


def summary_message(written: int) -> str | None:
    if written <= 0:
        return None
    return f"Processed {written} {'image' if written == 1 else 'images'}."


def validate_run(
    *,
    source_dir: Path | None,
    filesets: Sequence[Path],
    destination_dir: Path | None,
    explicit_format: str | None,
    supported_formats: Iterable[str],
) -> Path:
    """
    Checks the run setup before any file is touched and returns the destination root.
    """
    if source_dir is None and not filesets:
        raise ConfigurationError("Specify at least one source--a source directory or a fileset.")
    if destination_dir is None:
        if source_dir is None:
            raise ConfigurationError("Specify the destination directory, or the source directory.")
        destination_dir = source_dir

    if explicit_format is not None:
        supported = {x.lower() for x in supported_formats}
        if explicit_format.strip().lower() not in supported:
            raise ConfigurationError(
                f"Unknown image format '{explicit_format}'\nUse any of {', '.join(sorted(supported))}"
            )

    return destination_dir


def plan_units(
    roots: Iterable[SourceRoot], mapper: NameMapper, destination_dir: Path
) -> list[ProcessingUnit]:
    units: list[ProcessingUnit] = []
    for root in roots:
        for name in root.names:
            source = (root.dir / name).absolute()
            destination_names = mapper.map(name)
            if destination_names is None:
                LOGGER.debug("%s skipped, don't know how to handle it", source)
                continue
            for destination_name in destination_names:
                units.append(
                    ProcessingUnit(
                        source=source,
                        destination=map_output_path(output_dir=destination_dir, name=destination_name),
                    )
                )
    return units


def group_by_destination(units: Iterable[ProcessingUnit]) -> list[list[ProcessingUnit]]:
    """
    Groups units sharing a destination, keeping discovery order inside and across groups.
    """
    groups: dict[Path, list[ProcessingUnit]] = {}
    for unit in units:
        groups.setdefault(unit.destination, []).append(unit)

    for destination, group in groups.items():
        if len(group) > 1:
            LOGGER.warning(
                "%d sources map to %s; they are processed in discovery order and the last write wins",
                len(group),
                destination,
            )
    return list(groups.values())


class BatchRunner:
    def __init__(
        self,
        *,
        mapper: NameMapper,
        processor: FileProcessor,
        config: RunConfig,
        codec: ImageCodec,
        freshness: FreshnessCheck = check,
    ) -> None:
        self._mapper = mapper
        self._processor = processor
        self._config = config
        self._codec = codec
        self._freshness = freshness

    def run(self, roots: Sequence[SourceRoot], destination_dir: Path) -> RunCounters:
        counters = RunCounters()
        units = plan_units(roots, self._mapper, destination_dir)
        groups = group_by_destination(units)

        with tqdm(total=len(units), desc="transform", unit="img", disable=not self._config.progress) as bar:
            if self._config.workers > 1 and len(groups) > 1:
                self._pin_output_format(units)
                self._run_parallel(groups, counters, bar)
            else:
                # One worker: plain discovery order.
                self._run_group(units, counters, bar, threading.Event())

        message = summary_message(counters.images_written)
        if message is not None:
            LOGGER.info(message)
        return counters

    def _pin_output_format(self, units: Sequence[ProcessingUnit]) -> None:
        """
        Fixes the default output format before workers start, so it does not
        depend on which unit happens to finish decoding first. Picks the same
        source a one-worker run would: the first one that is not up to date
        and decodes.
        """
        output_format = self._processor.output_format
        if output_format.value is not None:
            return
        for unit in units:
            try:
                decision = self._freshness(unit.source, unit.destination, overwrite=self._config.overwrite)
            except OSError:
                continue
            if decision is Decision.SKIP:
                continue
            try:
                detected = self._codec.probe_format(unit.source)
            except (DecodeUnavailableError, OSError) as e:
                LOGGER.debug("Cannot detect the format of %s: %s", unit.source, e)
                continue
            output_format.resolve(detected)
            LOGGER.debug("Default output format: %s", detected)
            return

    def _run_parallel(self, groups: list[list[ProcessingUnit]], counters: RunCounters, bar: tqdm) -> None:
        stop = threading.Event()
        with ThreadPoolExecutor(max_workers=self._config.workers, thread_name_prefix="picture-batch") as pool:
            futures = [pool.submit(self._run_group, group, counters, bar, stop) for group in groups]
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                stop.set()
                for future in futures:
                    future.cancel()
                raise

    def _run_group(
        self,
        group: list[ProcessingUnit],
        counters: RunCounters,
        bar: tqdm,
        stop: threading.Event,
    ) -> None:
        for unit in group:
            if stop.is_set():
                return
            try:
                self._run_unit(unit, counters)
            except BaseException:
                stop.set()
                raise
            finally:
                bar.update(1)

    def _run_unit(self, unit: ProcessingUnit, counters: RunCounters) -> None:
        try:
            decision = self._freshness(unit.source, unit.destination, overwrite=self._config.overwrite)
        except OSError as e:
            # Source vanished or became unreadable after discovery.
            if self._config.fail_on_error:
                raise TransformFailure(source=unit.source, destination=unit.destination, cause=e) from e
            LOGGER.error("Error processing file %s: %s", unit.source, e)
            counters.record(UnitResult(unit.source, unit.destination, UnitStatus.FAILED, str(e)))
            return

        if decision is Decision.SKIP:
            counters.record_up_to_date()
            return

        if unit.destination.exists():
            prepare_destination(unit.source, unit.destination)

        result = self._processor.process(unit.source, unit.destination)
        counters.record(result)

        if self._config.gc:
            gc.collect()
