"""
Sample collector: turns the live cgroup tree into export records.

One collect() call walks the cgroup hierarchy, reads the cpu, memory and io
pressure files of every cgroup, and maps the parsed samples to export
records under the configured suppression policy. Nothing is cached between
calls; every scrape is a fresh read of the kernel's state.
"""

import errno
import logging
import os
import time
from concurrent.futures import Future, wait
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from ..executor import ManagedThreadPoolExecutor, ThreadPoolConfig
from ..models.config import (
    DEFAULT_CGROUP_ROOT,
    DEFAULT_PROC_PRESSURE_DIR,
    DEFAULT_READ_WORKERS,
    DEFAULT_SCRAPE_TIMEOUT,
    CollectOptions,
    ExporterConfig,
)
from ..models.pressure import CgroupEntity, Controller, Kind, PressureSample
from ..models.results import CollectionError, CollectionResult, ExportRecord, MetricKind
from ..validation import ErrorSeverity, handle_error
from .exceptions import PressureError, ScrapeTimeout, Unreadable
from .parser import read_pressure_file
from .walker import walk_cgroups

logger = logging.getLogger(__name__)

CgroupReadResult = Tuple[List[ExportRecord], List[CollectionError]]


def sample_to_records(
    sample: PressureSample, cgroup_id: str, options: CollectOptions
) -> List[ExportRecord]:
    """
    Map one parsed sample to its export records.

    Produces one record per present average window (unless averages are
    suppressed) followed by one for the total stall time. With
    ``suppress_zeros`` every record whose value is exactly zero is dropped,
    the total counter included.
    """
    if sample.kind is Kind.FULL and not sample.controller.supports_full:
        return []

    values = []
    if not options.suppress_averages:
        values.extend([
            (MetricKind.AVG10, sample.avg10),
            (MetricKind.AVG60, sample.avg60),
            (MetricKind.AVG300, sample.avg300),
        ])
    values.append((MetricKind.TOTAL, sample.total_seconds))

    return [
        ExportRecord(
            metric=metric,
            controller=sample.controller,
            kind=sample.kind,
            id=cgroup_id,
            value=value,
        )
        for metric, value in values
        if value is not None and not (options.suppress_zeros and value == 0)
    ]


class SampleCollector:
    """
    Collects pressure stall records for every cgroup on each call.

    Attributes:
        cgroup_root: Mount point of the cgroup2 filesystem.
        proc_pressure_dir: System-wide PSI directory, read for the root
            cgroup when the root does not expose its own pressure files.
        exclude_suffixes: Cgroup name suffixes pruned during the walk.
        scrape_timeout: Seconds one collect() may take before it is abandoned.
        read_workers: Number of threads reading pressure files concurrently.
    """

    CONTROLLERS: Tuple[Controller, ...] = (Controller.CPU, Controller.MEMORY, Controller.IO)

    def __init__(
        self,
        cgroup_root: Union[str, Path] = DEFAULT_CGROUP_ROOT,
        proc_pressure_dir: Union[str, Path] = DEFAULT_PROC_PRESSURE_DIR,
        exclude_suffixes: Sequence[str] = (),
        scrape_timeout: float = DEFAULT_SCRAPE_TIMEOUT,
        read_workers: int = DEFAULT_READ_WORKERS,
    ):
        self.cgroup_root = Path(cgroup_root)
        self.proc_pressure_dir = Path(proc_pressure_dir)
        self.exclude_suffixes = tuple(exclude_suffixes)
        self.scrape_timeout = scrape_timeout
        self.read_workers = read_workers

    @classmethod
    def from_config(cls, config: ExporterConfig) -> "SampleCollector":
        return cls(
            cgroup_root=config.cgroup_root,
            proc_pressure_dir=config.proc_pressure_dir,
            exclude_suffixes=config.exclude_suffixes,
            scrape_timeout=config.scrape_timeout,
            read_workers=config.read_workers,
        )

    def pressure_path(self, cgroup: CgroupEntity, controller: Controller) -> Path:
        return self.cgroup_root / cgroup.id.lstrip("/") / controller.pressure_file

    def read_samples(self, cgroup: CgroupEntity, controller: Controller) -> List[PressureSample]:
        """
        Read one (cgroup, controller) pair.

        The root cgroup falls back to ``/proc/pressure/<controller>`` on
        kernels where the cgroup2 root carries no pressure files.

        Raises:
            Unreadable, MalformedLineKind, MalformedValue: From the parser
        """
        try:
            return read_pressure_file(self.pressure_path(cgroup, controller), controller)
        except Unreadable as e:
            if not (cgroup.is_root and e.errno == errno.ENOENT):
                raise
        return read_pressure_file(self.proc_pressure_dir / controller.value, controller)

    def _read_cgroup(self, cgroup: CgroupEntity, options: CollectOptions) -> CgroupReadResult:
        records: List[ExportRecord] = []
        errors: List[CollectionError] = []
        for controller in self.CONTROLLERS:
            try:
                samples = self.read_samples(cgroup, controller)
            except PressureError as e:
                errors.append(CollectionError(cgroup.id, controller, e))
                continue
            for sample in samples:
                records.extend(sample_to_records(sample, cgroup.id, options))
        return records, errors

    def _submit_reads(
        self, pool: ManagedThreadPoolExecutor, options: CollectOptions, deadline: float
    ) -> List[Future]:
        """Walk the tree, queueing one read per cgroup as it is discovered."""
        return [
            pool.submit(self._read_cgroup, cgroup, options)
            for cgroup in walk_cgroups(
                self.cgroup_root, self.exclude_suffixes, deadline, self.scrape_timeout
            )
        ]

    def collect(self, options: CollectOptions) -> CollectionResult:
        """
        Run one full collection.

        Args:
            options: Suppression policy for this scrape

        Returns:
            CollectionResult with records in walk order and the per-pair
            errors that caused pairs to be skipped

        Raises:
            WalkRootMissing: If the cgroup root is missing
            ScrapeTimeout: If the walk or the reads outlive the deadline
        """
        started = time.monotonic()
        deadline = started + self.scrape_timeout

        # A listing stuck in the kernel must not hold the scrape past its deadline
        walk_pool = ManagedThreadPoolExecutor(
            ThreadPoolConfig(max_workers=1, thread_name_prefix="CgroupWalker")
        )
        pool = ManagedThreadPoolExecutor(ThreadPoolConfig(max_workers=self.read_workers))
        with walk_pool, pool:
            walk = walk_pool.submit(self._submit_reads, pool, options, deadline)
            if not wait([walk], timeout=max(0.0, deadline - time.monotonic())).done:
                logger.error(f"Cgroup walk still running after {self.scrape_timeout:g}s")
                raise ScrapeTimeout(self.scrape_timeout, stage="cgroup walk")
            pending = walk.result()

            _, not_done = wait(pending, timeout=max(0.0, deadline - time.monotonic()))
            if not_done:
                logger.error(
                    f"{len(not_done)} of {len(pending)} cgroup reads still pending "
                    f"after {self.scrape_timeout:g}s"
                )
                raise ScrapeTimeout(self.scrape_timeout, stage="pressure file reads")

        pool_stats = pool.get_stats()

        records: List[ExportRecord] = []
        errors: List[CollectionError] = []
        for future in pending:
            cgroup_records, cgroup_errors = future.result()
            records.extend(cgroup_records)
            errors.extend(cgroup_errors)

        for failure in errors:
            handle_error(
                error=failure.error,
                context=f"reading {failure.controller.value} pressure of cgroup {failure.cgroup_id}",
                severity=ErrorSeverity.DEBUG if isinstance(failure.error, Unreadable) else ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )

        duration = time.monotonic() - started
        logger.debug(
            f"Collected {len(records)} records from {len(pending)} cgroups "
            f"in {duration:.3f}s ({pool_stats['tasks_completed']} reader tasks), "
            f"{len(errors)} pairs skipped"
        )
        return CollectionResult(
            records=tuple(records),
            errors=tuple(errors),
            cgroup_count=len(pending),
            duration_seconds=duration,
        )
