"""
Collection result data models.

This module defines the structures handed from the sample collector to the
metric exporter once per scrape. Everything here is built during a single
collect call and never mutated afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .pressure import Controller, Kind


class MetricKind(Enum):
    """The exported metric a record feeds, mapped to its family name."""

    AVG10 = "pressure_avg_10s_ratio"
    AVG60 = "pressure_avg_60s_ratio"
    AVG300 = "pressure_avg_300s_ratio"
    TOTAL = "pressure_total_seconds"

    @property
    def is_average(self) -> bool:
        return self is not MetricKind.TOTAL


@dataclass(frozen=True)
class ExportRecord:
    """
    A single exported value with its label set.

    Attributes:
        metric: Which metric family the value belongs to.
        controller: ``controller`` label.
        kind: ``kind`` label.
        id: ``id`` label, the cgroup path.
        value: Ratio in [0, 1] for averages, seconds for the total counter.
    """

    metric: MetricKind
    controller: Controller
    kind: Kind
    id: str
    value: float

    @property
    def labels(self) -> Tuple[str, str, str]:
        """Label values in exposition order: controller, id, kind."""
        return (self.controller.value, self.id, self.kind.value)


@dataclass(frozen=True)
class CollectionError:
    """A non-fatal failure to read one (cgroup, controller) pair."""

    cgroup_id: str
    controller: Controller
    error: Exception

    @property
    def reason(self) -> str:
        return type(self.error).__name__


@dataclass(frozen=True)
class CollectionResult:
    """
    Everything gathered by one collect call.

    Attributes:
        records: Export records in walk order.
        errors: Per-pair errors that caused a pair to be skipped.
        cgroup_count: Number of cgroups the walk produced.
        duration_seconds: Wall time spent collecting, if measured.
    """

    records: Tuple[ExportRecord, ...]
    errors: Tuple[CollectionError, ...]
    cgroup_count: int
    duration_seconds: Optional[float] = None
