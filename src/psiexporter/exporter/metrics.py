"""
Prometheus metric families for pressure stall information.

PressureMetricsCollector implements the prometheus_client custom collector
protocol. Each registry collect() triggers exactly one sample collection,
and all four families are built from that single result.
"""

import logging
from typing import Dict, Iterable, List

from prometheus_client.core import GaugeMetricFamily, Metric, UntypedMetricFamily

from ..collectors.sample_collector import SampleCollector
from ..models.config import CollectOptions
from ..models.results import CollectionResult, MetricKind

logger = logging.getLogger(__name__)

LABEL_NAMES = ["controller", "id", "kind"]

METRIC_HELP: Dict[MetricKind, str] = {
    MetricKind.AVG10: "Ratio of time spent under pressure in the last 10s at time of measurement",
    MetricKind.AVG60: "Ratio of time spent under pressure in the last 60s at time of measurement",
    MetricKind.AVG300: "Ratio of time spent under pressure in the last 300s at time of measurement",
    MetricKind.TOTAL: "Total time spent under pressure",
}


def build_metric_families(result: CollectionResult, options: CollectOptions) -> List[Metric]:
    """
    Render one collection result as metric families.

    The average gauges are left out entirely when averages are suppressed.

    ``pressure_total_seconds`` is a monotonic counter, but it is emitted as an
    untyped family: prometheus_client renders counter families with a
    ``_total`` suffix on every sample, which would rename the series to
    ``pressure_total_seconds_total``. The untyped family keeps the exact
    series name; only the TYPE line differs from a counter.
    """
    families: Dict[MetricKind, Metric] = {}
    if not options.suppress_averages:
        for metric in filter(lambda m: m.is_average, MetricKind):
            families[metric] = GaugeMetricFamily(
                metric.value, METRIC_HELP[metric], labels=LABEL_NAMES
            )
    families[MetricKind.TOTAL] = UntypedMetricFamily(
        MetricKind.TOTAL.value, METRIC_HELP[MetricKind.TOTAL], labels=LABEL_NAMES
    )

    for record in result.records:
        family = families.get(record.metric)
        if family is None:
            continue
        family.add_metric(list(record.labels), record.value)

    return list(families.values())


class PressureMetricsCollector:
    """
    Custom prometheus_client collector backed by a SampleCollector.

    Register it with a CollectorRegistry; generate_latest() then performs a
    fresh collection on every scrape. Scrape errors (timeout, missing cgroup
    root) propagate out of collect() to the HTTP layer.
    """

    def __init__(self, sample_collector: SampleCollector, options: CollectOptions):
        self.sample_collector = sample_collector
        self.options = options

    def describe(self) -> Iterable[Metric]:
        return build_metric_families(
            CollectionResult(records=(), errors=(), cgroup_count=0), self.options
        )

    def collect(self) -> Iterable[Metric]:
        result = self.sample_collector.collect(self.options)
        if result.errors:
            logger.info(
                f"Scrape skipped {len(result.errors)} unreadable or malformed "
                f"pressure files across {result.cgroup_count} cgroups"
            )
        return build_metric_families(result, self.options)
