"""
psiexporter: Linux pressure stall information as Prometheus metrics.

Every scrape walks the live cgroup2 hierarchy, reads the cpu, memory and io
pressure files of each cgroup, and exposes them as:

- pressure_avg_10s_ratio, pressure_avg_60s_ratio, pressure_avg_300s_ratio
- pressure_total_seconds

labelled by controller, cgroup id and kind (some/full).

The package is organized into:
- models: Data structures and enumerations
- collectors: PSI file parser, cgroup walker and sample collector
- executor: Thread pool for concurrent file reads
- exporter: Prometheus metric families and the HTTP endpoint
- config: Configuration loading and validation
- validation: Input validation and error handling
- system: cgroup mount inspection
- cli: Command-line interface

Usage:
    From command line:
        psi-exporter [options]
        python -m psiexporter [options]

    Programmatically:
        from psiexporter import SampleCollector, CollectOptions
        result = SampleCollector().collect(CollectOptions(suppress_zeros=True))
"""

__version__ = "1.0.0"

from .collectors import SampleCollector
from .config import load_config
from .models import CollectOptions, ExporterConfig

__all__ = [
    "__version__",
    "CollectOptions",
    "ExporterConfig",
    "SampleCollector",
    "load_config",
]
