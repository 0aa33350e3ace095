"""
Pressure stall information collection.

This package reads the kernel's PSI pseudo-files for every cgroup:

- parser: the fixed line grammar of a pressure file
- walker: lazy, mutation-tolerant enumeration of the cgroup tree
- sample_collector: one full collection per scrape, with suppression policies
- exceptions: per-pair and per-scrape error taxonomy
"""

from .exceptions import (
    MalformedLineKind,
    MalformedValue,
    PressureError,
    ScrapeError,
    ScrapeTimeout,
    Unreadable,
    WalkRootMissing,
)
from .parser import parse_pressure_line, parse_pressure_text, read_pressure_file
from .sample_collector import SampleCollector, sample_to_records
from .walker import walk_cgroups

__all__ = [
    "MalformedLineKind",
    "MalformedValue",
    "PressureError",
    "ScrapeError",
    "ScrapeTimeout",
    "Unreadable",
    "WalkRootMissing",
    "parse_pressure_line",
    "parse_pressure_text",
    "read_pressure_file",
    "SampleCollector",
    "sample_to_records",
    "walk_cgroups",
]
