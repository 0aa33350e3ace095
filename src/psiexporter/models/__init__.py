"""
Data models for the pressure exporter.

Configuration Models:
- Exporter process configuration and the per-scrape output policy

Pressure Models:
- Controller and kind enumerations
- Parsed pressure file lines and samples
- Cgroups discovered during a scrape

Result Models:
- Export records handed to the metric exporter
- Non-fatal per-pair collection errors

All models are frozen dataclasses: a scrape builds them once and never
mutates them.
"""

# Configuration models
from .config import CollectOptions, ExporterConfig

# Pressure models
from .pressure import CgroupEntity, Controller, Kind, PressureLine, PressureSample

# Result models
from .results import CollectionError, CollectionResult, ExportRecord, MetricKind

__all__ = [
    # Configuration
    "CollectOptions",
    "ExporterConfig",
    # Pressure
    "CgroupEntity",
    "Controller",
    "Kind",
    "PressureLine",
    "PressureSample",
    # Results
    "CollectionError",
    "CollectionResult",
    "ExportRecord",
    "MetricKind",
]
