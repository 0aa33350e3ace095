"""
Metric exporter boundary: Prometheus families and the HTTP endpoint.
"""

from .metrics import LABEL_NAMES, PressureMetricsCollector, build_metric_families
from .server import build_registry, create_app, serve

__all__ = [
    "LABEL_NAMES",
    "PressureMetricsCollector",
    "build_metric_families",
    "build_registry",
    "create_app",
    "serve",
]
