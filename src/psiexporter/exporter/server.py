"""
HTTP endpoint for the pressure exporter.

A small Flask application: ``/metrics`` renders the registry in the
Prometheus text format, ``/`` is a landing page. Scrape-level failures are
answered with a server error and the process keeps serving.
"""

import logging
from typing import Optional

from flask import Flask, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from ..collectors.exceptions import ScrapeTimeout, WalkRootMissing
from ..collectors.sample_collector import SampleCollector
from ..models.config import ExporterConfig
from ..validation import ErrorSeverity, handle_error
from .metrics import PressureMetricsCollector

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>PSI Exporter</title></head>
<body>
<h1>PSI Exporter</h1>
<p>Pressure stall information for every cgroup.</p>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


def build_registry(config: ExporterConfig) -> CollectorRegistry:
    """Create a registry holding only the pressure collector for ``config``."""
    registry = CollectorRegistry()
    registry.register(
        PressureMetricsCollector(SampleCollector.from_config(config), config.collect_options())
    )
    return registry


def create_app(registry: Optional[CollectorRegistry] = None,
               config: Optional[ExporterConfig] = None) -> Flask:
    """
    Build the Flask application serving ``registry``.

    Args:
        registry: Registry to expose; built from ``config`` when omitted
        config: Exporter configuration, defaults when omitted
    """
    if registry is None:
        registry = build_registry(config or ExporterConfig())

    app = Flask(__name__)

    @app.route("/metrics")
    def metrics_endpoint():
        try:
            payload = generate_latest(registry)
        except ScrapeTimeout as e:
            handle_error(e, "metrics scrape", severity=ErrorSeverity.ERROR,
                         reraise=False, logger=logger)
            return Response(f"{e}\n", status=500, mimetype="text/plain")
        except WalkRootMissing as e:
            handle_error(e, "metrics scrape", severity=ErrorSeverity.ERROR,
                         reraise=False, logger=logger)
            return Response(f"{e}\n", status=503, mimetype="text/plain")
        return Response(payload, status=200, headers={"Content-Type": CONTENT_TYPE_LATEST})

    @app.route("/")
    def home():
        return Response(LANDING_PAGE, mimetype="text/html")

    return app


def serve(app: Flask, config: ExporterConfig) -> None:
    """Run the application on the configured address until interrupted."""
    logger.info(f"Listening address: {config.listen_address}")
    app.run(host=config.listen_host, port=config.listen_port, debug=False, threaded=True)
