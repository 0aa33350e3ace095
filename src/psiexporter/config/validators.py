"""
Configuration validation utilities.

Turns raw, sectioned settings (from TOML and command-line overrides) into a
validated ExporterConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    DEFAULT_CGROUP_ROOT,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_PROC_PRESSURE_DIR,
    DEFAULT_READ_WORKERS,
    DEFAULT_SCRAPE_TIMEOUT,
    ExporterConfig,
)
from ..validation import (
    validate_absolute_path,
    validate_bool,
    validate_listen_address,
    validate_log_level,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
    validate_with_handler,
)

logger = logging.getLogger(__name__)

MAX_READ_WORKERS = 64


def validate_exporter_config(config_data: Dict[str, Dict[str, Any]]) -> ExporterConfig:
    """
    Validate and create an ExporterConfig from raw configuration data.

    Args:
        config_data: Mapping with optional "exporter", "collection" and
            "metrics" sections

    Returns:
        Validated ExporterConfig instance

    Raises:
        ValidationError: If validation fails
    """
    exporter_settings = config_data.get("exporter", {})
    collection_settings = config_data.get("collection", {})
    metrics_settings = config_data.get("metrics", {})

    # [exporter]
    listen_host, listen_port = validate_with_handler(
        lambda value: validate_listen_address(value, field_name="exporter.listen_address"),
        exporter_settings.get("listen_address", DEFAULT_LISTEN_ADDRESS),
        field_name="exporter.listen_address",
        context="exporter settings",
        logger=logger,
    )

    log_level = validate_log_level(
        exporter_settings.get("log_level", "INFO"),
        field_name="exporter.log_level",
    )

    # [collection]
    cgroup_root = validate_absolute_path(
        collection_settings.get("cgroup_root", str(DEFAULT_CGROUP_ROOT)),
        field_name="collection.cgroup_root",
    )

    proc_pressure_dir = validate_absolute_path(
        collection_settings.get("proc_pressure_dir", str(DEFAULT_PROC_PRESSURE_DIR)),
        field_name="collection.proc_pressure_dir",
    )

    exclude_suffixes = validate_string_list(
        collection_settings.get("exclude_suffixes", []),
        field_name="collection.exclude_suffixes",
    )

    scrape_timeout = validate_positive_float(
        collection_settings.get("scrape_timeout", DEFAULT_SCRAPE_TIMEOUT),
        min_value=0.1,  # 100ms minimum
        max_value=300.0,  # 5m maximum
        field_name="collection.scrape_timeout",
    )

    read_workers = validate_positive_integer(
        collection_settings.get("read_workers", DEFAULT_READ_WORKERS),
        min_value=1,
        max_value=MAX_READ_WORKERS,
        field_name="collection.read_workers",
    )

    # [metrics]
    disable_averages = validate_bool(
        metrics_settings.get("disable_averages", False),
        field_name="metrics.disable_averages",
    )

    silence_zeros = validate_bool(
        metrics_settings.get("silence_zeros", False),
        field_name="metrics.silence_zeros",
    )

    if scrape_timeout > 60.0:
        logger.warning(
            f"collection.scrape_timeout of {scrape_timeout:g}s exceeds the usual "
            f"Prometheus scrape timeout; slow scrapes will be cut off by the server first"
        )

    return ExporterConfig(
        listen_host=listen_host,
        listen_port=listen_port,
        log_level=log_level,
        cgroup_root=cgroup_root,
        proc_pressure_dir=proc_pressure_dir,
        exclude_suffixes=tuple(exclude_suffixes),
        scrape_timeout=scrape_timeout,
        read_workers=read_workers,
        disable_averages=disable_averages,
        silence_zeros=silence_zeros,
    )
