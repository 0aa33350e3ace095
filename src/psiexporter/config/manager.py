"""
Configuration assembly.

This module provides the configuration loading interface: built-in defaults,
then the optional TOML file, then command-line overrides, validated into a
single immutable ExporterConfig. The result is returned to the caller and
threaded explicitly through the application; nothing is cached globally.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import ExporterConfig
from ..validation import handle_config_error, ErrorSeverity, ValidationError
from .loader import CONFIG_SECTIONS, load_exporter_config, merge_overrides
from .validators import validate_exporter_config

logger = logging.getLogger(__name__)

def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ExporterConfig:
    """
    Load and validate the exporter configuration.

    Args:
        config_path: Optional TOML file; defaults apply when omitted
        overrides: Sectioned values from the command line; None values are
            treated as "not given"

    Returns:
        Fully validated ExporterConfig instance

    Raises:
        FileNotFoundError: If ``config_path`` is given but missing
        tomllib.TOMLDecodeError: If the TOML file is malformed
        ValidationError: If any setting is invalid
    """
    raw: Dict[str, Dict[str, Any]] = {section: {} for section in CONFIG_SECTIONS}
    if config_path is not None:
        raw = load_exporter_config(config_path)
    if overrides:
        raw = merge_overrides(raw, overrides)

    try:
        config = validate_exporter_config(raw)
    except ValidationError as e:
        handle_config_error(
            error=e,
            context="validating settings",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    logger.debug(f"Configuration loaded: {config}")
    return config


def get_config_info(config: ExporterConfig, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Summarize a configuration for the startup log.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_path": str(config_path) if config_path else None,
        "listen_address": config.listen_address,
        "cgroup_root": str(config.cgroup_root),
        "exclude_suffixes": list(config.exclude_suffixes),
        "scrape_timeout": config.scrape_timeout,
        "read_workers": config.read_workers,
        "disable_averages": config.disable_averages,
        "silence_zeros": config.silence_zeros,
    }
