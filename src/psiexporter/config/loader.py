"""
Configuration file loading utilities.

This module handles the low-level loading and parsing of the exporter's
TOML configuration file and the merging of command-line overrides into it.
"""

import copy
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

CONFIG_SECTIONS = ("exporter", "collection", "metrics")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Read and parse a TOML file.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    logger.info(f"Loading {description} from: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"{description} not found: {file_path}")
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_exporter_config(config_path: Path) -> Dict[str, Any]:
    """
    Load the exporter configuration file.

    Only the known sections are kept; unknown top-level tables are reported
    and ignored.

    Args:
        config_path: Path to the config.toml file

    Returns:
        Mapping of section name to that section's raw settings
    """
    data = load_toml_file(config_path, "exporter configuration file")
    unknown = sorted(set(data) - set(CONFIG_SECTIONS))
    if unknown:
        logger.warning(f"Ignoring unknown configuration sections: {', '.join(unknown)}")
    return {section: dict(data.get(section, {})) for section in CONFIG_SECTIONS}


def merge_overrides(base: Dict[str, Dict[str, Any]], overrides: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Merge sectioned overrides on top of sectioned base settings.

    Override values of None mean "not given" and leave the base untouched.

    Returns:
        A new mapping; neither input is modified
    """
    merged = copy.deepcopy(base)
    for section, values in overrides.items():
        target = merged.setdefault(section, {})
        for key, value in values.items():
            if value is not None:
                target[key] = value
    return merged
