"""
Configuration management for the psiexporter package.

This module provides a clean interface for loading and validating the
exporter configuration from defaults, a TOML file and command-line flags.
"""

# Main configuration interface
from .manager import (
    get_config_info,
    load_config,
)

# For advanced usage - direct access to loaders and validators
from .loader import (
    CONFIG_SECTIONS,
    load_exporter_config,
    load_toml_file,
    merge_overrides,
)
from .validators import validate_exporter_config

__all__ = [
    # Main interface
    "get_config_info",
    "load_config",
    # Advanced interface
    "CONFIG_SECTIONS",
    "load_exporter_config",
    "load_toml_file",
    "merge_overrides",
    "validate_exporter_config",
]
