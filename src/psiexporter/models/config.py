"""
Configuration data models.

This module contains the configuration structures assembled at startup from
defaults, the optional TOML file and command-line flags. Both are frozen:
the values are read once and passed unchanged into every scrape.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

DEFAULT_LISTEN_ADDRESS = "[::1]:12345"
DEFAULT_CGROUP_ROOT = Path("/sys/fs/cgroup")
DEFAULT_PROC_PRESSURE_DIR = Path("/proc/pressure")
DEFAULT_SCRAPE_TIMEOUT = 10.0
DEFAULT_READ_WORKERS = 4


@dataclass(frozen=True)
class CollectOptions:
    """
    Output policy applied by the sample collector on every scrape.
    """

    # Emit no avg10/avg60/avg300 records at all
    suppress_averages: bool = False
    # Drop any record whose value is exactly zero
    suppress_zeros: bool = False


@dataclass(frozen=True)
class ExporterConfig:
    """
    The root configuration object for the exporter process.
    """

    # [exporter]
    listen_host: str = "::1"
    listen_port: int = 12345
    log_level: int = 20

    # [collection]
    cgroup_root: Path = DEFAULT_CGROUP_ROOT
    proc_pressure_dir: Path = DEFAULT_PROC_PRESSURE_DIR
    # Cgroup directory names ending in one of these are pruned with their subtree
    exclude_suffixes: Tuple[str, ...] = ()
    scrape_timeout: float = DEFAULT_SCRAPE_TIMEOUT
    read_workers: int = DEFAULT_READ_WORKERS

    # [metrics]
    disable_averages: bool = False
    silence_zeros: bool = False

    @property
    def listen_address(self) -> str:
        if ":" in self.listen_host:
            return f"[{self.listen_host}]:{self.listen_port}"
        return f"{self.listen_host}:{self.listen_port}"

    def collect_options(self) -> CollectOptions:
        return CollectOptions(
            suppress_averages=self.disable_averages,
            suppress_zeros=self.silence_zeros,
        )
