"""
Pytest configuration and shared fixtures for the psiexporter test suite.

This module provides common fixtures, including an on-disk fake of the
cgroup2 filesystem, and configuration files for the config tests.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Pressure file contents
# ============================================================================

CPU_PRESSURE = "some avg10=1.50 avg60=0.75 avg300=0.25 total=504\n"
# Kernels >= 5.13 print a full line for cpu as well
CPU_PRESSURE_WITH_FULL = (
    "some avg10=1.50 avg60=0.75 avg300=0.25 total=504\n"
    "full avg10=0.00 avg60=0.00 avg300=0.00 total=0\n"
)
MEMORY_PRESSURE = (
    "some avg10=12.00 avg60=6.00 avg300=3.00 total=2000000\n"
    "full avg10=4.00 avg60=2.00 avg300=1.00 total=1000000\n"
)
IO_PRESSURE = (
    "some avg10=0.00 avg60=0.00 avg300=0.00 total=0\n"
    "full avg10=0.00 avg60=0.00 avg300=0.00 total=0\n"
)


class FakeCgroupFs:
    """A directory tree laid out like a cgroup2 mount."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def path(self, cgroup_id: str) -> Path:
        return self.root / cgroup_id.lstrip("/")

    def add(
        self,
        cgroup_id: str,
        cpu: Optional[str] = CPU_PRESSURE,
        memory: Optional[str] = MEMORY_PRESSURE,
        io: Optional[str] = IO_PRESSURE,
    ) -> Path:
        """
        Create a cgroup directory with the given pressure file contents (None = no file).

        Parent cgroups that do not exist yet are created too, with the default
        pressure files, as every cgroup2 directory carries its own.
        """
        directory = self.path(cgroup_id)
        missing_parents = [
            parent for parent in directory.parents
            if parent != self.root and self.root in parent.parents and not parent.exists()
        ]
        directory.mkdir(parents=True, exist_ok=True)
        for parent in missing_parents:
            self._write_files(parent, CPU_PRESSURE, MEMORY_PRESSURE, IO_PRESSURE)
        self._write_files(directory, cpu, memory, io)
        return directory

    @staticmethod
    def _write_files(directory: Path, cpu: Optional[str], memory: Optional[str], io: Optional[str]) -> None:
        contents: Dict[str, Optional[str]] = {"cpu": cpu, "memory": memory, "io": io}
        for controller, text in contents.items():
            if text is not None:
                (directory / f"{controller}.pressure").write_text(text)
        # Non-pressure files that real cgroups carry
        (directory / "cgroup.procs").write_text("")

    def remove(self, cgroup_id: str) -> None:
        shutil.rmtree(self.path(cgroup_id))


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def cgroup_fs(temp_dir):
    """An empty fake cgroup mount with an empty proc pressure directory beside it."""
    (temp_dir / "proc_pressure").mkdir()
    return FakeCgroupFs(temp_dir / "cgroup")


@pytest.fixture
def populated_cgroup_fs(cgroup_fs):
    """
    A small hierarchy::

        /
        /system.slice
        /system.slice/systemd-journald.service
        /user.slice
    """
    cgroup_fs.add("/")
    cgroup_fs.add("/system.slice")
    cgroup_fs.add("/system.slice/systemd-journald.service")
    cgroup_fs.add("/user.slice")
    return cgroup_fs


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "exporter": {
            "listen_address": "127.0.0.1:9333",
            "log_level": "DEBUG",
        },
        "collection": {
            "cgroup_root": "/sys/fs/cgroup",
            "proc_pressure_dir": "/proc/pressure",
            "exclude_suffixes": [".mount", ".socket", ".scope"],
            "scrape_timeout": 5.0,
            "read_workers": 2,
        },
        "metrics": {
            "disable_averages": False,
            "silence_zeros": True,
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    config_path = temp_dir / "config.toml"
    with open(config_path, "w") as f:
        toml.dump(sample_config_data, f)
    return config_path
