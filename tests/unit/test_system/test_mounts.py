"""
Unit tests for cgroup filesystem inspection.

psutil.disk_partitions is patched with a fixed mount table so the tests do
not depend on the host's mounts.
"""

import logging
from collections import namedtuple
from unittest.mock import patch

import pytest

from psiexporter.collectors.exceptions import WalkRootMissing
from psiexporter.system import (
    CGROUP2_FSTYPE,
    check_psi_available,
    describe_cgroup_root,
    find_mount,
)

Partition = namedtuple("Partition", ["device", "mountpoint", "fstype", "opts"])

MOUNT_TABLE = [
    Partition("/dev/sda1", "/", "ext4", "rw"),
    Partition("sysfs", "/sys", "sysfs", "rw"),
    Partition("cgroup2", "/sys/fs/cgroup", "cgroup2", "rw,nsdelegate"),
    Partition("tmpfs", "/run", "tmpfs", "rw"),
]


@pytest.fixture
def mount_table():
    with patch("psiexporter.system.mounts.psutil.disk_partitions", return_value=MOUNT_TABLE) as mocked:
        yield mocked


@pytest.mark.unit
class TestFindMount:
    """Test cases for find_mount."""

    def test_longest_prefix_wins(self, mount_table):
        """Test that the most specific mount point is returned."""
        assert find_mount("/sys/fs/cgroup").fstype == CGROUP2_FSTYPE
        assert find_mount("/sys/fs/cgroup/user.slice").mountpoint == "/sys/fs/cgroup"
        assert find_mount("/sys/kernel").fstype == "sysfs"
        mount_table.assert_called_with(all=True)

    def test_prefix_must_end_at_component(self, mount_table):
        """Test that /runtime is not mistaken for a path under /run."""
        assert find_mount("/runtime/data").mountpoint == "/"

    def test_no_mounts(self):
        """Test an empty mount table."""
        with patch("psiexporter.system.mounts.psutil.disk_partitions", return_value=[]):
            assert find_mount("/sys/fs/cgroup") is None


@pytest.mark.unit
class TestDescribeCgroupRoot:
    """Test cases for describe_cgroup_root."""

    def test_cgroup2_root(self, mount_table, caplog):
        """Test that a cgroup2 root is described without warnings."""
        with caplog.at_level(logging.WARNING):
            description = describe_cgroup_root("/sys/fs/cgroup")

        assert description == "cgroup2 at /sys/fs/cgroup"
        assert caplog.records == []

    def test_non_cgroup2_root_warns(self, mount_table, caplog):
        """Test that a root on another filesystem is reported."""
        with caplog.at_level(logging.WARNING):
            description = describe_cgroup_root("/run/cgroup")

        assert description == "tmpfs at /run"
        assert "expected cgroup2" in caplog.text

    def test_unknown_mount(self, caplog):
        """Test a root with no covering mount entry."""
        with patch("psiexporter.system.mounts.psutil.disk_partitions", return_value=[]):
            with caplog.at_level(logging.WARNING):
                assert describe_cgroup_root("/sys/fs/cgroup") == "unknown"

        assert "No mount entry" in caplog.text


@pytest.mark.unit
class TestCheckPsiAvailable:
    """Test cases for check_psi_available."""

    def test_root_pressure_files(self, populated_cgroup_fs):
        """Test a root cgroup with its own pressure files."""
        check_psi_available(populated_cgroup_fs.root, populated_cgroup_fs.root.parent / "absent")

    def test_proc_pressure_only(self, cgroup_fs):
        """Test a kernel whose root cgroup has no files but /proc/pressure does."""
        cgroup_fs.add("/", cpu=None, memory=None, io=None)
        (cgroup_fs.root.parent / "proc_pressure" / "memory").write_text("some total=0\n")

        check_psi_available(cgroup_fs.root, cgroup_fs.root.parent / "proc_pressure")

    def test_no_psi(self, cgroup_fs):
        """Test a kernel built without PSI."""
        cgroup_fs.add("/", cpu=None, memory=None, io=None)

        with pytest.raises(WalkRootMissing, match="no pressure stall information"):
            check_psi_available(cgroup_fs.root, cgroup_fs.root.parent / "proc_pressure")

    def test_root_missing(self, temp_dir):
        """Test a missing cgroup mount."""
        with pytest.raises(WalkRootMissing, match="not mounted"):
            check_psi_available(temp_dir / "cgroup", temp_dir / "proc")
