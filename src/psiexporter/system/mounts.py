"""
Cgroup filesystem inspection.

Startup checks that locate the mount entry backing the cgroup root and
verify that the running kernel exposes pressure stall information at all.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import psutil

from ..collectors.exceptions import WalkRootMissing
from ..models.pressure import Controller

logger = logging.getLogger(__name__)

CGROUP2_FSTYPE = "cgroup2"


def find_mount(path: Union[str, Path]) -> Optional[Any]:
    """
    Find the mount entry that covers ``path``.

    Args:
        path: Any filesystem path

    Returns:
        The psutil partition with the longest mount point that is a prefix
        of ``path``, or None when psutil reports no matching mount.
    """
    target = os.path.realpath(str(path))
    best = None
    for partition in psutil.disk_partitions(all=True):
        mountpoint = partition.mountpoint
        if target == mountpoint or target.startswith(mountpoint.rstrip("/") + "/"):
            if best is None or len(mountpoint) > len(best.mountpoint):
                best = partition
    return best


def check_psi_available(cgroup_root: Union[str, Path], proc_pressure_dir: Union[str, Path]) -> None:
    """
    Verify that metrics can be produced at all.

    Raises:
        WalkRootMissing: If the cgroup root is not a directory, or neither the
            root cgroup nor the system-wide PSI directory has pressure files
    """
    root = Path(cgroup_root)
    if not root.is_dir():
        raise WalkRootMissing(root, "cgroup filesystem not mounted")

    for controller in Controller:
        if (root / controller.pressure_file).exists():
            return
        if (Path(proc_pressure_dir) / controller.value).exists():
            return

    raise WalkRootMissing(root, "kernel exposes no pressure stall information")


def describe_cgroup_root(cgroup_root: Union[str, Path]) -> str:
    """
    Summarize the filesystem backing the cgroup root for the startup log.

    Logs a warning when the root is not a cgroup2 mount; v1 hierarchies
    have no per-cgroup pressure files.
    """
    partition = find_mount(cgroup_root)
    if partition is None:
        logger.warning(f"No mount entry found for cgroup root {cgroup_root}")
        return "unknown"
    if partition.fstype != CGROUP2_FSTYPE:
        logger.warning(
            f"Cgroup root {cgroup_root} is on a {partition.fstype} filesystem "
            f"mounted at {partition.mountpoint}, expected {CGROUP2_FSTYPE}"
        )
    return f"{partition.fstype} at {partition.mountpoint}"
