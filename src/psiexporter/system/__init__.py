"""
System interaction utilities.

Inspection of the cgroup filesystem mount and PSI availability, used by the
command-line interface before the HTTP endpoint starts serving.
"""

from .mounts import (
    CGROUP2_FSTYPE,
    check_psi_available,
    describe_cgroup_root,
    find_mount,
)

__all__ = [
    "CGROUP2_FSTYPE",
    "check_psi_available",
    "describe_cgroup_root",
    "find_mount",
]
