"""
Errors raised while collecting pressure stall information.

Per-pair errors (``Unreadable``, ``MalformedLineKind``, ``MalformedValue``)
cause one (cgroup, controller) pair to be skipped. Scrape errors
(``ScrapeTimeout``, ``WalkRootMissing``) abort the scrape they occur in.
"""

from pathlib import Path
from typing import Optional, Union


class PressureError(Exception):
    """Base class for failures reading a single pressure file."""


class Unreadable(PressureError):
    """
    The pressure file could not be opened or read.

    Raised for vanished cgroups, permission problems and kernels where PSI
    is disabled (reads fail with EOPNOTSUPP).
    """

    def __init__(self, path: Union[str, Path], errno: Optional[int] = None,
                 strerror: Optional[str] = None):
        self.path = str(path)
        self.errno = errno
        self.strerror = strerror
        super().__init__(f"cannot read {self.path}: {strerror or 'unknown error'}")


class MalformedLineKind(PressureError):
    """A line did not start with ``some`` or ``full``."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"unexpected line kind in {line!r}")


class MalformedValue(PressureError):
    """A line's key=value tokens did not match the kernel format."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason} in {line!r}")


class ScrapeError(Exception):
    """Base class for failures that abort a whole scrape."""


class ScrapeTimeout(ScrapeError):
    """The scrape did not finish within its deadline."""

    def __init__(self, timeout: float, stage: str = "collect"):
        self.timeout = timeout
        self.stage = stage
        super().__init__(f"scrape exceeded {timeout:g}s deadline during {stage}")


class WalkRootMissing(ScrapeError):
    """The cgroup mount is absent or the kernel exposes no PSI files."""

    def __init__(self, root: Union[str, Path], detail: str = "not a directory"):
        self.root = str(root)
        super().__init__(f"cgroup root {self.root}: {detail}")
