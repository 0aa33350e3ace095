"""
Pressure stall data models.

This module defines the types produced while reading the kernel's PSI
pseudo-files: the controller and kind enumerations, one parsed line of a
pressure file, and the cgroup a set of samples belongs to.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Controller(Enum):
    """Resource controllers that expose a pressure file."""

    CPU = "cpu"
    MEMORY = "memory"
    IO = "io"

    @property
    def pressure_file(self) -> str:
        """File name of this controller's pressure file inside a cgroup."""
        return f"{self.value}.pressure"

    @property
    def supports_full(self) -> bool:
        """Whether ``full`` stall figures are exported for this controller."""
        return self is not Controller.CPU


class Kind(Enum):
    """Stall kinds reported per controller."""

    # At least one task stalled on the resource
    SOME = "some"
    # All non-idle tasks stalled simultaneously
    FULL = "full"


@dataclass(frozen=True)
class PressureLine:
    """
    One parsed line of a pressure file, before it is tied to a controller.

    Averages are ratios in [0, 1] (the kernel prints percentages); any of
    them is None when the line does not carry that window.
    """

    kind: Kind
    avg10: Optional[float]
    avg60: Optional[float]
    avg300: Optional[float]
    total_micros: int


@dataclass(frozen=True)
class PressureSample:
    """
    One (controller, kind) pair read from a pressure file.

    Attributes:
        controller: The resource controller the file belongs to.
        kind: ``some`` or ``full``.
        avg10: Stall ratio over the last 10 seconds, or None.
        avg60: Stall ratio over the last 60 seconds, or None.
        avg300: Stall ratio over the last 300 seconds, or None.
        total_micros: Accumulated stall time in microseconds since the
            counter was created (boot, or cgroup creation).
    """

    controller: Controller
    kind: Kind
    avg10: Optional[float]
    avg60: Optional[float]
    avg300: Optional[float]
    total_micros: int

    @property
    def total_seconds(self) -> float:
        return self.total_micros / 1_000_000

    @classmethod
    def from_line(cls, controller: Controller, line: PressureLine) -> "PressureSample":
        return cls(
            controller=controller,
            kind=line.kind,
            avg10=line.avg10,
            avg60=line.avg60,
            avg300=line.avg300,
            total_micros=line.total_micros,
        )


@dataclass(frozen=True)
class CgroupEntity:
    """
    A cgroup discovered during one scrape.

    ``id`` is the path relative to the cgroup mount, always starting with
    ``/``; the root cgroup (system-wide aggregate) is ``/``.
    """

    id: str

    @property
    def is_root(self) -> bool:
        return self.id == "/"
