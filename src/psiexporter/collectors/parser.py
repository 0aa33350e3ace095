"""
Parser for the kernel's pressure stall information file format.

Each pressure file holds up to two lines::

    some avg10=0.00 avg60=0.00 avg300=0.00 total=504
    full avg10=0.00 avg60=0.00 avg300=0.00 total=0

Averages are printed as percentages and are converted to ratios in [0, 1];
``total`` is the accumulated stall time in microseconds.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..models.pressure import Controller, Kind, PressureLine, PressureSample
from .exceptions import MalformedLineKind, MalformedValue, Unreadable

logger = logging.getLogger(__name__)

# Known keys, in the order the kernel prints them.
AVERAGE_KEYS = ("avg10", "avg60", "avg300")
TOTAL_KEY = "total"
LINE_KEYS = AVERAGE_KEYS + (TOTAL_KEY,)

_KINDS: Dict[str, Kind] = {kind.value: kind for kind in Kind}


def _parse_percent(raw: str, key: str, line: str) -> float:
    try:
        percent = float(raw)
    except ValueError:
        raise MalformedValue(line, f"non-numeric {key} value {raw!r}")
    # float() accepts nan and inf, neither of which lies in [0, 100]
    if not 0.0 <= percent <= 100.0:
        raise MalformedValue(line, f"{key} percentage {raw} outside [0, 100]")
    return percent / 100.0


def _parse_total(raw: str, line: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise MalformedValue(line, f"total {raw!r} is not an unsigned integer")
    return int(raw)


def parse_pressure_line(line: str) -> PressureLine:
    """
    Parse a single non-empty line of a pressure file.

    Keys must come from ``avg10 avg60 avg300 total`` in that order, each at
    most once. ``total`` is required; an average may be missing.

    Raises:
        MalformedLineKind: If the first token is not ``some`` or ``full``
        MalformedValue: For any other deviation from the kernel format
    """
    tokens = line.split()
    kind = _KINDS.get(tokens[0]) if tokens else None
    if kind is None:
        raise MalformedLineKind(line)

    values: Dict[str, str] = {}
    position = 0
    for token in tokens[1:]:
        key, sep, raw = token.partition("=")
        if not sep or not raw:
            raise MalformedValue(line, f"token {token!r} is not key=value")
        if key not in LINE_KEYS:
            raise MalformedValue(line, f"unknown key {key!r}")
        index = LINE_KEYS.index(key)
        if index < position:
            raise MalformedValue(line, f"key {key!r} repeated or out of order")
        values[key] = raw
        position = index + 1

    if TOTAL_KEY not in values:
        raise MalformedValue(line, "missing total")

    averages: Dict[str, Optional[float]] = {
        key: _parse_percent(values[key], key, line) if key in values else None
        for key in AVERAGE_KEYS
    }
    return PressureLine(
        kind=kind,
        avg10=averages["avg10"],
        avg60=averages["avg60"],
        avg300=averages["avg300"],
        total_micros=_parse_total(values[TOTAL_KEY], line),
    )


def parse_pressure_text(text: str) -> List[PressureLine]:
    """
    Parse the full contents of a pressure file.

    Lines that are absent (e.g. no ``full`` line) are simply not returned.
    The first malformed line fails the whole file.

    Returns:
        Parsed lines in file order.
    """
    lines: List[PressureLine] = []
    seen = set()
    for raw_line in text.splitlines():
        if not raw_line.strip():
            continue
        parsed = parse_pressure_line(raw_line)
        if parsed.kind in seen:
            raise MalformedValue(raw_line, f"duplicate {parsed.kind.value} line")
        seen.add(parsed.kind)
        lines.append(parsed)
    return lines


def read_pressure_file(path: Union[str, Path], controller: Controller) -> List[PressureSample]:
    """
    Read and parse one controller's pressure file.

    Args:
        path: Location of the pressure file
        controller: Controller the file belongs to

    Returns:
        One sample per line present in the file

    Raises:
        Unreadable: If the file cannot be opened or read
        MalformedLineKind, MalformedValue: If the content is not PSI text
    """
    try:
        with open(path, "r", encoding="ascii") as f:
            text = f.read()
    except OSError as e:
        raise Unreadable(path, e.errno, e.strerror) from e
    except UnicodeDecodeError as e:
        raise MalformedValue(repr(e.object[:64]), "non-ASCII content") from e

    return [PressureSample.from_line(controller, line) for line in parse_pressure_text(text)]
