"""
Field validators for configuration values and command-line flags.

Each validator takes a raw value (from TOML or argparse) plus the dotted
name of the setting, and returns the value in the type the exporter uses,
or raises ValidationError naming that setting.
"""

import ipaddress
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from .exceptions import ValidationError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _reject(field_name: str, message: str, value: Any) -> ValidationError:
    return ValidationError(f"{field_name} {message}", field_name=field_name, value=value)


def _check_range(number, value: Any, min_value, max_value, field_name: str):
    if number < min_value:
        raise _reject(field_name, f"must be >= {min_value}, got {number}", value)
    if max_value is not None and number > max_value:
        raise _reject(field_name, f"must be <= {max_value}, got {number}", value)
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer within [min_value, max_value].

    Numeric strings are accepted (flags arrive as text); booleans are not,
    although Python treats them as integers.

    Raises:
        ValidationError: If the value is not an integer or out of range
    """
    if isinstance(value, bool):
        raise _reject(field_name, f"must be a valid integer, got {value}", value)
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise _reject(field_name, f"must be a valid integer, got {value}", value)
    return _check_range(int_value, value, min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """Validate a number within [min_value, max_value], returned as float."""
    if isinstance(value, bool):
        raise _reject(field_name, f"must be a valid number, got {value}", value)
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise _reject(field_name, f"must be a valid number, got {value}", value)
    return _check_range(float_value, value, min_value, max_value, field_name)


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML true/false)."""
    if not isinstance(value, bool):
        raise _reject(field_name, f"must be a boolean, got {value!r}", value)
    return value


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """Check that ``path`` exists and return it as a string."""
    path_str = str(path)
    if not os.path.exists(path_str):
        raise _reject(field_name, f"does not exist: {path_str}", path_str)
    return path_str


def validate_absolute_path(path: Any, field_name: str = "path") -> Path:
    """
    Validate that a value is an absolute filesystem path.

    Existence is not checked here; the cgroup mount is inspected at startup
    and on every scrape.
    """
    if not path or not isinstance(path, (str, Path)):
        raise _reject(field_name, "must be a non-empty path", path)
    candidate = Path(path)
    if not candidate.is_absolute():
        raise _reject(field_name, f"must be an absolute path, got {path}", path)
    return candidate


def validate_listen_address(address: Any, field_name: str = "listen_address") -> Tuple[str, int]:
    """
    Validate a socket address of the form ``HOST:PORT`` or ``[V6HOST]:PORT``.

    Args:
        address: Address string, e.g. "[::1]:12345" or "0.0.0.0:9100"
        field_name: Name of the field being validated

    Returns:
        Tuple of (host, port) with IPv6 brackets removed

    Raises:
        ValidationError: If the address is not an IP literal with a valid port
    """
    if not address or not isinstance(address, str):
        raise _reject(field_name, "must be a non-empty string", address)

    bracketed = address.startswith("[")
    if bracketed:
        host, sep, port_str = address[1:].partition("]:")
    else:
        host, sep, port_str = address.rpartition(":")
    if not sep or not host:
        raise _reject(field_name, f"must look like HOST:PORT or [HOST]:PORT, got {address}", address)

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        raise _reject(field_name, f"has an invalid IP address: {host}", address)
    if bracketed != (ip.version == 6):
        raise _reject(field_name, f"must bracket IPv6 hosts and only those, got {address}", address)

    port = validate_positive_integer(
        port_str, min_value=1, max_value=65535, field_name=f"{field_name} port"
    )
    return host, port


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """Validate a list of non-empty strings, e.g. cgroup name suffixes."""
    if not isinstance(value, (list, tuple)):
        raise _reject(field_name, f"must be a list of strings, got {value!r}", value)
    for i, item in enumerate(value):
        if not isinstance(item, str) or not item:
            raise ValidationError(
                f"{field_name}[{i}] must be a non-empty string, got {item!r}",
                field_name=field_name,
                value=value
            )
    return list(value)


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of ``choices``.

    Returns:
        The matching choice in the spelling used by ``choices``
    """
    normalize = (lambda s: s) if case_sensitive else str.lower
    wanted = normalize(str(value))
    for choice in choices:
        if normalize(choice) == wanted:
            return choice
    raise _reject(field_name, f"must be one of {choices}, got {value}", value)


def validate_log_level(value: Any, field_name: str = "log_level") -> int:
    """Validate a logging level name and return its numeric value."""
    name = validate_enum_choice(value, LOG_LEVELS, field_name=field_name, case_sensitive=False)
    return logging.getLevelName(name)
