"""
Error reporting helpers.

Every component reports failures the same way: one log line of the form
``Error in <context>: <error>`` at a chosen severity, after which the error
is either re-raised or swallowed. Per-pair read failures during a scrape
are logged and swallowed; configuration and startup failures are logged
and end the process.
"""

import logging
import sys
from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def log_level(self) -> int:
        return getattr(logging, self.name)


class ValidationError(Exception):
    """
    A configuration value or command-line flag was rejected.

    Attributes:
        field_name: Dotted setting name, e.g. ``collection.read_workers``
        value: The rejected raw value
        severity: How the failure should be reported
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log ``error`` with its context and optionally re-raise it.

    Args:
        error: The exception that occurred
        context: What was being done, e.g. "reading io pressure of cgroup /"
        severity: ErrorSeverity member or its name, case-insensitive
        reraise: Whether to re-raise the exception after logging
        logger: Logger to report through (defaults to this module's)
    """
    effective_logger = logger or globals()['logger']
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())

    # Tracebacks only for failures nobody anticipated
    effective_logger.log(
        severity.log_level,
        f"Error in {context}: {error}",
        exc_info=severity is ErrorSeverity.CRITICAL,
    )

    if reraise:
        raise error


def validate_with_handler(
    validation_func: Callable[[Any], T],
    value: Any,
    field_name: str,
    context: str,
    logger: Optional[logging.Logger] = None
) -> T:
    """
    Run a validator, turning unexpected exceptions into ValidationError.

    ValidationError raised by ``validation_func`` passes through untouched;
    anything else is wrapped so callers only ever see ValidationError.

    Returns:
        Whatever ``validation_func`` returns for ``value``
    """
    try:
        return validation_func(value)
    except ValidationError:
        raise
    except Exception as e:
        error_msg = f"Validation failed for {field_name} in {context}: {e}"
        if logger:
            logger.error(error_msg)
        raise ValidationError(error_msg, field_name=field_name, value=value)


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Report a failure while loading or validating configuration."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Report a fatal startup failure and exit with ``exit_code`` (default 1)."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
