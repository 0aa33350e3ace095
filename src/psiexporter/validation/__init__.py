"""
Validation and error reporting.

- exceptions: ErrorSeverity, ValidationError and the handle_error family
  that every module reports failures through
- validators: field validators used by the config layer and the CLI
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    validate_with_handler,
)
from .validators import (
    LOG_LEVELS,
    validate_absolute_path,
    validate_bool,
    validate_enum_choice,
    validate_listen_address,
    validate_log_level,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_string_list,
)

__all__ = [
    "ErrorSeverity",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "validate_with_handler",
    "LOG_LEVELS",
    "validate_absolute_path",
    "validate_bool",
    "validate_enum_choice",
    "validate_listen_address",
    "validate_log_level",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_string_list",
]
