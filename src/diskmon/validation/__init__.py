"""
Validation and error handling for the diskmon package.

This module provides input validation, the session error taxonomy and
error handling helpers with consistent error reporting across the
application.
"""

from .exceptions import (
    DiskMonError,
    ErrorSeverity,
    ParseError,
    ProbeError,
    SinkWriteError,
    SpawnError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    validate_with_handler,
)
from .validators import (
    validate_boolean,
    validate_command_argv,
    validate_directory,
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Errors
    "DiskMonError",
    "ErrorSeverity",
    "ParseError",
    "ProbeError",
    "SinkWriteError",
    "SpawnError",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "validate_with_handler",
    # Validators
    "validate_boolean",
    "validate_command_argv",
    "validate_directory",
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
]
