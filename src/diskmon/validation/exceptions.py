"""
Exception types and error handling helpers.

This module holds the error taxonomy of a monitoring session together with
the small set of helpers used to log errors consistently and decide whether
they propagate.

Fatal errors (abort the session):
- SpawnError: the monitored command could not be started
- SinkWriteError: samples can no longer be written
- ValidationError: invalid configuration or arguments

Non-fatal errors (stay local to one tick):
- ProbeError: one disk usage measurement failed
- ParseError: the measurement utility produced unexpected output
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


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Used for configuration files and command-line arguments alike.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class DiskMonError(Exception):
    """Base class for errors raised while running a monitoring session."""


class SpawnError(DiskMonError):
    """
    The monitored command could not be launched.

    Attributes:
        command: The argv that was attempted.
    """

    def __init__(self, message: str, command: Optional[list] = None):
        super().__init__(message)
        self.command = command


class ProbeError(DiskMonError):
    """
    A single disk usage measurement failed.

    Attributes:
        path: Directory that was being measured.
        returncode: Exit status of the utility, None if it never ran.
        stderr: Diagnostic output of the utility, if any.
    """

    def __init__(self, message: str, path: Optional[str] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.path = path
        self.returncode = returncode
        self.stderr = stderr


class ParseError(ProbeError):
    """The measurement utility's output did not start with a byte count."""

    def __init__(self, message: str, output: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.output = output


class SinkWriteError(DiskMonError):
    """A sample could not be written to the output destination."""

    def __init__(self, message: str, destination: Optional[str] = None):
        super().__init__(message)
        self.destination = destination


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

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
    Validate a value, converting unexpected exceptions to ValidationError.

    Args:
        validation_func: Function to call for validation
        value: Value to validate
        field_name: Name of the field being validated
        context: Context description for error messages
        logger: Logger instance to use

    Returns:
        Result from validation_func if successful

    Raises:
        ValidationError: If validation fails
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
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI error and exit the process with ``exit_code``."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
