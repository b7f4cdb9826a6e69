"""
Error reporting helpers shared by the configuration layer, the snapshot
provider and the command line.

Log records carry the context an error happened in. At the command line,
errors from the `AnalyzerError` taxonomy additionally print their operator
message and decide the exit status.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, TextIO, Union

from ..errors import AnalyzerError

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity an error is logged with."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        return logging.getLevelName(self.name)


class ValidationError(AnalyzerError):
    """
    A configuration value failed validation.

    Carries the dotted name of the offending key and the rejected value.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity

    @property
    def operator_message(self) -> Optional[str]:
        return f"Invalid configuration: {self}"


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log `error` with the context it happened in, then optionally re-raise it.

    DEBUG and CRITICAL records include the traceback.
    """
    if isinstance(severity, str):
        severity = ErrorSeverity(severity.lower())
    target = logger or logging.getLogger(__name__)

    with_traceback = severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL)
    target.log(severity.level, f"Error in {context}: {error}", exc_info=with_traceback)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(
    error: Exception,
    context: str,
    exit_code: Optional[int] = None,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    logger: Optional[logging.Logger] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Report a fatal command-line error and terminate.

    AnalyzerError instances print their `operator_message` to `stream`
    (stdout by default, next to the report) and exit with their own
    `exit_code` unless one is given. Other errors are only logged and exit
    with status 1.

    Raises:
        SystemExit: Always.
    """
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, logger=logger)

    if isinstance(error, AnalyzerError):
        message = error.operator_message
        if message:
            print(f"\n{message}", file=stream or sys.stdout)
        default_code = error.exit_code
    else:
        default_code = 1

    sys.exit(default_code if exit_code is None else exit_code)
