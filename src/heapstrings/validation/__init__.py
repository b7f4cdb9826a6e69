"""
Validation and error handling for the heapstrings package.

This module provides input validation and error handling helpers
with consistent error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_file_error,
    handle_cli_error,
)

from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_optional_path,
    validate_positive_integer,
)

__all__ = [
    "ErrorSeverity",
    "ValidationError", 
    "handle_error",
    "handle_config_error",
    "handle_file_error", 
    "handle_cli_error",
    "validate_boolean",
    "validate_enum_choice", 
    "validate_optional_path",
    "validate_positive_integer",
]
