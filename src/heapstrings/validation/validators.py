"""
Simplified validation functions.

Validators used when turning raw TOML configuration data into typed
configuration objects.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_positive_integer(
    value: Any, 
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within the given bounds.
    
    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated
        
    Returns:
        Validated integer value
        
    Raises:
        ValidationError: If validation fails
    """
    # bool is an int subclass, but `true` is never a sensible count
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML `true` / `false`)."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_optional_path(value: Any, field_name: str = "path") -> Optional[Path]:
    """
    Validate a path-like setting where an empty string means "not set".
    
    Args:
        value: Raw value from the configuration file
        field_name: Name of the field being validated
        
    Returns:
        A Path, or None when the setting is empty
        
    Raises:
        ValidationError: If the value is not a string
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string path, got {value!r}",
            field_name=field_name,
            value=value
        )
    value = value.strip()
    if not value:
        return None
    return Path(value).expanduser()


def validate_enum_choice(
    value: Any, 
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.
    
    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive
        
    Returns:
        Validated choice, in the spelling used by `choices`
        
    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)
    
    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]
