"""
Configuration management for the heapstrings package.

This module provides a clean interface for loading, validating, and accessing
configuration data from TOML files with singleton pattern management.
"""

from .manager import (
    DEFAULT_CONFIG_FILE_PATH,
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)

from .loader import load_analyzer_config, read_config_file
from .validators import (
    validate_analyzer_config,
    validate_layout_data_config,
    validate_report_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE_PATH",
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    "read_config_file",
    "load_analyzer_config",
    "validate_analyzer_config",
    "validate_layout_data_config",
    "validate_report_config",
]
