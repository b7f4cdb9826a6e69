"""
Reading `config.toml` into a validated AnalyzerConfig.

Only the `[analyzer]` table is consulted; other tables in the same file are
ignored so the file can be shared with other tools.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..models.config import AnalyzerConfig
from ..validation import ValidationError
from .validators import validate_analyzer_config

logger = logging.getLogger(__name__)

ANALYZER_TABLE = "analyzer"


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Parse a TOML configuration file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    try:
        raw = Path(config_path).read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_path}") from None

    try:
        return tomllib.loads(raw.decode("utf-8"))
    except tomllib.TOMLDecodeError as e:
        logger.critical(f"{config_path} is not valid TOML: {e}")
        raise


def analyzer_table(data: Dict[str, Any], config_path: Path) -> Dict[str, Any]:
    table = data.get(ANALYZER_TABLE, {})
    if not isinstance(table, dict):
        raise ValidationError(
            f"[{ANALYZER_TABLE}] in {config_path} must be a table",
            field_name=ANALYZER_TABLE,
            value=table,
        )
    return table


def load_analyzer_config(config_path: Path) -> AnalyzerConfig:
    """
    Load and validate the analyzer settings of `config_path`.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
        ValidationError: If a setting has an invalid value
    """
    logger.info(f"Loading analyzer configuration from: {config_path}")
    data = read_config_file(config_path)
    try:
        return validate_analyzer_config(analyzer_table(data, config_path))
    except ValidationError as e:
        logger.error(f"Invalid setting {e.field_name or ''} in {config_path}: {e}")
        raise
