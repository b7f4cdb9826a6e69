"""
Configuration validation utilities.

Turns the raw `[analyzer]` table into a typed AnalyzerConfig, filling in
defaults for anything not set.
"""

import logging
from typing import Any, Dict

from ..models.config import AnalyzerConfig, LayoutDataConfig, ReportConfig
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_optional_path,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"analyzer.{name} must be a table", field_name=f"analyzer.{name}", value=section
        )
    return section


def validate_report_config(report_data: Dict[str, Any]) -> ReportConfig:
    defaults = ReportConfig()
    return ReportConfig(
        max_diagnostics_shown=validate_positive_integer(
            report_data.get("max_diagnostics_shown", defaults.max_diagnostics_shown),
            min_value=0,
            max_value=1_000_000,
            field_name="analyzer.report.max_diagnostics_shown",
        ),
        show_diagnostic_text=validate_boolean(
            report_data.get("show_diagnostic_text", defaults.show_diagnostic_text),
            field_name="analyzer.report.show_diagnostic_text",
        ),
        diagnostic_text_limit=validate_positive_integer(
            report_data.get("diagnostic_text_limit", defaults.diagnostic_text_limit),
            min_value=8,
            max_value=100_000,
            field_name="analyzer.report.diagnostic_text_limit",
        ),
    )


def validate_layout_data_config(layout_data: Dict[str, Any]) -> LayoutDataConfig:
    defaults = LayoutDataConfig()
    cache_dir = validate_optional_path(
        layout_data.get("cache_dir", ""), field_name="analyzer.layout_data.cache_dir"
    )
    return LayoutDataConfig(
        cache_dir=cache_dir or defaults.cache_dir,
        symbol_store=validate_optional_path(
            layout_data.get("symbol_store", ""),
            field_name="analyzer.layout_data.symbol_store",
        ),
        confirm_download=validate_boolean(
            layout_data.get("confirm_download", defaults.confirm_download),
            field_name="analyzer.layout_data.confirm_download",
        ),
    )


def validate_analyzer_config(analyzer_data: Dict[str, Any]) -> AnalyzerConfig:
    """
    Validate and create an AnalyzerConfig from raw configuration data.

    Args:
        analyzer_data: Raw `[analyzer]` table from TOML

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    general_settings = _section(analyzer_data, "general")
    report_settings = _section(analyzer_data, "report")
    layout_data_settings = _section(analyzer_data, "layout_data")

    log_level = validate_enum_choice(
        general_settings.get("log_level", "WARNING"),
        choices=LOG_LEVELS,
        field_name="analyzer.general.log_level",
        case_sensitive=False,
    )

    config = AnalyzerConfig(
        log_level=log_level,
        report=validate_report_config(report_settings),
        layout_data=validate_layout_data_config(layout_data_settings),
    )
    logger.debug(f"Validated analyzer configuration: {config}")
    return config
