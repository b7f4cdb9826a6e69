"""
Configuration data models.

This module contains the configuration-related data structures loaded from
`config.toml`.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


def _default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / "symbols"


@dataclass
class ReportConfig:
    """
    Settings controlling the textual report, from `[analyzer.report]`.
    """

    # How many layout diagnostics are listed individually (0 lists none).
    max_diagnostics_shown: int = 20
    # Whether each listed diagnostic includes a preview of the string text.
    show_diagnostic_text: bool = True
    # Maximum characters of string text shown per diagnostic.
    diagnostic_text_limit: int = 80


@dataclass
class LayoutDataConfig:
    """
    Settings for locating auxiliary debug-layout data, from `[analyzer.layout_data]`.
    """

    # Local cache, laid out as <cache_dir>/<file>/<timestamp><size>/<file>.
    cache_dir: Path = field(default_factory=_default_cache_dir)
    # Symbol-server style directory the provider may copy layout data from.
    symbol_store: Optional[Path] = None
    # Ask the operator before fetching layout data that is not cached.
    confirm_download: bool = True


@dataclass
class AnalyzerConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    log_level: str = "WARNING"
    report: ReportConfig = field(default_factory=ReportConfig)
    layout_data: LayoutDataConfig = field(default_factory=LayoutDataConfig)
