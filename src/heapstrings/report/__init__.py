"""
Console report formatting for the heapstrings package.
"""

from .text_report import (
    ConsoleReportRenderer,
    format_region_report,
    format_segment_report,
    format_string_report,
)

__all__ = [
    "ConsoleReportRenderer",
    "format_region_report",
    "format_segment_report",
    "format_string_report",
]
