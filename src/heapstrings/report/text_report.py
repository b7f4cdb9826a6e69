"""
Human-readable console report.

Formats the walk result and the optional region/segment summaries as plain
text. Byte counts use thousands separators; MB figures are bytes / 1024 / 1024
with two decimals.
"""

import logging
import sys
from typing import List, Optional, Sequence, TextIO

from ..analysis.reporters import total_segment_length
from ..models.analysis import (
    EncodingCategory,
    HeapRegionSummary,
    HeapSegmentSummary,
    LayoutDiagnostic,
    WalkResult,
)
from ..models.config import ReportConfig

logger = logging.getLogger(__name__)

STRING_TYPE_LABEL = '"String"'

CATEGORY_LABELS = {
    EncodingCategory.ASCII: "ASCII",
    EncodingCategory.LATIN1: "ISO-8859-1 (Latin-1)",
    EncodingCategory.WIDE: "Unicode",
}

REGION_SEPARATOR = "-" * 48
SEGMENT_SEPARATOR = "-" * 59


def to_mb(value: float) -> float:
    return value / 1024.0 / 1024.0


def format_ratio(value: float) -> str:
    """Two decimals at most, trailing zeros dropped (26.50 -> 26.5, 26.00 -> 26)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def _preview(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def format_diagnostic(diagnostic: LayoutDiagnostic, config: ReportConfig) -> str:
    if diagnostic.array_length is not None:
        string_length = "?" if diagnostic.string_length is None else diagnostic.string_length
        line = (
            f"Object Size Mismatch: arrayLength: {diagnostic.array_length:4}, "
            f"stringLength: {string_length:>4}, "
            f"Object Size: {diagnostic.reported_size:4}, "
            f"Expected: {diagnostic.expected_size:4}, Object: {diagnostic.address_hex}"
        )
    else:
        line = (
            f"Object Size Mismatch: Raw Bytes Length: {diagnostic.raw_length:4}, "
            f"Object Size: {diagnostic.reported_size:4}, "
            f"Expected: {diagnostic.expected_size:4}, Object: {diagnostic.address_hex}"
        )
    if config.show_diagnostic_text:
        line += f' -> "{_preview(diagnostic.text, config.diagnostic_text_limit)}"'
    return line


def format_string_report(result: WalkResult, config: Optional[ReportConfig] = None) -> str:
    """Render the string usage, encoding breakdown and compression projection."""
    config = config or ReportConfig()
    projection = result.projection
    lines: List[str] = []

    count = projection.object_count
    total_size = projection.total_reported_size
    raw_bytes = projection.total_raw_bytes
    overhead = projection.residual_overhead

    lines.append(f"{STRING_TYPE_LABEL} memory usage info")
    lines.append(
        f"Overall {count:,} {STRING_TYPE_LABEL} objects take up "
        f"{total_size:,} bytes ({to_mb(total_size):,.2f} MB)"
    )
    lines.append(
        f"Of this underlying byte arrays (as Unicode) take up "
        f"{raw_bytes:,} bytes ({to_mb(raw_bytes):,.2f} MB)"
    )
    lines.append(
        f"Remaining data (object headers, other fields, etc) are {overhead:,} bytes "
        f"({to_mb(overhead):,.2f} MB), at "
        f"{format_ratio(projection.average_overhead_per_object)} bytes per object"
    )
    lines.append("")

    lines.append(
        f"Actual Encoding that the {STRING_TYPE_LABEL} could be stored as "
        f"(with corresponding data size)"
    )
    for category in EncodingCategory:
        aggregate = projection.categories[category]
        lines.append(
            f"  {aggregate.raw_bytes:>15,} bytes ({aggregate.count:>8,} strings) "
            f"as {CATEGORY_LABELS[category]}"
        )
    category_total = projection.category_bytes_total
    suffix = " - ERROR" if category_total != raw_bytes else ""
    lines.append(f"Total: {category_total:,} bytes (expected: {raw_bytes:,}{suffix})")
    lines.append("")

    lines.append("Compression Summary:")
    lines.append(
        f"  {projection.compressed_total:>15,} bytes Compressed (to ISO-8859-1 (Latin-1))"
    )
    lines.append(f"  {projection.uncompressed_total:>15,} bytes Uncompressed (as Unicode)")
    lines.append(
        f"  {projection.selector_bytes:>15,} bytes EXTRA to enable compression "
        f"(1-byte field, per {STRING_TYPE_LABEL} object)"
    )
    lines.append("")
    lines.append(
        f"Total Usage:  {projection.projected_total:,} bytes "
        f"({to_mb(projection.projected_total):,.2f} MB), compared to {raw_bytes:,} "
        f"({to_mb(raw_bytes):,.2f} MB) before compression"
    )
    lines.append(
        f"Total Saving: {projection.projected_savings:,} bytes "
        f"({to_mb(projection.projected_savings):,.2f} MB)"
    )

    if result.diagnostics:
        lines.append("")
        lines.append(f"Object size mismatches: {len(result.diagnostics):,}")
        shown = result.diagnostics[: config.max_diagnostics_shown]
        lines.extend(format_diagnostic(d, config) for d in shown)
        hidden = len(result.diagnostics) - len(shown)
        if hidden > 0:
            lines.append(f"  ... and {hidden:,} more")

    if not projection.reliable:
        lines.append("")
        lines.append(
            f"WARNING: this report is UNRELIABLE, "
            f"{len(projection.consistency_errors)} consistency error(s) were recorded:"
        )
        lines.extend(f"  ERROR: {error}" for error in projection.consistency_errors)

    lines.append("")
    lines.append(
        f"Walked {result.objects_seen:,} heap objects: {count:,} strings, "
        f"{result.non_string_objects:,} of other types, "
        f"{result.corrupt_objects:,} skipped as unreadable"
    )
    return "\n".join(lines) + "\n"


def format_region_report(summaries: Sequence[HeapRegionSummary]) -> str:
    lines = ["Memory Region Information", REGION_SEPARATOR]
    lines.append(f"{'Type':>24} {'Count':>5} {'Total Size (MB)':>15}")
    lines.append(REGION_SEPARATOR)
    for summary in summaries:
        lines.append(
            f"{summary.type:>24} {summary.count:>5} {to_mb(summary.total_size):>15,.2f}"
        )
    lines.append(REGION_SEPARATOR)
    return "\n".join(lines) + "\n"


def format_segment_report(summaries: Sequence[HeapSegmentSummary], server_gc: bool) -> str:
    lines = [f"GC Heap Information - {'Server' if server_gc else 'Workstation'}"]
    for summary in summaries:
        lines.append(SEGMENT_SEPARATOR)
        lines.append(
            f"Heap {summary.heap:2}: {summary.total_length:12,} bytes "
            f"({to_mb(summary.total_length):,.2f} MB) in use"
        )
        lines.append(SEGMENT_SEPARATOR)
        lines.append(
            f"{'Type':>12} {'Size (MB)':>12} {'Committed (MB)':>14} {'Reserved (MB)':>14}"
        )
        lines.append(SEGMENT_SEPARATOR)
        for segment in summary.segments:
            lines.append(
                f"{segment.segment_class:>12} {to_mb(segment.length):12,.2f} "
                f"{to_mb(segment.committed):14,.2f} {to_mb(segment.reserved):14,.2f}"
            )
    total = total_segment_length(summaries)
    lines.append(SEGMENT_SEPARATOR)
    lines.append(f"Total (across all heaps): {total:,} bytes ({to_mb(total):,.2f} MB)")
    lines.append(SEGMENT_SEPARATOR)
    return "\n".join(lines) + "\n"


class ConsoleReportRenderer:
    """Writes the string report for a finished walk to a text stream."""

    def __init__(self, config: Optional[ReportConfig] = None, stream: Optional[TextIO] = None):
        self.config = config or ReportConfig()
        self.stream = stream

    def __call__(self, result: WalkResult) -> None:
        stream = self.stream or sys.stdout
        stream.write("\n")
        stream.write(format_string_report(result, self.config))
        stream.flush()
