"""
Unit tests for the console report formatting.
"""

import io
from dataclasses import replace

import pytest

from heapstrings.analysis import summarize_regions, summarize_segments
from heapstrings.analysis.accountant import CompressionAccountant
from heapstrings.classification import classify_text, raw_utf16_length
from heapstrings.errors import ConsistencyError
from heapstrings.models.analysis import LayoutDiagnostic, StringObservation, WalkResult
from heapstrings.models.config import ReportConfig
from heapstrings.report import (
    ConsoleReportRenderer,
    format_region_report,
    format_segment_report,
    format_string_report,
)
from heapstrings.report.text_report import format_diagnostic, format_ratio, to_mb


def make_result(texts, diagnostics=()):
    accountant = CompressionAccountant()
    for address, text in enumerate(texts):
        raw_length = raw_utf16_length(text)
        accountant.record(
            StringObservation(address, text, raw_length + 26, raw_length), classify_text(text)
        )
    return WalkResult(
        projection=accountant.finalize(),
        diagnostics=list(diagnostics),
        objects_seen=len(texts),
    )


def mismatch(address, text="hi"):
    return LayoutDiagnostic(
        address=address, expected_size=30, reported_size=31, layout="modern", raw_length=4, text=text
    )


@pytest.mark.unit
class TestFormatting:
    """Test cases for the number formatting helpers."""

    def test_to_mb(self):
        assert to_mb(1024 * 1024) == 1.0

    @pytest.mark.parametrize(
        "value, expected",
        [(26.0, "26"), (26.5, "26.5"), (26.25, "26.25"), (0.0, "0"), (100.0, "100"), (1 / 3, "0.33")],
    )
    def test_format_ratio(self, value, expected):
        assert format_ratio(value) == expected


@pytest.mark.unit
class TestStringReport:
    """Test cases for the string usage and compression report."""

    def test_mixed_scenario(self):
        report = format_string_report(make_result(["hi", "café", "日本語"]))

        assert '"String" memory usage info' in report
        assert 'Overall 3 "String" objects take up 96 bytes' in report
        assert "underlying byte arrays (as Unicode) take up 18 bytes" in report
        assert "are 78 bytes (0.00 MB), at 26 bytes per object" in report
        assert "Total: 18 bytes (expected: 18)" in report
        assert "ERROR" not in report
        assert "Total Usage:  15 bytes" in report
        assert "Total Saving: 3 bytes" in report
        assert "UNRELIABLE" not in report
        assert "Object size mismatches" not in report

    def test_category_lines(self):
        report = format_string_report(make_result(["hi", "café", "日本語"]))
        lines = report.splitlines()

        ascii_line = next(line for line in lines if line.endswith("as ASCII"))
        assert "4 bytes" in ascii_line
        assert "1 strings" in ascii_line
        assert any(line.endswith("as ISO-8859-1 (Latin-1)") and "8 bytes" in line for line in lines)
        assert any(line.endswith("as Unicode") and "6 bytes" in line for line in lines)

    def test_thousands_separators(self):
        report = format_string_report(make_result(["x" * 1000]))

        assert "2,000 bytes" in report

    def test_negative_savings(self):
        report = format_string_report(make_result(["日本"]))

        assert "Total Saving: -1 bytes" in report

    def test_empty_walk(self):
        report = format_string_report(make_result([]))

        assert 'Overall 0 "String" objects' in report
        assert "at 0 bytes per object" in report

    def test_diagnostics_are_listed_and_truncated(self):
        diagnostics = [mismatch(0x1000 + i) for i in range(5)]
        config = ReportConfig(max_diagnostics_shown=2)

        report = format_string_report(make_result(["hi"], diagnostics), config)

        assert "Object size mismatches: 5" in report
        assert "Object: 1000" in report
        assert "Object: 1001" in report
        assert "Object: 1002" not in report
        assert "... and 3 more" in report

    def test_consistency_errors_mark_report_unreliable(self):
        result = make_result(["hi"])
        result.projection = replace(
            result.projection, consistency_errors=(ConsistencyError("totals disagree"),)
        )

        report = format_string_report(result)

        assert "WARNING: this report is UNRELIABLE" in report
        assert "ERROR: totals disagree" in report

    def test_category_mismatch_flagged_on_total_line(self):
        accountant = CompressionAccountant()
        accountant.record(StringObservation(1, "hi", 30, 4), classify_text("hi"))
        accountant.total_raw_bytes = 6

        report = format_string_report(WalkResult(projection=accountant.finalize()))

        assert "Total: 4 bytes (expected: 6 - ERROR)" in report
        assert "UNRELIABLE" in report


@pytest.mark.unit
class TestDiagnosticFormatting:
    """Test cases for single diagnostic lines."""

    def test_modern_diagnostic(self):
        line = format_diagnostic(mismatch(0xabc, "hello"), ReportConfig())

        assert line.startswith("Object Size Mismatch: Raw Bytes Length:")
        assert "Expected:   30" in line
        assert "Object: abc" in line
        assert line.endswith('-> "hello"')

    def test_legacy_diagnostic(self):
        diagnostic = LayoutDiagnostic(
            address=0x10, expected_size=28, reported_size=18, layout="legacy",
            raw_length=4, array_length=8, string_length=2,
        )

        line = format_diagnostic(diagnostic, ReportConfig(show_diagnostic_text=False))

        assert "arrayLength:    8" in line
        assert "stringLength:    2" in line
        assert "->" not in line

    def test_long_text_is_shortened(self):
        line = format_diagnostic(mismatch(1, "x" * 100), ReportConfig(diagnostic_text_limit=10))

        assert line.endswith('"xxxxxxx..."')


@pytest.mark.unit
class TestHeapMetadataReports:
    """Test cases for the region and GC segment tables."""

    def test_region_report(self, sample_regions):
        report = format_region_report(summarize_regions(sample_regions))
        lines = report.splitlines()

        assert lines[0] == "Memory Region Information"
        assert lines[4].split() == ["GCSegment", "2", "6.00"]
        assert lines[5].split()[0] == "HighFrequencyLoaderHeap"

    def test_segment_report(self, sample_segments):
        report = format_segment_report(summarize_segments(sample_segments), server_gc=True)

        assert report.startswith("GC Heap Information - Server")
        assert "Heap  0:    8,388,608 bytes (8.00 MB) in use" in report
        assert "Heap  1:" in report
        assert "Total (across all heaps): 19,922,944 bytes (19.00 MB)" in report

    def test_workstation_segment_report(self):
        report = format_segment_report([], server_gc=False)

        assert report.startswith("GC Heap Information - Workstation")
        assert "Total (across all heaps): 0 bytes" in report


@pytest.mark.unit
def test_renderer_writes_to_stream():
    stream = io.StringIO()

    ConsoleReportRenderer(ReportConfig(), stream)(make_result(["hi"]))

    assert '"String" memory usage info' in stream.getvalue()
