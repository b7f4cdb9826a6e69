"""
String analysis core.

- verifier: expected-size checks for string objects
- accountant: per-category totals and the compression projection
- reporters: region and segment groupings for the supplementary reports
- orchestrator: the heap walk tying the pieces together
"""

from .accountant import CompressionAccountant
from .orchestrator import WalkOrchestrator
from .reporters import summarize_regions, summarize_segments, total_segment_length
from .verifier import (
    LegacyLayout,
    ModernLayout,
    expected_size,
    header_size_for,
    select_layout,
    verify_object_size,
)

__all__ = [
    "CompressionAccountant",
    "WalkOrchestrator",
    "summarize_regions",
    "summarize_segments",
    "total_segment_length",
    "LegacyLayout",
    "ModernLayout",
    "expected_size",
    "header_size_for",
    "select_layout",
    "verify_object_size",
]
