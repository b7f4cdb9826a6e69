"""
Data models and structures for snapshot analysis.

Configuration Models:
- Analyzer, report and layout-data settings

Snapshot Models:
- Runtime descriptors and their debug-layout data identity
- Memory regions and GC heap segments

Analysis Models:
- Per-object string observations and their classification
- Per-category aggregates and the final compression projection
- Layout diagnostics and the walk result
- Region and segment summaries for the supplementary reports
"""

from .config import AnalyzerConfig, LayoutDataConfig, ReportConfig

from .snapshot import HeapSegment, LayoutDataInfo, MemoryRegion, RuntimeDescriptor

from .analysis import (
    CategoryAggregate,
    Classification,
    CompressionProjection,
    EncodingCategory,
    HeapRegionSummary,
    HeapSegmentSummary,
    LayoutDiagnostic,
    StringObservation,
    WalkResult,
)

__all__ = [
    # Configuration
    "AnalyzerConfig",
    "LayoutDataConfig",
    "ReportConfig",
    # Snapshot
    "HeapSegment",
    "LayoutDataInfo",
    "MemoryRegion",
    "RuntimeDescriptor",
    # Analysis
    "CategoryAggregate",
    "Classification",
    "CompressionProjection",
    "EncodingCategory",
    "HeapRegionSummary",
    "HeapSegmentSummary",
    "LayoutDiagnostic",
    "StringObservation",
    "WalkResult",
]
