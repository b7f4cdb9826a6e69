"""
heapstrings: string memory analysis for managed heap snapshots.

This package walks the managed heap captured in a snapshot, works out the
narrowest encoding each string could be stored in, and projects how much
memory a compact string representation would save.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- classification: Narrowest-encoding classification of strings
- analysis: Layout verification, accounting, metadata reports, heap walk
- snapshot: Snapshot provider interface, Parquet exports, layout data
- report: Console report formatting
- cli: Command-line interface

Usage:
    From command line:
        heapstrings path/to/snapshot.json [--gcinfo]

    Programmatically:
        from heapstrings import ParquetSnapshotProvider, WalkOrchestrator
        with ParquetSnapshotProvider().open_snapshot(path) as snapshot:
            runtime = snapshot.attach_runtime(snapshot.list_runtimes()[0])
            result = WalkOrchestrator(runtime).walk()
"""

from .config import get_config, clear_config_cache, set_config_path

from .errors import (
    AnalyzerError,
    ArchitectureMismatchError,
    ConsistencyError,
    HeapUnwalkableError,
    RuntimeAttachError,
    SnapshotLoadError,
    SnapshotNotFoundError,
    UsageError,
)

from .models import (
    AnalyzerConfig,
    CompressionProjection,
    EncodingCategory,
    LayoutDiagnostic,
    RuntimeDescriptor,
    StringObservation,
    WalkResult,
)

from .classification import classify_text

from .analysis import (
    CompressionAccountant,
    WalkOrchestrator,
    summarize_regions,
    summarize_segments,
    verify_object_size,
)

from .snapshot import ParquetSnapshotProvider, write_snapshot

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Errors
    "AnalyzerError",
    "ArchitectureMismatchError",
    "ConsistencyError",
    "HeapUnwalkableError",
    "RuntimeAttachError",
    "SnapshotLoadError",
    "SnapshotNotFoundError",
    "UsageError",
    # Models
    "AnalyzerConfig",
    "CompressionProjection",
    "EncodingCategory",
    "LayoutDiagnostic",
    "RuntimeDescriptor",
    "StringObservation",
    "WalkResult",
    # Core
    "classify_text",
    "CompressionAccountant",
    "WalkOrchestrator",
    "summarize_regions",
    "summarize_segments",
    "verify_object_size",
    # Snapshots
    "ParquetSnapshotProvider",
    "write_snapshot",
]
