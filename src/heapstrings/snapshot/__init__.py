"""
Snapshot access for the heapstrings package.

This module provides the abstract provider interface consumed by the
analysis core, the Parquet export provider, and debug-layout data lookup.
"""

from .base import AttachedRuntime, ObjectType, Snapshot, SnapshotProvider
from .layout_data import (
    acquire_layout_data,
    confirm_on_console,
    layout_data_cache_path,
    locate_layout_data,
)
from .parquet_provider import ParquetSnapshotProvider
from .storage import SnapshotStore, write_snapshot

__all__ = [
    "AttachedRuntime",
    "ObjectType",
    "Snapshot",
    "SnapshotProvider",
    "acquire_layout_data",
    "confirm_on_console",
    "layout_data_cache_path",
    "locate_layout_data",
    "ParquetSnapshotProvider",
    "SnapshotStore",
    "write_snapshot",
]
