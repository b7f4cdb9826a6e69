"""
Parquet storage for heap snapshot exports, using Polars.

A snapshot export is a JSON manifest plus one Parquet table per kind of
record, all in the same directory:

    snapshot.json       manifest: runtimes, walkability, table file names
    objects.parquet     one row per heap object
    regions.parquet     runtime memory regions
    segments.parquet    GC heap segments

The manifest is the file handed to the analyzer.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional

import polars as pl

from ..models.snapshot import HeapSegment, MemoryRegion, RuntimeDescriptor

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

OBJECTS_SCHEMA = {
    "address": pl.UInt64,
    # Null marks an object whose type could not be resolved
    "type_name": pl.Utf8,
    "is_string": pl.Boolean,
    "value": pl.Utf8,
    "size": pl.UInt64,
    # Legacy (2.x) string layout fields, null elsewhere
    "array_length": pl.Int64,
    "string_length": pl.Int64,
}

REGIONS_SCHEMA = {
    "address": pl.UInt64,
    "size": pl.UInt64,
    "type": pl.Utf8,
}

SEGMENTS_SCHEMA = {
    "start": pl.UInt64,
    "end": pl.UInt64,
    "committed_end": pl.UInt64,
    "reserved_end": pl.UInt64,
    "processor_affinity": pl.Int64,
    "is_ephemeral": pl.Boolean,
    "is_large": pl.Boolean,
}

Compression = Literal["snappy", "gzip", "brotli", "lz4", "zstd"]


class SnapshotStore:
    """
    Reads and writes the tables and manifest of a snapshot export.

    Tables are stored as Parquet with the configured compression; the
    manifest is always plain JSON so it stays human-readable.
    """

    def __init__(self, compression: Compression = "snappy"):
        self.compression = compression
        logger.debug(f"Initialized SnapshotStore with compression: {compression}")

    def save_dataframe(self, df: pl.DataFrame, path: Path) -> None:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
            logger.debug(f"Saved DataFrame with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: Path, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Load a table, optionally pruned to `columns`.
        """
        try:
            if columns:
                df = pl.read_parquet(path, columns=columns)
            else:
                df = pl.read_parquet(path)
            logger.debug(f"Loaded DataFrame with {len(df)} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to load DataFrame from {path}: {e}")
            raise

    def save_dict(self, data: Dict[str, Any], path: Path) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved manifest to {path}")

    def load_dict(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)


def frame_from_rows(rows: Iterable[Mapping[str, Any]], schema: Dict[str, Any]) -> pl.DataFrame:
    """Build a DataFrame with `schema` from row mappings; missing keys become null."""
    normalized = [{name: row.get(name) for name in schema} for row in rows]
    if not normalized:
        return pl.DataFrame(schema=schema)
    return pl.from_dicts(normalized, schema=schema)


def runtime_to_dict(runtime: RuntimeDescriptor) -> Dict[str, Any]:
    layout_data = None
    if runtime.layout_data is not None:
        layout_data = {
            "file_name": runtime.layout_data.file_name,
            "timestamp": runtime.layout_data.timestamp,
            "file_size": runtime.layout_data.file_size,
            "local_path": runtime.layout_data.local_path,
        }
    return {
        "version": runtime.version,
        "pointer_size": runtime.pointer_size,
        "server_gc": runtime.server_gc,
        "layout_data": layout_data,
    }


def write_snapshot(
    manifest_path: Path,
    runtimes: List[RuntimeDescriptor],
    objects: Iterable[Mapping[str, Any]],
    regions: Iterable[MemoryRegion] = (),
    segments: Iterable[HeapSegment] = (),
    can_walk_heap: bool = True,
    compression: Compression = "snappy",
) -> Path:
    """
    Write a complete snapshot export.

    Args:
        manifest_path: Where the JSON manifest goes; tables are written next to it.
        runtimes: Runtimes found in the captured process.
        objects: Row mappings with the OBJECTS_SCHEMA columns.
        regions: Memory regions of the runtime.
        segments: GC heap segments of the runtime.
        can_walk_heap: Whether the heap was captured in a walkable state.
        compression: Parquet compression for the tables.

    Returns:
        The manifest path.
    """
    manifest_path = Path(manifest_path)
    base_dir = manifest_path.parent
    store = SnapshotStore(compression)

    tables = {
        "objects": "objects.parquet",
        "regions": "regions.parquet",
        "segments": "segments.parquet",
    }
    store.save_dataframe(frame_from_rows(objects, OBJECTS_SCHEMA), base_dir / tables["objects"])
    store.save_dataframe(
        frame_from_rows((vars(r) for r in regions), REGIONS_SCHEMA),
        base_dir / tables["regions"],
    )
    store.save_dataframe(
        frame_from_rows((vars(s) for s in segments), SEGMENTS_SCHEMA),
        base_dir / tables["segments"],
    )

    store.save_dict(
        {
            "format_version": FORMAT_VERSION,
            "can_walk_heap": can_walk_heap,
            "runtimes": [runtime_to_dict(r) for r in runtimes],
            "tables": tables,
        },
        manifest_path,
    )
    logger.info(f"Wrote snapshot export to {manifest_path}")
    return manifest_path
