"""
Snapshot provider for Parquet heap exports.

Reads the manifest and tables written by `storage.write_snapshot` and exposes
them through the abstract provider interface.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import polars as pl

from ..errors import (
    ArchitectureMismatchError,
    RuntimeAttachError,
    SnapshotLoadError,
    SnapshotNotFoundError,
)
from ..models.snapshot import HeapSegment, LayoutDataInfo, MemoryRegion, RuntimeDescriptor
from ..system import analyzer_pointer_size
from .base import AttachedRuntime, ObjectType, Snapshot, SnapshotProvider
from .layout_data import layout_data_relative_path
from .storage import (
    FORMAT_VERSION,
    OBJECTS_SCHEMA,
    REGIONS_SCHEMA,
    SEGMENTS_SCHEMA,
    SnapshotStore,
)

logger = logging.getLogger(__name__)

# Instance fields of the legacy string layout and the columns holding them.
FIELD_COLUMNS = {
    "m_arrayLength": "array_length",
    "m_stringLength": "string_length",
}


class ParquetObjectType(ObjectType):
    """A type name seen in the objects table."""

    def __init__(self, name: str, is_string: bool, runtime: "ParquetAttachedRuntime"):
        self._name = name
        self._is_string = is_string
        self._runtime = runtime

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_string(self) -> bool:
        return self._is_string

    def get_value(self, address: int) -> str:
        return self._runtime._column_value("value", address)

    def get_size(self, address: int) -> int:
        return self._runtime._column_value("size", address)

    def get_field_value(self, address: int, field_name: str) -> int:
        column = FIELD_COLUMNS.get(field_name)
        if column is None:
            raise KeyError(field_name)
        value = self._runtime._column_value(column, address)
        if value is None:
            raise KeyError(field_name)
        return value

    def __repr__(self) -> str:
        return f"ParquetObjectType({self._name!r})"


class ParquetAttachedRuntime(AttachedRuntime):
    """
    Runtime view over the tables of one snapshot export.

    The objects table is loaded when the runtime is attached; region and
    segment tables are read on demand.
    """

    def __init__(
        self,
        snapshot: "ParquetSnapshot",
        descriptor: RuntimeDescriptor,
        layout_data_path: Optional[Path] = None,
    ):
        super().__init__(descriptor, layout_data_path)
        self._snapshot = snapshot
        objects = snapshot._load_table("objects", columns=list(OBJECTS_SCHEMA))
        duplicated = objects.filter(pl.col("address").is_duplicated())
        if len(duplicated):
            addresses = ", ".join(f"{a:x}" for a in duplicated["address"].unique().sort().head(5))
            raise SnapshotLoadError(
                f"Objects table of {snapshot.path} lists {len(duplicated):,} rows "
                f"with duplicate addresses (e.g. {addresses})"
            )
        self._columns: Dict[str, List[Any]] = {
            name: objects.get_column(name).to_list() for name in objects.columns
        }
        self._row_index: Optional[Dict[int, int]] = None
        self._types: Dict[str, ParquetObjectType] = {}
        logger.info(f"Attached runtime {descriptor.version} with {len(objects):,} heap objects")

    def can_walk_heap(self) -> bool:
        return self._snapshot.can_walk_heap

    def enumerate_object_addresses(self) -> Iterator[int]:
        yield from self._columns["address"]

    def resolve_type(self, address: int) -> Optional[ObjectType]:
        row = self._index().get(address)
        if row is None:
            return None
        type_name = self._columns["type_name"][row]
        if type_name is None:
            return None
        object_type = self._types.get(type_name)
        if object_type is None:
            is_string = bool(self._columns["is_string"][row])
            object_type = ParquetObjectType(type_name, is_string, self)
            self._types[type_name] = object_type
        return object_type

    def enumerate_memory_regions(self) -> Iterator[MemoryRegion]:
        for row in self._snapshot._load_table("regions").iter_rows(named=True):
            yield MemoryRegion(**row)

    def enumerate_heap_segments(self) -> Iterator[HeapSegment]:
        for row in self._snapshot._load_table("segments").iter_rows(named=True):
            yield HeapSegment(**row)

    def _index(self) -> Dict[int, int]:
        if self._row_index is None:
            self._row_index = {
                address: row for row, address in enumerate(self._columns["address"])
            }
        return self._row_index

    def _column_value(self, column: str, address: int) -> Any:
        return self._columns[column][self._index()[address]]


class ParquetSnapshot(Snapshot):
    """An opened snapshot export."""

    def __init__(self, path: Path, manifest: Dict[str, Any], pointer_size: int, store: SnapshotStore):
        super().__init__(path)
        self.manifest = manifest
        self.pointer_size = pointer_size
        self.store = store
        self.can_walk_heap = bool(manifest.get("can_walk_heap", True))
        self._runtimes = [
            _runtime_from_dict(entry, index)
            for index, entry in enumerate(manifest.get("runtimes", []))
        ]

    def list_runtimes(self) -> List[RuntimeDescriptor]:
        return list(self._runtimes)

    def attach_runtime(
        self, descriptor: RuntimeDescriptor, layout_data_path: Optional[Path] = None
    ) -> ParquetAttachedRuntime:
        if descriptor not in self._runtimes:
            raise RuntimeAttachError(
                f"Runtime {descriptor.version} is not part of snapshot {self.path}"
            )
        if descriptor.pointer_size != self.pointer_size:
            raise ArchitectureMismatchError(self.pointer_size, descriptor.pointer_size)
        if layout_data_path is not None:
            logger.info(f"Using layout data from {layout_data_path}")
        try:
            return ParquetAttachedRuntime(self, descriptor, layout_data_path)
        except SnapshotLoadError as e:
            raise RuntimeAttachError(f"Unable to load heap of runtime {descriptor.version}: {e}") from e

    def _load_table(self, table: str, columns: Optional[List[str]] = None) -> pl.DataFrame:
        file_name = self.manifest.get("tables", {}).get(table)
        if not file_name:
            if table == "objects":
                raise SnapshotLoadError(f"Snapshot {self.path} has no objects table")
            return pl.DataFrame(schema=REGIONS_SCHEMA if table == "regions" else SEGMENTS_SCHEMA)

        table_path = self.path.parent / file_name
        if not table_path.exists():
            raise SnapshotLoadError(f"Snapshot table {table_path} is missing")
        try:
            return self.store.load_dataframe(table_path, columns=columns)
        except Exception as e:
            raise SnapshotLoadError(f"Unable to read snapshot table {table_path}: {e}") from e


class ParquetSnapshotProvider(SnapshotProvider):
    """
    Opens Parquet snapshot exports.

    Args:
        pointer_size: Pointer width the analyzer runs with; defaults to the
            current interpreter's.
        symbol_store: Directory laid out like a symbol server from which
            layout data files can be copied.
    """

    def __init__(self, pointer_size: Optional[int] = None, symbol_store: Optional[Path] = None):
        self.pointer_size = pointer_size or analyzer_pointer_size()
        self.symbol_store = Path(symbol_store) if symbol_store else None
        self.store = SnapshotStore()

    def open_snapshot(self, path: Path) -> ParquetSnapshot:
        path = Path(path)
        if not path.is_file():
            raise SnapshotNotFoundError(path)

        try:
            manifest = self.store.load_dict(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotLoadError(f"Unable to read snapshot manifest {path}: {e}") from e

        if not isinstance(manifest, dict):
            raise SnapshotLoadError(f"Snapshot manifest {path} is not a JSON object")
        version = manifest.get("format_version")
        if version != FORMAT_VERSION:
            raise SnapshotLoadError(
                f"Unsupported snapshot format version {version!r} in {path} "
                f"(expected {FORMAT_VERSION})"
            )
        try:
            snapshot = ParquetSnapshot(path, manifest, self.pointer_size, self.store)
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotLoadError(f"Malformed runtime entry in {path}: {e}") from e

        logger.info(f"Opened snapshot {path} with {len(snapshot.list_runtimes())} runtime(s)")
        return snapshot

    def download_layout_data(
        self, descriptor: RuntimeDescriptor, destination: Path
    ) -> Optional[Path]:
        """Copy the runtime's layout data from the symbol store into `destination`."""
        if descriptor.layout_data is None:
            return None
        if self.symbol_store is None:
            logger.warning("No symbol store configured, cannot fetch layout data")
            return None

        source = self.symbol_store / layout_data_relative_path(descriptor.layout_data)
        if not source.is_file():
            logger.warning(f"Layout data not found in symbol store: {source}")
            return None

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        logger.info(f"Copied layout data from {source} to {destination}")
        return destination


def _runtime_from_dict(entry: Dict[str, Any], index: int) -> RuntimeDescriptor:
    layout_data = entry.get("layout_data")
    return RuntimeDescriptor(
        version=str(entry["version"]),
        pointer_size=int(entry["pointer_size"]),
        server_gc=bool(entry.get("server_gc", False)),
        layout_data=LayoutDataInfo(
            file_name=layout_data["file_name"],
            timestamp=int(layout_data["timestamp"]),
            file_size=int(layout_data["file_size"]),
            local_path=layout_data.get("local_path"),
        ) if layout_data else None,
        index=index,
    )
