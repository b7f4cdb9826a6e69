"""
Snapshot-side data models.

These structures describe what a snapshot provider surfaces about the
captured process: the managed runtimes it contains, their debug-layout data,
and the region/segment metadata used by the supplementary reports.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LayoutDataInfo:
    """
    Identity of the debug-layout data file matching a runtime build.

    The (file_name, timestamp, file_size) triple is the symbol-server key.
    """

    file_name: str
    timestamp: int
    file_size: int
    # Path of a matching copy already present on the analysis machine, if any.
    local_path: Optional[str] = None


@dataclass(frozen=True)
class RuntimeDescriptor:
    """
    A managed runtime found inside a snapshot.
    """

    # Dotted version string, e.g. "4.8.4084.0".
    version: str
    # Pointer width of the captured process in bytes (4 or 8).
    pointer_size: int
    # Whether the runtime used the server garbage collector.
    server_gc: bool = False
    layout_data: Optional[LayoutDataInfo] = None
    # Position of the runtime inside the snapshot's runtime list.
    index: int = 0

    @property
    def major_version(self) -> int:
        head = self.version.split(".", 1)[0]
        try:
            return int(head)
        except ValueError:
            return 0


@dataclass(frozen=True)
class MemoryRegion:
    """A runtime-owned memory region (loader heap, GC segment, ...)."""

    address: int
    size: int
    type: str


@dataclass(frozen=True)
class HeapSegment:
    """
    One garbage-collector heap segment.

    `start`/`end` bound the in-use part; `committed_end` and `reserved_end`
    bound the committed and reserved address ranges.
    """

    start: int
    end: int
    committed_end: int
    reserved_end: int
    processor_affinity: int
    is_ephemeral: bool = False
    is_large: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def committed(self) -> int:
        return self.committed_end - self.start

    @property
    def reserved(self) -> int:
        return self.reserved_end - self.start

    @property
    def segment_class(self) -> str:
        if self.is_ephemeral:
            return "Ephemeral"
        if self.is_large:
            return "Large"
        return "Gen2"
