"""
Defines the abstract snapshot provider interface.

This module provides the contract the analysis core consumes:
- SnapshotProvider: opens a snapshot file and fetches debug-layout data.
- Snapshot: an open snapshot, listing and attaching its managed runtimes.
- AttachedRuntime: a runtime whose heap and metadata can be enumerated.
- ObjectType: the resolved type of one heap object.

Concrete providers (see parquet_provider) implement these classes; the heap
walk only ever talks to the abstract interface.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, List, Optional

from ..models.snapshot import HeapSegment, MemoryRegion, RuntimeDescriptor

logger = logging.getLogger(__name__)


class ObjectType(ABC):
    """Type information for objects on the managed heap."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def is_string(self) -> bool:
        """Whether objects of this type are runtime strings."""
        pass

    @abstractmethod
    def get_value(self, address: int) -> str:
        """Return the text content of the string object at `address`."""
        pass

    @abstractmethod
    def get_size(self, address: int) -> int:
        """Return the object's reported size in bytes, header included."""
        pass

    @abstractmethod
    def get_field_value(self, address: int, field_name: str) -> int:
        """
        Read an integer instance field of the object at `address`.

        Raises:
            KeyError: If the type has no field called `field_name`.
        """
        pass


class AttachedRuntime(ABC):
    """A managed runtime attached from a snapshot."""

    def __init__(self, descriptor: RuntimeDescriptor, layout_data_path: Optional[Path] = None):
        self.descriptor = descriptor
        self.layout_data_path = layout_data_path

    @property
    def server_gc(self) -> bool:
        return self.descriptor.server_gc

    @abstractmethod
    def can_walk_heap(self) -> bool:
        pass

    @abstractmethod
    def enumerate_object_addresses(self) -> Iterator[int]:
        """
        Yield the address of every object on the heap.

        The sequence is finite and can be consumed only once.
        """
        pass

    @abstractmethod
    def resolve_type(self, address: int) -> Optional[ObjectType]:
        """Return the object's type, or None if it cannot be resolved (corruption)."""
        pass

    @abstractmethod
    def enumerate_memory_regions(self) -> Iterator[MemoryRegion]:
        pass

    @abstractmethod
    def enumerate_heap_segments(self) -> Iterator[HeapSegment]:
        pass


class Snapshot(ABC):
    """An opened snapshot. Usable as a context manager."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @abstractmethod
    def list_runtimes(self) -> List[RuntimeDescriptor]:
        pass

    @abstractmethod
    def attach_runtime(
        self, descriptor: RuntimeDescriptor, layout_data_path: Optional[Path] = None
    ) -> AttachedRuntime:
        """
        Attach one of this snapshot's runtimes.

        Raises:
            ArchitectureMismatchError: Pointer width differs from the analyzer's.
            RuntimeAttachError: The runtime cannot be attached for any other reason.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the snapshot."""
        pass

    def __enter__(self) -> "Snapshot":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class SnapshotProvider(ABC):
    """Entry point for a snapshot file format."""

    @abstractmethod
    def open_snapshot(self, path: Path) -> Snapshot:
        """
        Open a snapshot file.

        Raises:
            SnapshotNotFoundError: The file does not exist.
            SnapshotLoadError: The file cannot be read as a snapshot.
        """
        pass

    def download_layout_data(
        self, descriptor: RuntimeDescriptor, destination: Path
    ) -> Optional[Path]:
        """
        Fetch the runtime's debug-layout data into `destination`.

        Returns:
            The path of the fetched file, or None if it could not be fetched.
            The default implementation fetches nothing.
        """
        logger.info(f"{self.__class__.__name__} cannot fetch layout data")
        return None
