"""
Pytest configuration and shared fixtures for the heapstrings test suite.

This module provides common fixtures, an in-memory fake runtime and helpers
for writing Parquet snapshot exports.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pytest

import sys

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from heapstrings.classification import raw_utf16_length  # noqa: E402
from heapstrings.models.snapshot import (  # noqa: E402
    HeapSegment,
    LayoutDataInfo,
    MemoryRegion,
    RuntimeDescriptor,
)
from heapstrings.snapshot.base import AttachedRuntime, ObjectType  # noqa: E402
from heapstrings.system import analyzer_pointer_size  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Fake runtime
# ============================================================================


class FakeObjectType(ObjectType):
    """ObjectType backed by the row dictionaries of a FakeRuntime."""

    def __init__(self, name: str, is_string: bool, rows: Dict[int, Dict[str, Any]]):
        self._name = name
        self._is_string = is_string
        self._rows = rows

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_string(self) -> bool:
        return self._is_string

    def get_value(self, address: int) -> str:
        return self._rows[address]["value"]

    def get_size(self, address: int) -> int:
        return self._rows[address]["size"]

    def get_field_value(self, address: int, field_name: str) -> int:
        column = {"m_arrayLength": "array_length", "m_stringLength": "string_length"}.get(field_name)
        value = self._rows[address].get(column) if column else None
        if value is None:
            raise KeyError(field_name)
        return value


class FakeRuntime(AttachedRuntime):
    """
    In-memory AttachedRuntime.

    Rows use the same keys as the Parquet objects table. The address sequence
    can be consumed only once, like a real heap walk.
    """

    def __init__(
        self,
        rows: List[Dict[str, Any]],
        descriptor: Optional[RuntimeDescriptor] = None,
        can_walk: bool = True,
        regions: Iterable[MemoryRegion] = (),
        segments: Iterable[HeapSegment] = (),
    ):
        super().__init__(descriptor or RuntimeDescriptor(version="4.8.4084.0", pointer_size=8))
        self._rows = {row["address"]: row for row in rows}
        self._order = [row["address"] for row in rows]
        self._can_walk = can_walk
        self._regions = list(regions)
        self._segments = list(segments)
        self.enumerations = 0

    def can_walk_heap(self) -> bool:
        return self._can_walk

    def enumerate_object_addresses(self) -> Iterator[int]:
        self.enumerations += 1
        if self.enumerations > 1:
            raise RuntimeError("object addresses enumerated twice")
        return iter(self._order)

    def resolve_type(self, address: int) -> Optional[ObjectType]:
        row = self._rows.get(address)
        if row is None or row.get("type_name") is None:
            return None
        return FakeObjectType(row["type_name"], row.get("is_string", False), self._rows)

    def enumerate_memory_regions(self) -> Iterator[MemoryRegion]:
        return iter(self._regions)

    def enumerate_heap_segments(self) -> Iterator[HeapSegment]:
        return iter(self._segments)


def string_row(address: int, text: str, header_size: int = 26, size_delta: int = 0, **extra) -> Dict[str, Any]:
    """Objects-table row for a string whose size matches the modern layout (plus `size_delta`)."""
    row = {
        "address": address,
        "type_name": "System.String",
        "is_string": True,
        "value": text,
        "size": raw_utf16_length(text) + header_size + size_delta,
    }
    row.update(extra)
    return row


def object_row(address: int, type_name: Optional[str] = "System.Object", size: int = 24) -> Dict[str, Any]:
    """Objects-table row for a non-string object; type_name None marks corruption."""
    return {
        "address": address,
        "type_name": type_name,
        "is_string": False,
        "value": None,
        "size": size,
    }


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def make_runtime():
    """Factory for FakeRuntime instances."""
    return FakeRuntime


@pytest.fixture
def sample_rows():
    """The hi / café / 日本語 scenario with a 64-bit header."""
    return [
        string_row(0x1000, "hi"),
        string_row(0x1020, "café"),
        string_row(0x1040, "日本語"),
    ]


@pytest.fixture
def sample_regions():
    return [
        MemoryRegion(address=0x10000, size=4 * 1024 * 1024, type="GCSegment"),
        MemoryRegion(address=0x20000, size=1024 * 1024, type="LowFrequencyLoaderHeap"),
        MemoryRegion(address=0x30000, size=2 * 1024 * 1024, type="GCSegment"),
        MemoryRegion(address=0x40000, size=3 * 1024 * 1024, type="HighFrequencyLoaderHeap"),
    ]


@pytest.fixture
def sample_segments():
    mb = 1024 * 1024
    return [
        HeapSegment(start=0, end=8 * mb, committed_end=9 * mb, reserved_end=16 * mb,
                    processor_affinity=1, is_large=True),
        HeapSegment(start=0, end=2 * mb, committed_end=3 * mb, reserved_end=4 * mb,
                    processor_affinity=0),
        HeapSegment(start=0, end=1 * mb, committed_end=2 * mb, reserved_end=4 * mb,
                    processor_affinity=0, is_ephemeral=True),
        HeapSegment(start=0, end=5 * mb, committed_end=5 * mb, reserved_end=8 * mb,
                    processor_affinity=0, is_large=True),
        HeapSegment(start=0, end=3 * mb, committed_end=3 * mb, reserved_end=4 * mb,
                    processor_affinity=1, is_ephemeral=True),
    ]


@pytest.fixture
def native_runtime_descriptor():
    """A runtime descriptor matching the pointer width of the test process."""
    return RuntimeDescriptor(
        version="4.8.4084.0",
        pointer_size=analyzer_pointer_size(),
        layout_data=LayoutDataInfo(
            file_name="mscordacwks.dll", timestamp=0x52717F9A, file_size=0x96B000
        ),
    )


@pytest.fixture
def snapshot_factory(temp_dir, native_runtime_descriptor):
    """Write a Parquet snapshot export and return its manifest path."""
    from heapstrings.snapshot.storage import write_snapshot

    def _write(
        rows: Iterable[Dict[str, Any]],
        runtimes: Optional[List[RuntimeDescriptor]] = None,
        regions: Iterable[MemoryRegion] = (),
        segments: Iterable[HeapSegment] = (),
        can_walk_heap: bool = True,
        name: str = "snapshot",
    ) -> Path:
        return write_snapshot(
            temp_dir / name / "snapshot.json",
            runtimes if runtimes is not None else [native_runtime_descriptor],
            rows,
            regions=regions,
            segments=segments,
            can_walk_heap=can_walk_heap,
        )

    return _write


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    yield

    from heapstrings.config import DEFAULT_CONFIG_FILE_PATH, clear_config_cache, set_config_path

    set_config_path(DEFAULT_CONFIG_FILE_PATH)
    clear_config_cache()
