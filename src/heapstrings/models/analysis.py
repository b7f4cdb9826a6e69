"""
Analysis data models.

This module defines the values flowing through the string pipeline: the
per-object observation, its classification, the per-category aggregates, the
layout diagnostics and the final compression projection. It also holds the
derived summaries produced by the region and segment reporters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..errors import ConsistencyError
from .snapshot import HeapSegment


class EncodingCategory(Enum):
    """Narrowest lossless encoding a string could be stored in."""
    ASCII = "ascii"
    LATIN1 = "latin1"
    WIDE = "wide"

    @property
    def compressible(self) -> bool:
        return self is not EncodingCategory.WIDE


@dataclass(frozen=True)
class StringObservation:
    """
    One live string object seen during the heap walk.

    Created per object and dropped as soon as it has been folded into the
    accountant.
    """

    address: int
    text: str
    # Footprint the runtime reports for the whole object, header included.
    reported_size: int
    # Length of the character payload stored as UTF-16 (two bytes per unit).
    raw_length: int


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying one string.

    `encoded` holds the bytes the text would occupy in the chosen category's
    encoding; for WIDE that is the UTF-16 payload itself.
    """

    category: EncodingCategory
    encoded: bytes
    # Set when the text passed the ASCII check but could not be re-encoded
    # as Latin-1; the classification then falls back to WIDE.
    anomaly: Optional[str] = None

    @property
    def compressed_length(self) -> int:
        return len(self.encoded)


@dataclass
class CategoryAggregate:
    """Running count and raw UTF-16 byte total for one encoding category."""

    count: int = 0
    raw_bytes: int = 0


@dataclass(frozen=True)
class LayoutDiagnostic:
    """
    A string object whose reported size disagrees with the expected layout.
    """

    address: int
    expected_size: int
    reported_size: int
    # Layout variant name the expectation was computed for.
    layout: str
    raw_length: int
    array_length: Optional[int] = None
    string_length: Optional[int] = None
    text: str = ""

    @property
    def address_hex(self) -> str:
        return f"{self.address:x}"


@dataclass(frozen=True)
class CompressionProjection:
    """
    Final, read-only view of the accountant after the walk.
    """

    object_count: int
    total_reported_size: int
    total_raw_bytes: int
    categories: Dict[EncodingCategory, CategoryAggregate]
    compressed_total: int
    uncompressed_total: int
    residual_overhead: int
    average_overhead_per_object: float
    # One selector byte per object records which encoding it uses.
    selector_bytes: int
    projected_total: int
    projected_savings: int
    consistency_errors: Tuple[ConsistencyError, ...] = ()

    @property
    def category_bytes_total(self) -> int:
        return sum(aggregate.raw_bytes for aggregate in self.categories.values())

    @property
    def reliable(self) -> bool:
        return not self.consistency_errors


@dataclass
class WalkResult:
    """
    Everything the heap walk produced, returned explicitly to the caller.
    """

    # Set once the walk has finished.
    projection: Optional[CompressionProjection] = None
    diagnostics: List[LayoutDiagnostic] = field(default_factory=list)
    objects_seen: int = 0
    corrupt_objects: int = 0
    non_string_objects: int = 0


@dataclass(frozen=True)
class HeapRegionSummary:
    """Memory regions of one type, summed."""

    type: str
    count: int
    total_size: int


@dataclass(frozen=True)
class HeapSegmentSummary:
    """
    GC segments owned by one heap (processor affinity), summed.

    `segments` is ordered Ephemeral, Gen2, Large.
    """

    heap: int
    total_length: int
    segments: Tuple[HeapSegment, ...] = ()

    @property
    def count(self) -> int:
        return len(self.segments)
