"""
Heap metadata reports.

Groupings over the runtime's memory regions and GC heap segments, shown to
the operator next to the string analysis. They do not look at object
contents.
"""

import logging
from typing import Dict, Iterable, List

from ..models.analysis import HeapRegionSummary, HeapSegmentSummary
from ..models.snapshot import HeapSegment, MemoryRegion

logger = logging.getLogger(__name__)

# Order of segment classes inside one heap.
SEGMENT_CLASS_ORDER = {"Ephemeral": 0, "Gen2": 1, "Large": 2}


def summarize_regions(regions: Iterable[MemoryRegion]) -> List[HeapRegionSummary]:
    """Group memory regions by type, largest total size first.

    Groups with equal totals keep the order in which their type was first
    seen.
    """
    totals: Dict[str, List[int]] = {}
    for region in regions:
        entry = totals.setdefault(region.type, [0, 0])
        entry[0] += region.size
        entry[1] += 1

    summaries = [
        HeapRegionSummary(type=region_type, count=count, total_size=total)
        for region_type, (total, count) in totals.items()
    ]
    summaries.sort(key=lambda summary: summary.total_size, reverse=True)
    logger.debug(f"Summarized memory regions into {len(summaries)} groups")
    return summaries


def summarize_segments(segments: Iterable[HeapSegment]) -> List[HeapSegmentSummary]:
    """Group GC segments by heap (processor affinity), in heap order.

    Inside each heap, segments are ordered Ephemeral, Gen2, Large, keeping
    enumeration order within a class.
    """
    by_heap: Dict[int, List[HeapSegment]] = {}
    for segment in segments:
        by_heap.setdefault(segment.processor_affinity, []).append(segment)

    summaries = []
    for heap in sorted(by_heap):
        members = sorted(
            by_heap[heap], key=lambda s: SEGMENT_CLASS_ORDER[s.segment_class]
        )
        summaries.append(
            HeapSegmentSummary(
                heap=heap,
                total_length=sum(s.length for s in members),
                segments=tuple(members),
            )
        )
    return summaries


def total_segment_length(summaries: Iterable[HeapSegmentSummary]) -> int:
    """Sum of in-use segment bytes across all heaps."""
    return sum(summary.total_length for summary in summaries)
