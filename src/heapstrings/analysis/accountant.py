"""
Compression accounting.

The accountant folds one classified string at a time into running totals and,
once the walk is over, projects how much memory the strings would need if
every string were stored in its narrowest encoding.
"""

import logging
from typing import Dict, List

from ..errors import ConsistencyError
from ..models.analysis import (
    CategoryAggregate,
    Classification,
    CompressionProjection,
    EncodingCategory,
    StringObservation,
)

logger = logging.getLogger(__name__)

# Extra storage each string needs to record which encoding it uses.
SELECTOR_BYTES_PER_OBJECT = 1


class CompressionAccountant:
    """
    Running totals for one heap walk.

    A fresh accountant is created per walk and handed back to the caller with
    the walk result; nothing is shared between runs.
    """

    def __init__(self):
        self.categories: Dict[EncodingCategory, CategoryAggregate] = {
            category: CategoryAggregate() for category in EncodingCategory
        }
        self.object_count = 0
        self.total_raw_bytes = 0
        self.total_reported_size = 0
        self.compressed_total = 0
        self.uncompressed_total = 0
        self.consistency_errors: List[ConsistencyError] = []

    def record(self, observation: StringObservation, classification: Classification) -> None:
        """Fold one observation and its classification into the totals."""
        self.object_count += 1
        self.total_raw_bytes += observation.raw_length
        self.total_reported_size += observation.reported_size

        aggregate = self.categories[classification.category]
        aggregate.count += 1
        aggregate.raw_bytes += observation.raw_length

        if classification.category.compressible:
            self.compressed_total += classification.compressed_length
        else:
            self.uncompressed_total += observation.raw_length

        if classification.anomaly is not None:
            self.consistency_errors.append(
                ConsistencyError(classification.anomaly, address=observation.address)
            )

    def finalize(self) -> CompressionProjection:
        """Compute the savings projection from the current totals.

        The per-category byte totals are checked against the global raw byte
        total; a difference is recorded as a ConsistencyError and the
        projection is still returned, marked unreliable.
        """
        category_total = sum(a.raw_bytes for a in self.categories.values())
        errors = list(self.consistency_errors)
        if category_total != self.total_raw_bytes:
            error = ConsistencyError(
                f"Category byte totals ({category_total:,}) do not match "
                f"the raw byte total ({self.total_raw_bytes:,})"
            )
            logger.error(str(error))
            errors.append(error)

        residual_overhead = self.total_reported_size - self.total_raw_bytes
        if self.object_count:
            average_overhead = residual_overhead / self.object_count
        else:
            average_overhead = 0.0

        selector_bytes = self.object_count * SELECTOR_BYTES_PER_OBJECT
        projected_total = self.compressed_total + self.uncompressed_total + selector_bytes

        return CompressionProjection(
            object_count=self.object_count,
            total_reported_size=self.total_reported_size,
            total_raw_bytes=self.total_raw_bytes,
            categories={
                category: CategoryAggregate(a.count, a.raw_bytes)
                for category, a in self.categories.items()
            },
            compressed_total=self.compressed_total,
            uncompressed_total=self.uncompressed_total,
            residual_overhead=residual_overhead,
            average_overhead_per_object=average_overhead,
            selector_bytes=selector_bytes,
            projected_total=projected_total,
            projected_savings=self.total_raw_bytes - projected_total,
            consistency_errors=tuple(errors),
        )
