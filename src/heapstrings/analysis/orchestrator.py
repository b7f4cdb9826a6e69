"""
Heap walk orchestration.

This module drives the single sequential pass over every object of an
attached runtime. String objects are classified, their layout is verified,
and the classification is folded into a CompressionAccountant. Everything
the pass produces is returned as a WalkResult.
"""

import logging
from typing import Callable, Optional

from ..classification import classify_text, raw_utf16_length
from ..errors import HeapUnwalkableError
from ..models.analysis import StringObservation, WalkResult
from ..snapshot.base import AttachedRuntime, ObjectType
from ..system import analyzer_pointer_size
from ..validation import ErrorSeverity, handle_error
from .accountant import CompressionAccountant
from .verifier import (
    LegacyLayout,
    StringLayout,
    header_size_for,
    select_layout,
    verify_object_size,
)

logger = logging.getLogger(__name__)

ReportRenderer = Callable[[WalkResult], None]


class WalkOrchestrator:
    """
    Runs the string analysis over one attached runtime.

    The string layout and header size are fixed when the orchestrator is
    created and used unchanged for every object of the walk.
    """

    def __init__(
        self,
        runtime: AttachedRuntime,
        header_size: Optional[int] = None,
        layout: Optional[StringLayout] = None,
        renderer: Optional[ReportRenderer] = None,
    ):
        """
        Args:
            runtime: The attached runtime whose heap is walked.
            header_size: String header size; defaults to the value for the
                analyzer's own pointer width.
            layout: String layout variant; defaults to the one matching the
                runtime version.
            renderer: Called with the WalkResult once the walk is complete.
        """
        self.runtime = runtime
        self.header_size = (
            header_size if header_size is not None
            else header_size_for(analyzer_pointer_size())
        )
        self.layout = layout if layout is not None else select_layout(runtime.descriptor)
        self.renderer = renderer

    def run(self) -> WalkResult:
        """Walk the heap, then hand the result to the renderer."""
        result = self.walk()
        if self.renderer is not None:
            self.renderer(result)
        return result

    def walk(self) -> WalkResult:
        """
        Perform the heap pass.

        Returns:
            WalkResult with the finalized projection and all diagnostics.

        Raises:
            HeapUnwalkableError: If the runtime reports its heap cannot be walked.
        """
        if not self.runtime.can_walk_heap():
            raise HeapUnwalkableError()

        logger.info(
            f"Walking heap of runtime {self.runtime.descriptor.version} "
            f"({self.layout.name} layout, header size {self.header_size})"
        )
        accountant = CompressionAccountant()
        result = WalkResult()

        for address in self.runtime.enumerate_object_addresses():
            result.objects_seen += 1
            try:
                object_type = self.runtime.resolve_type(address)
                if object_type is not None and not object_type.is_string:
                    result.non_string_objects += 1
                    continue
                observation = self._observe(object_type, address)
                diagnostic = None
                if observation is not None:
                    diagnostic = self._verify(object_type, observation)
            except Exception as e:
                # A provider failure on one object only costs that object
                handle_error(
                    e,
                    f"reading heap object {address:x}",
                    severity=ErrorSeverity.DEBUG,
                    reraise=False,
                    logger=logger,
                )
                observation = None

            if observation is None:
                result.corrupt_objects += 1
                continue
            if diagnostic is not None:
                result.diagnostics.append(diagnostic)
            accountant.record(observation, classify_text(observation.text))

        result.projection = accountant.finalize()
        logger.info(
            f"Walk complete: {result.objects_seen:,} objects, "
            f"{result.projection.object_count:,} strings, "
            f"{result.corrupt_objects:,} skipped as corrupt"
        )
        return result

    def _observe(
        self, object_type: Optional[ObjectType], address: int
    ) -> Optional[StringObservation]:
        """Read one string object, or return None if it is corrupt."""
        # Heap corruption: skip past this object
        if object_type is None:
            logger.debug(f"Could not resolve type of object {address:x}, skipping")
            return None

        text = object_type.get_value(address)
        if not isinstance(text, str):
            logger.debug(f"String object {address:x} has no value, skipping")
            return None

        size = object_type.get_size(address)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            logger.debug(f"String object {address:x} reports size {size!r}, skipping")
            return None

        return StringObservation(
            address=address,
            text=text,
            reported_size=size,
            raw_length=raw_utf16_length(text),
        )

    def _verify(self, object_type: ObjectType, observation: StringObservation):
        array_length = string_length = None
        if isinstance(self.layout, LegacyLayout):
            try:
                array_length = object_type.get_field_value(
                    observation.address, self.layout.array_length_field
                )
                string_length = object_type.get_field_value(
                    observation.address, self.layout.string_length_field
                )
            except KeyError as e:
                logger.warning(
                    f"Cannot verify layout of {observation.address:x}: missing field {e}"
                )
                return None

        return verify_object_size(
            self.layout,
            address=observation.address,
            reported_size=observation.reported_size,
            raw_length=observation.raw_length,
            header_size=self.header_size,
            array_length=array_length,
            string_length=string_length,
            text=observation.text,
        )
