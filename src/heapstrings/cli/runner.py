"""
Snapshot analysis runner for CLI integration.

This module wires the snapshot provider, layout-data lookup, the metadata
reports and the heap walk together for one snapshot file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from ..analysis import WalkOrchestrator, summarize_regions, summarize_segments
from ..errors import RuntimeAttachError
from ..models.analysis import WalkResult
from ..models.config import AnalyzerConfig
from ..report import (
    ConsoleReportRenderer,
    format_region_report,
    format_segment_report,
)
from ..snapshot import ParquetSnapshotProvider, SnapshotProvider, acquire_layout_data
from ..snapshot.base import AttachedRuntime
from ..snapshot.layout_data import Confirm

logger = logging.getLogger(__name__)


class SnapshotAnalysis:
    """
    Runs the complete analysis of one snapshot file.

    Attach-time failures propagate to the caller as AnalyzerError subclasses;
    anything found while walking individual objects ends up in the report.
    """

    def __init__(
        self,
        snapshot_path: Path,
        config: AnalyzerConfig,
        show_gc_info: bool = False,
        provider: Optional[SnapshotProvider] = None,
        stream: Optional[TextIO] = None,
        confirm: Optional[Confirm] = None,
    ):
        """
        Args:
            snapshot_path: Snapshot manifest to analyze
            config: Validated analyzer configuration
            show_gc_info: Also print the region and GC segment reports
            provider: Snapshot provider; defaults to the Parquet export provider
            stream: Where the report is written; defaults to stdout
            confirm: Operator confirmation for layout data downloads
        """
        self.snapshot_path = Path(snapshot_path)
        self.config = config
        self.show_gc_info = show_gc_info
        self.provider = provider or ParquetSnapshotProvider(
            symbol_store=config.layout_data.symbol_store
        )
        self.stream = stream
        self.confirm = confirm

    @property
    def out(self) -> TextIO:
        return self.stream or sys.stdout

    def run(self) -> WalkResult:
        """
        Open the snapshot, attach its first runtime and analyze the heap.

        Raises:
            SnapshotNotFoundError, SnapshotLoadError: The snapshot can't be opened.
            RuntimeAttachError: No runtime, or the runtime can't be attached.
            HeapUnwalkableError: The heap cannot be walked.
        """
        with self.provider.open_snapshot(self.snapshot_path) as snapshot:
            runtimes = snapshot.list_runtimes()
            if not runtimes:
                raise RuntimeAttachError(f"No managed runtime found in {self.snapshot_path}")

            for descriptor in runtimes:
                self.out.write(f"Found runtime version: {descriptor.version}\n")

            # Only the first runtime is analyzed
            descriptor = runtimes[0]
            if len(runtimes) > 1:
                logger.warning(
                    f"Snapshot contains {len(runtimes)} runtimes, analyzing only {descriptor.version}"
                )
            layout_data_path = acquire_layout_data(
                descriptor, self.provider, self.config.layout_data, confirm=self.confirm
            )
            runtime = snapshot.attach_runtime(descriptor, layout_data_path)

            if self.show_gc_info:
                self._print_heap_metadata(runtime)

            orchestrator = WalkOrchestrator(
                runtime,
                renderer=ConsoleReportRenderer(self.config.report, self.out),
            )
            return orchestrator.run()

    def _print_heap_metadata(self, runtime: AttachedRuntime) -> None:
        regions = summarize_regions(runtime.enumerate_memory_regions())
        segments = summarize_segments(runtime.enumerate_heap_segments())
        self.out.write("\n")
        self.out.write(format_region_report(regions))
        self.out.write("\n")
        self.out.write(format_segment_report(segments, runtime.server_gc))
