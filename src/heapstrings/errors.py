"""
Error taxonomy for snapshot analysis.

Fatal errors (usage, missing snapshot, attach failures, unwalkable heap) are
raised and abort the run before or instead of the heap walk. Findings made
while walking individual objects are never raised: corrupt objects are
skipped, layout mismatches become `LayoutDiagnostic` records, and category
total mismatches are recorded as `ConsistencyError` instances.
"""

from typing import Optional


class AnalyzerError(Exception):
    """
    Base class for all heapstrings errors.

    `exit_code` is the process status the command line exits with, and
    `operator_message` the text printed for the operator (None prints nothing
    beyond the log record).
    """

    exit_code = 1

    @property
    def operator_message(self) -> Optional[str]:
        return str(self)


class UsageError(AnalyzerError):
    """Bad or missing command-line arguments."""

    exit_code = 2


class SnapshotNotFoundError(AnalyzerError, FileNotFoundError):
    """The snapshot file does not exist."""

    def __init__(self, path):
        super().__init__(f"{path} - does not exist!")
        self.path = path


class SnapshotLoadError(AnalyzerError):
    """The snapshot exists but could not be opened or parsed."""


class RuntimeAttachError(AnalyzerError):
    """The managed runtime inside the snapshot could not be attached."""

    @property
    def operator_message(self) -> Optional[str]:
        return "Unable to process the memory snapshot!?"


class ArchitectureMismatchError(RuntimeAttachError):
    """
    The analyzer and the snapshot use different pointer widths.

    A 64-bit analyzer cannot read a 32-bit snapshot's heap and vice versa, so
    the message carries the remediation the operator needs.
    """

    def __init__(self, analyzer_pointer_size: int, snapshot_pointer_size: int):
        self.analyzer_pointer_size = analyzer_pointer_size
        self.snapshot_pointer_size = snapshot_pointer_size
        super().__init__(
            f"snapshot was captured from a {snapshot_pointer_size * 8}-bit process "
            f"but the analyzer is running as {analyzer_pointer_size * 8}-bit"
        )

    @property
    def remediation(self) -> str:
        return (
            "Ensure that the analyzer runs with the same architecture as the "
            "memory snapshot (i.e. 32-bit or 64-bit).\n"
            f"The analyzer is currently running as "
            f"{self.analyzer_pointer_size * 8}-bit"
        )

    @property
    def operator_message(self) -> Optional[str]:
        return self.remediation


class HeapUnwalkableError(AnalyzerError):
    """The provider reports that the managed heap cannot be walked."""

    def __init__(self, message: str = "Cannot walk the heap!"):
        super().__init__(message)


class ConsistencyError(AnalyzerError):
    """
    Internal bookkeeping disagreed with itself.

    Recorded (not raised) by the classifier and the accountant; any recorded
    instance marks the final report as unreliable.
    """

    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.address = address

    @property
    def operator_message(self) -> Optional[str]:
        return None
