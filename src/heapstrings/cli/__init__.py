"""
Command-line interface for the heapstrings package.
"""

from .main import main_cli
from .runner import SnapshotAnalysis

__all__ = [
    "main_cli",
    "SnapshotAnalysis",
]
