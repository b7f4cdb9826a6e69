"""
String classification utilities for the heapstrings package.

This module determines the narrowest lossless encoding for each string
observed on the managed heap.
"""

from .classifier import (
    attempt_encode,
    classify_text,
    encode_wide,
    raw_utf16_length,
)

__all__ = [
    "attempt_encode",
    "classify_text",
    "encode_wide",
    "raw_utf16_length",
]
