"""
Facts about the analyzer process itself.
"""

import sys


def analyzer_pointer_size() -> int:
    """Pointer width of the running interpreter in bytes (8 or 4)."""
    return 8 if sys.maxsize > 2**32 else 4


def analyzer_bitness() -> int:
    return analyzer_pointer_size() * 8
