"""
String object layout verification.

Each string object's reported size is checked against the size its layout
predicts. A mismatch points at heap corruption or at a runtime whose string
layout this analyzer does not understand. Mismatches are recorded as
diagnostics and never stop the heap walk.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..models.analysis import LayoutDiagnostic
from ..models.snapshot import RuntimeDescriptor

logger = logging.getLogger(__name__)

# Bytes of a string object that are not character data (method table
# pointer, sync block, length field, terminator), by pointer width.
HEADER_SIZES = {8: 26, 4: 14}


@dataclass(frozen=True)
class ModernLayout:
    """Length-prefixed layout: size = payload + header."""

    name: str = "modern"


@dataclass(frozen=True)
class LegacyLayout:
    """
    Layout of the 2.x runtimes, where strings carried a separate capacity.

    The expected size is derived from the capacity field, read from each
    object by field name.
    """

    array_length_field: str = "m_arrayLength"
    string_length_field: str = "m_stringLength"
    name: str = "legacy"


StringLayout = Union[ModernLayout, LegacyLayout]


def header_size_for(pointer_size: int) -> int:
    """Return the fixed string header size for a pointer width in bytes."""
    try:
        return HEADER_SIZES[pointer_size]
    except KeyError:
        raise ValueError(f"Unsupported pointer size: {pointer_size}") from None


def select_layout(runtime: RuntimeDescriptor) -> StringLayout:
    """Pick the string layout for a runtime from its version, once per run."""
    if runtime.major_version == 2:
        logger.info(f"Runtime {runtime.version} uses the legacy string layout")
        return LegacyLayout()
    return ModernLayout()


def expected_size(
    layout: StringLayout,
    raw_length: int,
    header_size: int,
    array_length: Optional[int] = None,
) -> int:
    """Compute the object size a string should report under `layout`.

    Args:
        layout: The layout variant selected for the runtime.
        raw_length: UTF-16 byte length of the string's characters.
        header_size: Fixed header size for the process pointer width.
        array_length: Value of the legacy capacity field; required for
            LegacyLayout and ignored otherwise.

    Returns:
        Expected object size in bytes.
    """
    if isinstance(layout, LegacyLayout):
        if array_length is None:
            raise ValueError("LegacyLayout requires the array length field value")
        return (array_length - 1) * 2 + header_size
    return raw_length + header_size


def verify_object_size(
    layout: StringLayout,
    address: int,
    reported_size: int,
    raw_length: int,
    header_size: int,
    array_length: Optional[int] = None,
    string_length: Optional[int] = None,
    text: str = "",
) -> Optional[LayoutDiagnostic]:
    """Cross-check a string object's reported size.

    Returns:
        None when the size matches, otherwise a LayoutDiagnostic describing
        the object and the values the expectation was computed from.
    """
    expected = expected_size(layout, raw_length, header_size, array_length)
    if reported_size == expected:
        return None

    diagnostic = LayoutDiagnostic(
        address=address,
        expected_size=expected,
        reported_size=reported_size,
        layout=layout.name,
        raw_length=raw_length,
        array_length=array_length,
        string_length=string_length,
        text=text,
    )
    logger.warning(
        f"Object size mismatch at {diagnostic.address_hex}: "
        f"expected {expected}, reported {reported_size} ({layout.name} layout)"
    )
    return diagnostic
