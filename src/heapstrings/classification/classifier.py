"""
String encoding classification.

This module decides, for a single string value, the narrowest encoding that
can hold it without loss. Categories are tried first-fit in the order ASCII,
ISO-8859-1 (Latin-1), and finally the two-byte-per-unit UTF-16 form the
runtime already uses ("wide"), which always fits.
"""

import logging
from typing import Optional

from ..models.analysis import Classification, EncodingCategory

logger = logging.getLogger(__name__)

ASCII_CODEC = "ascii"
LATIN1_CODEC = "latin-1"
# Runtime strings are sequences of UTF-16 code units. Unpaired surrogates are
# legal there, so they are passed through rather than rejected.
WIDE_CODEC = "utf-16-le"
WIDE_ERRORS = "surrogatepass"


def attempt_encode(text: str, codec: str) -> Optional[bytes]:
    """Encode `text` strictly, returning None instead of raising when it does not fit.

    Args:
        text: The string to encode.
        codec: A Python codec name, e.g. 'ascii' or 'latin-1'.

    Returns:
        The encoded bytes, or None if any character cannot be represented.
        Replacement characters are never substituted.

    Examples:
        >>> attempt_encode("abc", "ascii")
        b'abc'
        >>> attempt_encode("café", "ascii") is None
        True
    """
    try:
        return text.encode(codec, errors="strict")
    except UnicodeEncodeError:
        return None


def encode_wide(text: str) -> bytes:
    """Return the UTF-16 (little endian, no BOM) payload of `text`."""
    return text.encode(WIDE_CODEC, errors=WIDE_ERRORS)


def raw_utf16_length(text: str) -> int:
    """Byte length of `text` stored as two bytes per UTF-16 code unit."""
    return len(encode_wide(text))


def classify_text(text: str) -> Classification:
    """Classify a string into the narrowest encoding that represents it losslessly.

    The checks run in precedence order ASCII > Latin-1 > wide. Text that is
    ASCII is reported as ASCII but its compressed form is the Latin-1
    encoding, since a compressed string stores one byte per character either
    way. Should that re-encoding ever fail, the result falls back to WIDE and
    carries an `anomaly` message so the caller can surface it; the string is
    then counted in the WIDE aggregate, not the ASCII one.

    Args:
        text: String content of one heap object.

    Returns:
        A Classification with the category and the encoded bytes.

    Examples:
        >>> classify_text("A").category
        <EncodingCategory.ASCII: 'ascii'>
        >>> classify_text("\\u00ff").category
        <EncodingCategory.LATIN1: 'latin1'>
        >>> classify_text("\\u0100").category
        <EncodingCategory.WIDE: 'wide'>
    """
    if attempt_encode(text, ASCII_CODEC) is not None:
        latin1_bytes = attempt_encode(text, LATIN1_CODEC)
        if latin1_bytes is not None:
            return Classification(EncodingCategory.ASCII, latin1_bytes)

        message = f'"{text}" is ASCII but can\'t be encoded as ISO-8859-1 (Latin-1)'
        logger.error(message)
        return Classification(EncodingCategory.WIDE, encode_wide(text), anomaly=message)

    latin1_bytes = attempt_encode(text, LATIN1_CODEC)
    if latin1_bytes is not None:
        return Classification(EncodingCategory.LATIN1, latin1_bytes)

    return Classification(EncodingCategory.WIDE, encode_wide(text))
