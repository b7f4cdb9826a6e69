"""
Unit tests for string encoding classification.

Tests category precedence, the encoded payloads and the fallback taken when
ASCII text cannot be re-encoded as Latin-1.
"""

import pytest
from unittest.mock import patch

from heapstrings.classification.classifier import (
    attempt_encode,
    classify_text,
    encode_wide,
    raw_utf16_length,
)
from heapstrings.models.analysis import EncodingCategory


@pytest.mark.unit
class TestAttemptEncode:
    """Test cases for strict encoding attempts."""

    def test_encodes_when_representable(self):
        assert attempt_encode("abc", "ascii") == b"abc"

    def test_returns_none_instead_of_raising(self):
        assert attempt_encode("café", "ascii") is None

    def test_never_substitutes_replacement_characters(self):
        assert attempt_encode("日本", "latin-1") is None


@pytest.mark.unit
class TestWidePayload:
    """Test cases for the UTF-16 payload helpers."""

    def test_two_bytes_per_code_unit(self):
        assert raw_utf16_length("hi") == 4
        assert raw_utf16_length("日本語") == 6
        assert raw_utf16_length("") == 0

    def test_supplementary_character_takes_two_units(self):
        assert raw_utf16_length("\U0001F600") == 4

    def test_lone_surrogate_is_passed_through(self):
        assert encode_wide("\ud800") == b"\x00\xd8"
        assert raw_utf16_length("a\udc00") == 4


@pytest.mark.unit
class TestClassifyText:
    """Test cases for narrowest-encoding classification."""

    def test_ascii_single_character(self):
        result = classify_text("A")

        assert result.category == EncodingCategory.ASCII
        assert result.encoded == b"A"
        assert result.compressed_length == 1
        assert result.anomaly is None

    def test_latin1_text(self):
        result = classify_text("café")

        assert result.category == EncodingCategory.LATIN1
        assert result.encoded == b"caf\xe9"
        assert result.compressed_length == 4

    def test_wide_text(self):
        result = classify_text("日本語")

        assert result.category == EncodingCategory.WIDE
        assert result.encoded == "日本語".encode("utf-16-le")
        assert result.compressed_length == 6

    def test_empty_string_is_ascii(self):
        result = classify_text("")

        assert result.category == EncodingCategory.ASCII
        assert result.encoded == b""

    def test_latin1_upper_boundary(self):
        assert classify_text("ÿ").category == EncodingCategory.LATIN1
        assert classify_text("Ā").category == EncodingCategory.WIDE

    def test_ascii_upper_boundary(self):
        assert classify_text("\x7f").category == EncodingCategory.ASCII
        assert classify_text("\x80").category == EncodingCategory.LATIN1

    def test_emoji_is_wide(self):
        result = classify_text("smile \U0001F600")

        assert result.category == EncodingCategory.WIDE
        assert len(result.encoded) == raw_utf16_length("smile \U0001F600")

    def test_lone_surrogate_is_wide(self):
        result = classify_text("x\ud83d")

        assert result.category == EncodingCategory.WIDE
        assert result.encoded == b"x\x00\x3d\xd8"

    def test_classification_is_idempotent(self):
        for text in ["hello", "naïve", "Ωmega", ""]:
            assert classify_text(text) == classify_text(text)

    def test_only_wide_is_not_compressible(self):
        assert EncodingCategory.ASCII.compressible
        assert EncodingCategory.LATIN1.compressible
        assert not EncodingCategory.WIDE.compressible

    def test_ascii_that_fails_latin1_falls_back_to_wide(self):
        """ASCII text whose Latin-1 re-encoding fails is reported as an anomaly."""

        def fake_encode(text, codec):
            if codec == "latin-1":
                return None
            return text.encode(codec)

        with patch(
            "heapstrings.classification.classifier.attempt_encode", side_effect=fake_encode
        ):
            result = classify_text("abc")

        assert result.category == EncodingCategory.WIDE
        assert result.encoded == "abc".encode("utf-16-le")
        assert result.anomaly is not None
        assert "abc" in result.anomaly
