"""Tests for ASCII character classification."""

import pytest

from driver_xml.character import (
    decode_text,
    encode_text,
    find_invalid_char,
    is_name_char,
    is_name_start_char,
    is_printable,
    is_whitespace,
    is_xml_char,
    skip_whitespace,
)
from driver_xml.shared.errors import InvalidArgumentError


class TestPredicates:
    """Test the single-byte predicates."""

    @pytest.mark.parametrize("value", list(b" \t\r\n"))
    def test_whitespace(self, value: int) -> None:
        """Test the four whitespace bytes."""
        assert is_whitespace(value)

    @pytest.mark.parametrize("value", [ord("a"), 0x0B, 0x0C, 0x00])
    def test_not_whitespace(self, value: int) -> None:
        """Test that other bytes, vertical tab and form feed included, are not whitespace."""
        assert not is_whitespace(value)

    def test_name_start_chars(self) -> None:
        """Test which bytes may begin a name."""
        for value in b"AZaz_:":
            assert is_name_start_char(value)
        for value in b"09-. <":
            assert not is_name_start_char(value)

    def test_name_chars(self) -> None:
        """Test which bytes may continue a name."""
        for value in b"AZaz_:09-.":
            assert is_name_char(value)
        for value in b" />=\"'":
            assert not is_name_char(value)

    def test_xml_chars(self) -> None:
        """Test the accepted byte range."""
        for value in (0x09, 0x0A, 0x0D, 0x20, 0x41, 0x7E):
            assert is_xml_char(value)
        for value in (0x00, 0x08, 0x0B, 0x1F, 0x7F, 0x80, 0xFF):
            assert not is_xml_char(value)

    def test_printable(self) -> None:
        """Test that tab and newline are not printable in dumps."""
        assert is_printable(ord("~"))
        assert not is_printable(ord("\t"))
        assert not is_printable(ord("\n"))


class TestScanners:
    """Test the buffer scanning helpers."""

    def test_find_invalid_char(self) -> None:
        """Test locating the first invalid byte."""
        assert find_invalid_char(b"ab\x00c\x01") == 2
        assert find_invalid_char(b"abc\r\n") == -1

    def test_find_invalid_char_bounds(self) -> None:
        """Test that only the given range is inspected."""
        assert find_invalid_char(b"\x00ab", 1) == -1
        assert find_invalid_char(b"ab\x00", 0, 2) == -1
        assert find_invalid_char(b"ab\x00", 0, 3) == 2

    def test_skip_whitespace(self) -> None:
        """Test skipping whitespace up to a bound."""
        assert skip_whitespace(b"  \t\r\nx", 0, 6) == 5
        assert skip_whitespace(b"x  ", 0, 3) == 0
        assert skip_whitespace(b"     ", 1, 3) == 3


class TestTextConversion:
    """Test name and value conversion."""

    def test_decode_is_byte_transparent(self) -> None:
        """Test that every byte maps to one character."""
        assert decode_text(b"a\xe9") == "a\xe9"
        assert encode_text(decode_text(bytes(range(256)))) == bytes(range(256))

    def test_encode_rejects_wide_characters(self) -> None:
        """Test that characters above U+00FF cannot be encoded."""
        with pytest.raises(InvalidArgumentError, match="single-byte"):
            encode_text("€")
