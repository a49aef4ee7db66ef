"""ASCII character classes used by the chunk extractor and name scanners.

All predicates take a single byte value (``int``), which is what indexing a
``bytes`` object yields.
"""

from typing import FrozenSet, Optional

from driver_xml.shared.errors import InvalidArgumentError

WHITESPACE: FrozenSet[int] = frozenset(b" \t\r\n")

NAME_START_CHARS: FrozenSet[int] = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_:"
)

NAME_CHARS: FrozenSet[int] = NAME_START_CHARS | frozenset(b"0123456789-.")

# Printable ASCII range accepted in documents, tab/LF/CR aside
PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


def is_whitespace(value: int) -> bool:
    """Return True for space, tab, carriage return or line feed."""
    return value in WHITESPACE


def is_name_start_char(value: int) -> bool:
    """Return True for a byte that may begin a tag or target name."""
    return value in NAME_START_CHARS


def is_name_char(value: int) -> bool:
    """Return True for a byte that may continue a tag or target name."""
    return value in NAME_CHARS


def is_xml_char(value: int) -> bool:
    """Return True for a byte allowed anywhere in a document."""
    return value in (0x09, 0x0A, 0x0D) or PRINTABLE_MIN <= value <= PRINTABLE_MAX


def is_printable(value: int) -> bool:
    """Return True for a byte that can be shown as-is in a text dump."""
    return PRINTABLE_MIN <= value <= PRINTABLE_MAX


def find_invalid_char(data: bytes, start: int = 0, end: Optional[int] = None) -> int:
    """Locate the first byte that is not an XML character.

    Args:
        data: Bytes to scan
        start: First offset to inspect
        end: Offset to stop at (exclusive); defaults to ``len(data)``

    Returns:
        Offset of the first invalid byte, or -1 if every byte is valid
    """
    stop = len(data) if end is None else end
    for offset in range(start, stop):
        if not is_xml_char(data[offset]):
            return offset
    return -1


def skip_whitespace(data: bytes, position: int, end: int) -> int:
    """Return the first offset at or after ``position`` that is not whitespace."""
    while position < end and data[position] in WHITESPACE:
        position += 1
    return position


def decode_text(data: bytes) -> str:
    """Decode a name or value so that every byte maps to one character."""
    return data.decode("latin-1")


def encode_text(text: str) -> bytes:
    """Encode a name or value for output, the inverse of ``decode_text``.

    Raises:
        InvalidArgumentError: If ``text`` holds a character above U+00FF
    """
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise InvalidArgumentError(
            f"Cannot encode {text!r} as single-byte text",
            details={"text": text}
        ) from e
