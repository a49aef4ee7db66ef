"""Name, attribute and processing-instruction extraction from chunk text.

These functions work on the bytes of a single chunk. Offsets reported in
errors are ``base_offset`` plus the position inside the chunk, so callers pass
the chunk's start offset to get positions in the input buffer.
"""

from typing import Iterator, Optional, Tuple

from driver_xml.character import (
    decode_text,
    is_name_char,
    is_name_start_char,
    is_whitespace,
    skip_whitespace,
)
from driver_xml.shared.errors import InvalidAttributeError, InvalidNameError
from driver_xml.tree.nodes import Attribute

_GT = ord(">")
_SLASH = ord("/")
_EQUALS = ord("=")
_QUOTES = (ord('"'), ord("'"))


def _scan_name(text: bytes, position: int, end: int) -> int:
    while position < end and is_name_char(text[position]):
        position += 1
    return position


def extract_tag_name(text: bytes, base_offset: int = 0) -> Tuple[str, int]:
    """Extract the element name from a tag, empty tag or close tag chunk.

    Args:
        text: Chunk bytes, starting with ``<`` or ``</``
        base_offset: Offset of the chunk in the input

    Returns:
        Tuple of (name, position just past the name)

    Raises:
        InvalidNameError: If the name is missing, starts with a character that
            cannot begin a name, or runs into anything other than whitespace,
            ``>`` or ``/>``
    """
    end = len(text)
    position = 1
    if position < end and text[position] == _SLASH:
        position += 1

    if position >= end or not is_name_start_char(text[position]):
        raise InvalidNameError(
            "Tag name is missing or starts with an invalid character",
            offset=base_offset + position
        )

    name_end = _scan_name(text, position, end)
    if name_end < end:
        follower = text[name_end]
        valid_follower = (
            is_whitespace(follower)
            or follower == _GT
            or (follower == _SLASH and text.startswith(b"/>", name_end))
        )
    else:
        valid_follower = False
    if not valid_follower:
        raise InvalidNameError(
            "Tag name contains an invalid character",
            offset=base_offset + name_end
        )

    return decode_text(text[position:name_end]), name_end


def extract_attribute(
    text: bytes, position: int, base_offset: int = 0
) -> Optional[Tuple[Attribute, int]]:
    """Extract one ``name="value"`` pair starting at ``position``.

    Either quote character may delimit the value; the other one is ordinary
    data inside it. An empty value yields an attribute whose value is None.

    Args:
        text: Chunk bytes of a tag or empty tag
        position: Where to start looking, usually just past the tag name
        base_offset: Offset of the chunk in the input

    Returns:
        Tuple of (attribute, position just past the closing quote), or None
        when the end of the tag has been reached

    Raises:
        InvalidAttributeError: If the text at ``position`` is not a complete
            attribute
    """
    end = len(text)
    position = skip_whitespace(text, position, end)
    if position >= end or text[position] == _GT or text.startswith(b"/>", position):
        return None

    name_start = position
    while (
        position < end
        and text[position] != _EQUALS
        and text[position] != _GT
        and not is_whitespace(text[position])
    ):
        position += 1
    if position == name_start:
        raise InvalidAttributeError(
            "Attribute name is empty", offset=base_offset + name_start
        )
    name = decode_text(text[name_start:position])

    position = skip_whitespace(text, position, end)
    if position >= end or text[position] != _EQUALS:
        raise InvalidAttributeError(
            f"Attribute '{name}' is missing '='", offset=base_offset + position
        )

    position = skip_whitespace(text, position + 1, end)
    if position >= end or text[position] not in _QUOTES:
        raise InvalidAttributeError(
            f"Attribute '{name}' value is not quoted", offset=base_offset + position
        )

    quote = text[position]
    value_start = position + 1
    value_end = text.find(bytes([quote]), value_start, end)
    if value_end == -1:
        raise InvalidAttributeError(
            f"Attribute '{name}' value is missing its closing quote",
            offset=base_offset + position
        )

    value = decode_text(text[value_start:value_end]) or None
    return Attribute(name, value), value_end + 1


def iter_attributes(
    text: bytes, position: int, base_offset: int = 0
) -> Iterator[Attribute]:
    """Yield every attribute of a tag chunk in order.

    Raises:
        InvalidAttributeError: On the first malformed attribute
    """
    while True:
        found = extract_attribute(text, position, base_offset)
        if found is None:
            return
        attribute, position = found
        yield attribute


def extract_pi_data(text: bytes, base_offset: int = 0) -> Tuple[str, Optional[str]]:
    """Split a processing-instruction chunk into target and data.

    The data is everything after the whitespace following the target, up to
    the closing ``?>``, kept verbatim.

    Args:
        text: Chunk bytes, ``<?target data?>``
        base_offset: Offset of the chunk in the input

    Returns:
        Tuple of (target, data); data is None when there is none

    Raises:
        InvalidNameError: If the target is missing or malformed
    """
    end = len(text) - 2
    position = 2

    if position >= end or not is_name_start_char(text[position]):
        raise InvalidNameError(
            "Processing instruction target is missing or starts with an "
            "invalid character",
            offset=base_offset + position
        )

    target_end = _scan_name(text, position, end)
    if target_end < end and not is_whitespace(text[target_end]):
        raise InvalidNameError(
            "Processing instruction target contains an invalid character",
            offset=base_offset + target_end
        )

    target = decode_text(text[position:target_end])
    data_start = skip_whitespace(text, target_end, end)
    data = decode_text(text[data_start:end]) or None
    return target, data
