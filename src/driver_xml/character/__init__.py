"""Character classification for the ASCII document subset."""

from .classes import (
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

__all__ = [
    "decode_text",
    "encode_text",
    "find_invalid_char",
    "is_name_char",
    "is_name_start_char",
    "is_printable",
    "is_whitespace",
    "is_xml_char",
    "skip_whitespace",
]
