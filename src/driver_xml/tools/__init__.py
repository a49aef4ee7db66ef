"""Developer tools for driver-xml."""

from .hexdump import BYTES_PER_LINE, format_line, hex_dump

__all__ = [
    "BYTES_PER_LINE",
    "format_line",
    "hex_dump",
]
