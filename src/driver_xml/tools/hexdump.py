"""Hex editor style dump of an arbitrary byte buffer.

Each line shows the offset, sixteen bytes in hex and the same bytes as ASCII
in quotes, with ``.`` standing in for anything that is not printable.
"""

from typing import List, Union

from driver_xml.character import is_printable

BYTES_PER_LINE = 16


def _ascii_column(chunk: bytes) -> str:
    return "".join(chr(value) if is_printable(value) else "." for value in chunk)


def format_line(line_number: int, chunk: bytes) -> str:
    """Format up to sixteen bytes as one dump line.

    Short chunks are padded so the ASCII column stays aligned.

    Args:
        line_number: Zero-based line index; the offset shown is sixteen times it
        chunk: The bytes for this line

    Returns:
        The formatted line without a trailing newline
    """
    if len(chunk) > BYTES_PER_LINE:
        raise ValueError(f"A dump line holds at most {BYTES_PER_LINE} bytes")
    missing = BYTES_PER_LINE - len(chunk)
    hex_column = "".join(f"{value:02X} " for value in chunk) + "   " * missing
    ascii_column = _ascii_column(chunk) + " " * missing
    return f"{line_number:07X}0: {hex_column}\"{ascii_column}\""


def hex_dump(data: Union[bytes, bytearray, memoryview], header: bool = True) -> str:
    """Render ``data`` as a hex/ASCII side-by-side listing.

    Args:
        data: Buffer to dump
        header: Whether to start with a line giving the byte count

    Returns:
        The listing, one line per sixteen bytes, each ending in a newline
    """
    data = bytes(data)
    lines: List[str] = []
    if header:
        lines.append(f"Buffer, {len(data)} bytes")
    for line_number, start in enumerate(range(0, len(data), BYTES_PER_LINE)):
        lines.append(format_line(line_number, data[start:start + BYTES_PER_LINE]))
    return "".join(line + "\n" for line in lines)
