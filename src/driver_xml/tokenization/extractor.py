"""Chunk extraction: classify and slice the next unit of input.

The extractor walks a ``Cursor`` over a byte buffer and returns one ``Chunk``
per call: a tag, a close tag, an empty tag, a run of character data, a
processing instruction, or one of the skipped forms (comment, declaration,
boxed section). Every scan is bounded by the cursor length, so nothing past
the end of input is ever read.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple, Union

from driver_xml.character import find_invalid_char, skip_whitespace
from driver_xml.shared.errors import (
    InvalidArgumentError,
    InvalidCharacterError,
    TruncatedInputError,
)
from driver_xml.shared.logging import get_logger

BytesLike = Union[bytes, bytearray, memoryview]

_LT = ord("<")

# Markup openers and the terminators that close them
_PI_OPEN, _PI_CLOSE = b"<?", b"?>"
_COMMENT_OPEN, _COMMENT_CLOSE = b"<!--", b"-->"
_BOXED_OPEN, _BOXED_CLOSE = b"<![", b"]]>"
_DECLARATION_OPEN = b"<!"
_CLOSE_TAG_OPEN = b"</"
_TAG_CLOSE = b">"
_EMPTY_TAG_CLOSE = b"/>"


class ChunkType(Enum):
    """Classification of a unit of input."""

    TAG = auto()                     # <name attrs>
    EMPTY_TAG = auto()               # <name attrs/>
    CLOSE_TAG = auto()               # </name>
    CHARACTER_DATA = auto()          # Text up to the next '<'
    PROCESSING_INSTRUCTION = auto()  # <?target data?>
    COMMENT = auto()                 # <!-- ... -->
    DECLARATION = auto()             # <!DOCTYPE ...> and friends
    BOXED_SECTION = auto()           # <![ ... ]]>


SKIPPED_CHUNK_TYPES = frozenset(
    {ChunkType.COMMENT, ChunkType.DECLARATION, ChunkType.BOXED_SECTION}
)


@dataclass
class Cursor:
    """Read position over an input buffer.

    Only ``buffer[:length]`` is ever inspected. The position only moves
    forward.
    """

    buffer: bytes
    length: Optional[int] = None
    position: int = 0

    def __post_init__(self) -> None:
        """Validate the buffer and bounds."""
        if not isinstance(self.buffer, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError(
                f"Input buffer must be bytes-like, not {type(self.buffer).__name__}"
            )
        self.buffer = bytes(self.buffer)
        if self.length is None:
            self.length = len(self.buffer)
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise InvalidArgumentError("Input length must be an integer")
        if not 0 <= self.length <= len(self.buffer):
            raise InvalidArgumentError(
                f"Input length {self.length} is outside the buffer "
                f"(0..{len(self.buffer)})"
            )
        if not 0 <= self.position <= self.length:
            raise InvalidArgumentError("Cursor position is outside the input")

    @property
    def at_end(self) -> bool:
        """Check whether all input has been consumed."""
        return self.position >= self.length

    @property
    def remaining(self) -> int:
        """Get the number of unconsumed bytes."""
        return self.length - self.position


@dataclass
class Chunk:
    """A classified slice of input, copied out of the buffer."""

    kind: ChunkType
    text: bytes
    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate chunk bounds."""
        if self.start < 0 or self.end < self.start:
            raise ValueError("Chunk bounds must satisfy 0 <= start <= end")

    @property
    def length(self) -> int:
        """Get the chunk length in bytes."""
        return self.end - self.start


class ChunkExtractor:
    """Produce chunks from a cursor one at a time."""

    def __init__(
        self,
        validate_characters: bool = True,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the extractor.

        Args:
            validate_characters: Reject bytes outside printable ASCII plus
                tab, CR and LF
            correlation_id: Optional correlation ID for request tracking
        """
        self.validate_characters = validate_characters
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "chunk_extractor")
        self.chunks_extracted = 0

    def extract_next(self, cursor: Cursor) -> Optional[Chunk]:
        """Extract the next chunk and advance the cursor past it.

        Args:
            cursor: Cursor to read from

        Returns:
            The next chunk, or None when only whitespace remains (the cursor
            is then moved to the end)

        Raises:
            TruncatedInputError: If markup is not terminated before the end
            InvalidCharacterError: If the chunk holds a byte outside the
                accepted set and validation is enabled
        """
        data = cursor.buffer
        end = cursor.length
        start = cursor.position

        boundary = skip_whitespace(data, start, end)
        if boundary >= end:
            cursor.position = end
            return None

        if data[boundary] != _LT:
            # Text keeps the whitespace that led up to it
            stop = data.find(b"<", boundary, end)
            if stop == -1:
                stop = end
            kind = ChunkType.CHARACTER_DATA
        else:
            start = boundary
            kind, stop = self._scan_markup(data, start, end)

        if self.validate_characters:
            bad = find_invalid_char(data, start, stop)
            if bad != -1:
                raise InvalidCharacterError(data[bad], offset=bad)

        cursor.position = stop
        self.chunks_extracted += 1
        chunk = Chunk(kind, data[start:stop], start, stop)

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Extracted chunk",
                extra={"chunk_type": kind.name, "start": start, "end": stop}
            )
        return chunk

    def _scan_markup(self, data: bytes, start: int, end: int) -> Tuple[ChunkType, int]:
        """Find the end of the markup beginning at ``start``.

        Returns:
            Tuple of (chunk type, offset just past the terminator)
        """
        if data.startswith(_PI_OPEN, start, end):
            stop = self._find_terminator(
                data, _PI_CLOSE, start + len(_PI_OPEN), end, start,
                "processing instruction"
            )
            return ChunkType.PROCESSING_INSTRUCTION, stop

        if data.startswith(_COMMENT_OPEN, start, end):
            stop = self._find_terminator(
                data, _COMMENT_CLOSE, start + len(_COMMENT_OPEN), end, start,
                "comment"
            )
            return ChunkType.COMMENT, stop

        if data.startswith(_BOXED_OPEN, start, end):
            stop = self._find_terminator(
                data, _BOXED_CLOSE, start + len(_BOXED_OPEN), end, start,
                "boxed section"
            )
            return ChunkType.BOXED_SECTION, stop

        if data.startswith(_DECLARATION_OPEN, start, end):
            stop = self._find_terminator(
                data, _TAG_CLOSE, start + len(_DECLARATION_OPEN), end, start,
                "declaration"
            )
            return ChunkType.DECLARATION, stop

        stop = self._find_terminator(data, _TAG_CLOSE, start + 1, end, start, "tag")
        if data.startswith(_CLOSE_TAG_OPEN, start, stop):
            return ChunkType.CLOSE_TAG, stop
        if data.endswith(_EMPTY_TAG_CLOSE, start + 1, stop):
            return ChunkType.EMPTY_TAG, stop
        return ChunkType.TAG, stop

    @staticmethod
    def _find_terminator(
        data: bytes,
        terminator: bytes,
        search_from: int,
        end: int,
        markup_start: int,
        what: str
    ) -> int:
        index = data.find(terminator, search_from, end)
        if index == -1:
            raise TruncatedInputError(
                f"Unterminated {what}: expected '{terminator.decode('ascii')}' "
                "before end of input",
                offset=markup_start,
                details={"terminator": terminator.decode("ascii")}
            )
        return index + len(terminator)
