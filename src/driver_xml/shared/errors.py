"""Status codes and exception hierarchy for driver-xml.

Every failure raised inside the parser, the node store or the serializer is a
``DriverXmlError`` subclass carrying an ``XmlStatus``. The public API converts
these into failed ``ParseResult`` objects; internal code raises them.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class XmlStatus(Enum):
    """Terminal status of a parse or render operation."""

    SUCCESS = auto()
    INVALID_ARGUMENT = auto()   # Null/malformed call arguments
    MALFORMED_INPUT = auto()    # Tag mismatch, bad names, invalid characters
    TRUNCATED_INPUT = auto()    # End of buffer before a required terminator
    OUT_OF_RESOURCES = auto()   # Allocation failure or configured limit hit


class DriverXmlError(Exception):
    """Base class for all driver-xml errors."""

    status: XmlStatus = XmlStatus.INVALID_ARGUMENT

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.details = details or {}

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (offset {self.offset})"


class InvalidArgumentError(DriverXmlError):
    """A call argument was missing or structurally invalid."""

    status = XmlStatus.INVALID_ARGUMENT


class InvalidAttributeError(InvalidArgumentError):
    """An attribute inside a tag violates ``name="value"`` syntax."""


class MalformedInputError(DriverXmlError):
    """The input is not acceptable markup."""

    status = XmlStatus.MALFORMED_INPUT


class TagMismatchError(MalformedInputError):
    """A close tag does not match the innermost open element."""

    def __init__(
        self,
        open_name: Optional[str],
        close_name: str,
        offset: Optional[int] = None
    ) -> None:
        if open_name is None:
            message = f"Close tag '{close_name}' has no open element"
        else:
            message = (
                f"Close tag mismatch: open element '{open_name}', "
                f"close tag '{close_name}'"
            )
        super().__init__(
            message,
            offset=offset,
            details={"open_name": open_name, "close_name": close_name}
        )
        self.open_name = open_name
        self.close_name = close_name


class InvalidNameError(MalformedInputError):
    """A tag or processing-instruction name contains an invalid character."""


class InvalidCharacterError(MalformedInputError):
    """A byte outside printable ASCII plus tab/CR/LF was found."""

    def __init__(self, value: int, offset: Optional[int] = None) -> None:
        super().__init__(
            f"Encountered an invalid character 0x{value:02x}",
            offset=offset,
            details={"value": value}
        )
        self.value = value


class TruncatedInputError(DriverXmlError):
    """The buffer ended before a structurally required terminator."""

    status = XmlStatus.TRUNCATED_INPUT


class UnclosedElementError(TruncatedInputError):
    """The buffer ended while an element was still open."""

    def __init__(self, name: str, offset: Optional[int] = None) -> None:
        super().__init__(
            f"Unclosed tag '{name}'",
            offset=offset,
            details={"name": name}
        )
        self.name = name


class OutOfResourcesError(DriverXmlError):
    """Memory could not be obtained or a configured limit was exceeded."""

    status = XmlStatus.OUT_OF_RESOURCES


class NestingDepthError(OutOfResourcesError):
    """Element nesting exceeded the configured maximum depth."""

    def __init__(self, max_depth: int, offset: Optional[int] = None) -> None:
        super().__init__(
            f"Element nesting exceeds maximum depth of {max_depth}",
            offset=offset,
            details={"max_depth": max_depth}
        )
        self.max_depth = max_depth
