"""Public parse and render API for driver-xml.

Level 1 is a set of module functions: ``parse``, ``parse_string``,
``parse_file``, ``render`` and ``render_pretty``. Level 2 is the reusable
``DriverXmlParser`` class, which holds a configuration and keeps usage
statistics across calls.

Parse functions never raise for bad input: every failure comes back as a
``ParseResult`` whose ``status`` names the failure class.
"""

import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

from driver_xml.serialization.writer import PrettyPrinter, XmlWriter
from driver_xml.shared.config import DriverXmlConfig
from driver_xml.shared.errors import (
    DriverXmlError,
    InvalidArgumentError,
    OutOfResourcesError,
)
from driver_xml.shared.logging import get_logger
from driver_xml.shared.result import DiagnosticSeverity, current_memory_usage
from driver_xml.tokenization.extractor import Cursor
from driver_xml.tree.builder import ParseResult, TreeBuilder
from driver_xml.tree.nodes import Attribute, Node

InputType = Union[bytes, bytearray, memoryview, str]

MS_PER_SECOND = 1000
CORRELATION_ID_LENGTH = 8


def _resolve_correlation_id(
    correlation_id: Optional[str], config: DriverXmlConfig
) -> Optional[str]:
    if correlation_id is None and config.global_.enable_correlation_tracking:
        return str(uuid.uuid4())[:CORRELATION_ID_LENGTH]
    return correlation_id


def _coerce_input(buffer: Any) -> bytes:
    """Turn a supported input object into bytes.

    Raises:
        InvalidArgumentError: If ``buffer`` is None or of an unsupported type
    """
    if buffer is None:
        raise InvalidArgumentError("Input buffer is None")
    if isinstance(buffer, str):
        return buffer.encode("utf-8")
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return bytes(buffer)
    raise InvalidArgumentError(
        f"Unsupported input type {type(buffer).__name__}",
        details={"input_type": type(buffer).__name__}
    )


def parse(
    buffer: InputType,
    length: Optional[int] = None,
    config: Optional[DriverXmlConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a buffer into a document tree.

    Args:
        buffer: Document bytes; ``str`` input is encoded as UTF-8 first
        length: Number of bytes of ``buffer`` to parse (all of it by default)
        config: Configuration to apply (defaults when omitted)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult whose ``root`` is the document root on success

    Examples:
        >>> result = parse(b'<a x="1"><b>hi</b></a>')
        >>> result.success
        True
        >>> result.root.find_tag_by_name("b").children[0].data
        b'hi'

        >>> parse(b"<a><b></a>").status
        <XmlStatus.MALFORMED_INPUT: 3>
    """
    start_time = time.time()
    config = config or DriverXmlConfig()
    correlation_id = _resolve_correlation_id(correlation_id, config)
    logger = get_logger(__name__, correlation_id, "parse")
    memory_before = current_memory_usage() if config.global_.enable_metrics else 0

    logger.info(
        "Starting parse operation",
        extra={"input_type": type(buffer).__name__, "length": length}
    )

    builder = TreeBuilder(config.parser, correlation_id)
    try:
        cursor = Cursor(_coerce_input(buffer), length)
        root = builder.build(cursor)
    except DriverXmlError as e:
        return _create_error_result(e, builder, correlation_id, start_time)
    except MemoryError as e:
        error = OutOfResourcesError("Out of memory while parsing")
        error.__cause__ = e
        return _create_error_result(error, builder, correlation_id, start_time)

    result = ParseResult(root=root, correlation_id=correlation_id)
    result.diagnostics.extend(builder.diagnostics)
    _fill_metrics(result, builder, start_time)
    result.performance.bytes_processed = cursor.length
    if config.global_.enable_metrics:
        result.performance.memory_used_bytes = max(
            0, current_memory_usage() - memory_before
        )

    logger.info(
        "Parse completed",
        extra={
            "element_count": result.element_count,
            "discarded_count": result.discarded_count,
            "processing_time_ms": result.processing_time_ms,
        }
    )
    return result


def parse_string(
    text: str,
    config: Optional[DriverXmlConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document held in a string.

    Examples:
        >>> parse_string("<a/>").root.children[0].name
        'a'
    """
    if not isinstance(text, str):
        return _create_error_result(
            InvalidArgumentError(
                f"Expected str, got {type(text).__name__}",
                details={"input_type": type(text).__name__}
            ),
            None,
            correlation_id,
            time.time()
        )
    return parse(text, config=config, correlation_id=correlation_id)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[DriverXmlConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Read a file and parse its contents.

    Args:
        file_path: Path to the document
        config: Configuration to apply (defaults when omitted)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult; a missing or unreadable file yields INVALID_ARGUMENT
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info("Starting file parse operation", extra={"file_path": str(path_obj)})

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"
    else:
        try:
            data = path_obj.read_bytes()
        except OSError as e:
            error_message = f"Unable to read file {path_obj}: {e.strerror or e}"

    if error_message is not None:
        return _create_error_result(
            InvalidArgumentError(error_message, details={"file_path": str(path_obj)}),
            None,
            correlation_id,
            start_time
        )

    result = parse(data, config=config, correlation_id=correlation_id)
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"Read {len(data)} bytes from file",
        "file_parser",
        details={"file_path": str(path_obj)}
    )
    return result


def render(
    node: Union[Node, Attribute],
    config: Optional[DriverXmlConfig] = None,
    correlation_id: Optional[str] = None
) -> bytes:
    """Render a node and its subtree as compact markup.

    Raises:
        TypeError: If ``node`` is not a tree node
        OutOfResourcesError: If the output cannot be allocated
    """
    config = config or DriverXmlConfig()
    writer = XmlWriter(config.serializer, correlation_id)
    try:
        return writer.render(node)
    except MemoryError as e:
        raise OutOfResourcesError("Out of memory while rendering") from e


def render_pretty(node: Node) -> str:
    """Render a node and its subtree as indented lines."""
    return PrettyPrinter().render(node)


def _fill_metrics(
    result: ParseResult, builder: Optional[TreeBuilder], start_time: float
) -> None:
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    if builder is not None:
        result.performance.chunks_extracted = builder.extractor.chunks_extracted
        result.performance.nodes_created = builder.nodes_created
        result.performance.nodes_discarded = builder.nodes_discarded
        result.performance.max_depth_reached = builder.max_depth_reached


def _create_error_result(
    error: DriverXmlError,
    builder: Optional[TreeBuilder],
    correlation_id: Optional[str],
    start_time: float
) -> ParseResult:
    """Create a failed result carrying ``error``.

    Args:
        error: The failure
        builder: Builder whose diagnostics and counters should be kept, if any
        correlation_id: Optional correlation ID
        start_time: Time the operation started

    Returns:
        ParseResult with no tree and a CRITICAL diagnostic
    """
    result = ParseResult(
        root=None,
        status=error.status,
        error=error,
        correlation_id=correlation_id
    )
    if builder is not None:
        result.diagnostics.extend(builder.diagnostics)
    _fill_metrics(result, builder, start_time)
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        str(error),
        "api_parser",
        offset=error.offset,
        details={"status": error.status.name, "exception_type": type(error).__name__}
    )

    get_logger(__name__, correlation_id, "parse").error(
        "Parse operation failed",
        extra={"status": error.status.name, "offset": error.offset}
    )
    return result


class DriverXmlParser:
    """Reusable configured parser with usage statistics.

    Examples:
        >>> parser = DriverXmlParser(DriverXmlConfig.strict())
        >>> parser.parse(b"<a/>").success
        True
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[DriverXmlConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Configuration for every parse and render call
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or DriverXmlConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "driver_xml_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self._status_counts: Dict[str, int] = {}

        self.logger.info(
            "DriverXmlParser initialized",
            extra={"config_name": self.config.name}
        )

    def parse(
        self,
        buffer: InputType,
        length: Optional[int] = None,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse ``buffer`` with this parser's configuration."""
        result = parse(
            buffer,
            length=length,
            config=self.config,
            correlation_id=correlation_id_override or self.correlation_id
        )
        self._record(result)
        return result

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        """Read and parse a file with this parser's configuration."""
        result = parse_file(
            file_path, config=self.config, correlation_id=self.correlation_id
        )
        self._record(result)
        return result

    def render(self, node: Union[Node, Attribute]) -> bytes:
        """Render ``node`` with this parser's serializer configuration."""
        return render(node, config=self.config, correlation_id=self.correlation_id)

    def reconfigure(self, config: DriverXmlConfig) -> None:
        """Replace the configuration used by later calls."""
        self.config = config
        self.logger.info(
            "Parser reconfigured",
            extra={"config_name": config.name}
        )

    def _record(self, result: ParseResult) -> None:
        self._parse_count += 1
        self._total_processing_time += result.processing_time_ms
        if result.success:
            self._successful_parses += 1
        status = result.status.name
        self._status_counts[status] = self._status_counts.get(status, 0) + 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "status_counts": dict(self._status_counts),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self._status_counts = {}

        self.logger.info("Parser statistics reset")
