"""Recursive-descent tree building from extracted chunks.

The builder opens a branch for every start tag and returns from it when the
matching close tag arrives, so open/close matching follows the call stack.
``ParseResult`` wraps the outcome for the public API.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from driver_xml.shared.config import ParserConfig
from driver_xml.shared.errors import (
    DriverXmlError,
    InvalidAttributeError,
    NestingDepthError,
    TagMismatchError,
    UnclosedElementError,
    XmlStatus,
)
from driver_xml.shared.logging import get_logger
from driver_xml.shared.result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from driver_xml.tokenization.attributes import (
    extract_pi_data,
    extract_tag_name,
    iter_attributes,
)
from driver_xml.tokenization.extractor import (
    SKIPPED_CHUNK_TYPES,
    Chunk,
    ChunkExtractor,
    ChunkType,
    Cursor,
)
from driver_xml.tree.nodes import EmptyTag, Tag, delete_subtree


@dataclass
class ParseResult:
    """Outcome of a parse operation.

    On success ``root`` is the document root. On failure ``root`` is None,
    ``status`` names the failure class and ``error`` holds the exception.
    """

    root: Optional[Tag] = None
    status: XmlStatus = XmlStatus.SUCCESS
    error: Optional[DriverXmlError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check whether the parse produced a tree."""
        return self.status is XmlStatus.SUCCESS and self.root is not None

    @property
    def element_count(self) -> int:
        """Get the number of elements beneath the root."""
        return self.root.count_elements() if self.root is not None else 0

    @property
    def discarded_count(self) -> int:
        """Get the number of nodes released because of bad attributes."""
        return self.performance.nodes_discarded

    @property
    def processing_time_ms(self) -> float:
        """Get processing time in milliseconds."""
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            offset=offset,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def raise_for_status(self) -> None:
        """Re-raise the stored error if the parse failed."""
        if self.error is not None:
            raise self.error

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "success": self.success,
            "status": self.status.name,
            "error": str(self.error) if self.error is not None else None,
            "element_count": self.element_count,
            "discarded_count": self.discarded_count,
            "max_depth": self.root.max_depth() if self.root is not None else 0,
            "diagnostic_count": len(self.diagnostics),
            "performance": self.performance.to_dict(),
            "correlation_id": self.correlation_id,
        }


class TreeBuilder:
    """Build a document tree from the chunks of one input buffer.

    A builder may be reused; statistics and diagnostics are reset at the start
    of every ``build`` call.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration; defaults are used when omitted
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self.extractor = ChunkExtractor(
            validate_characters=self.config.validate_characters,
            correlation_id=correlation_id
        )

        self.diagnostics: List[DiagnosticEntry] = []
        self.nodes_created = 0
        self.nodes_discarded = 0
        self.max_depth_reached = 0

    def _reset_state(self) -> None:
        self.diagnostics = []
        self.nodes_created = 0
        self.nodes_discarded = 0
        self.max_depth_reached = 0
        self.extractor.chunks_extracted = 0

    def build(self, cursor: Cursor) -> Tag:
        """Build the document tree for the input under ``cursor``.

        Args:
            cursor: Cursor positioned at the start of the input

        Returns:
            Root tag holding the top-level nodes

        Raises:
            DriverXmlError: If the input is malformed, truncated, or nests
                deeper than the configured limit
        """
        self._reset_state()
        root = Tag.create_root()
        start_time = time.time()

        try:
            self._parse_branch(cursor, cursor.length, root, 0)
        except RecursionError as e:
            self.logger.error(
                "Tree building exhausted the interpreter stack",
                extra={"offset": cursor.position}
            )
            raise NestingDepthError(
                self.config.max_nesting_depth, offset=cursor.position
            ) from e
        except DriverXmlError as e:
            self.logger.error(
                f"Tree building failed: {e}",
                extra={"status": e.status.name, "offset": e.offset}
            )
            raise

        self.logger.debug(
            "Tree building completed",
            extra={
                "nodes_created": self.nodes_created,
                "nodes_discarded": self.nodes_discarded,
                "chunks_extracted": self.extractor.chunks_extracted,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )
        return root

    def _parse_branch(
        self,
        cursor: Cursor,
        end_bound: int,
        parent: Tag,
        depth: int
    ) -> None:
        """Parse the content of ``parent`` until its close tag.

        For the root the branch runs to the end of input instead.
        """
        if depth > self.config.max_nesting_depth:
            raise NestingDepthError(
                self.config.max_nesting_depth, offset=cursor.position
            )
        self.max_depth_reached = max(self.max_depth_reached, depth)

        while cursor.position < end_bound:
            chunk = self.extractor.extract_next(cursor)
            if chunk is None:
                break

            if chunk.kind is ChunkType.TAG:
                child, name_end = self._open_element(Tag, chunk, parent)
                error = self._collect_attributes(child, chunk, name_end)
                self._parse_branch(cursor, end_bound, child, depth + 1)
                if error is not None:
                    self._discard(child, error)

            elif chunk.kind is ChunkType.EMPTY_TAG:
                empty, name_end = self._open_element(EmptyTag, chunk, parent)
                error = self._collect_attributes(empty, chunk, name_end)
                if error is not None:
                    self._discard(empty, error)

            elif chunk.kind is ChunkType.CHARACTER_DATA:
                parent.add_character_data(chunk.text)
                self.nodes_created += 1

            elif chunk.kind is ChunkType.PROCESSING_INSTRUCTION:
                target, data = extract_pi_data(chunk.text, chunk.start)
                parent.add_processing_instruction(target, data)
                self.nodes_created += 1

            elif chunk.kind is ChunkType.CLOSE_TAG:
                name, _ = extract_tag_name(chunk.text, chunk.start)
                if parent.is_root:
                    raise TagMismatchError(None, name, offset=chunk.start)
                if name != parent.name:
                    raise TagMismatchError(parent.name, name, offset=chunk.start)
                return

            elif chunk.kind in SKIPPED_CHUNK_TYPES:
                self.logger.debug(
                    "Skipped markup",
                    extra={"chunk_type": chunk.kind.name, "start": chunk.start}
                )

        if not parent.is_root:
            raise UnclosedElementError(parent.name, offset=cursor.position)

    def _open_element(
        self,
        element_type: type,
        chunk: Chunk,
        parent: Tag
    ) -> Tuple[Union[Tag, EmptyTag], int]:
        """Append the element named by ``chunk`` to ``parent``.

        Returns:
            Tuple of (new element, position in the chunk just past its name)
        """
        name, name_end = extract_tag_name(chunk.text, chunk.start)
        element = parent.append_child(element_type(name))
        self.nodes_created += 1
        return element, name_end  # type: ignore[return-value]

    def _collect_attributes(
        self,
        element: Union[Tag, EmptyTag],
        chunk: Chunk,
        position: int
    ) -> Optional[InvalidAttributeError]:
        """Attach the attributes of ``chunk`` to ``element``.

        Returns:
            The attribute error that invalidates the element, or None
        """
        try:
            for attribute in iter_attributes(chunk.text, position, chunk.start):
                element.attributes.append(attribute)
        except InvalidAttributeError as e:
            return e
        return None

    def _discard(
        self,
        element: Union[Tag, EmptyTag],
        error: InvalidAttributeError
    ) -> None:
        released = delete_subtree(element)
        self.nodes_discarded += released
        message = f"Discarded element '{element.name}': {error.message}"
        self.logger.warning(
            message,
            extra={"offset": error.offset, "nodes_released": released}
        )
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component="tree_builder",
            offset=error.offset,
            details={"element": element.name, "nodes_released": released},
            correlation_id=self.correlation_id
        ))
