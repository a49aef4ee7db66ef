"""Serialization of document trees back into text.

``XmlWriter`` produces the compact form (no added whitespace) into a growable
``OutputBuffer``. ``PrettyPrinter`` produces an indented, human-readable view
used for debugging.
"""

from typing import Callable, Dict, List, Optional, Union

from driver_xml.character import encode_text, is_printable
from driver_xml.shared.config import SerializerConfig
from driver_xml.shared.errors import InvalidArgumentError, OutOfResourcesError
from driver_xml.shared.logging import get_logger
from driver_xml.tree.nodes import (
    Attribute,
    CharacterData,
    EmptyTag,
    Node,
    NodeKind,
    ProcessingInstruction,
    Tag,
)

INDENT = "  "

# Pending work on the writer stack: a node still to render, or literal bytes
_Pending = Union[Node, bytes]


class OutputBuffer:
    """Byte buffer that grows in fixed steps as output is appended.

    Capacity starts at zero. The first write allocates the larger of the
    initial size and the write; later overflowing writes grow capacity by the
    growth step, or by the write size plus one when the write is at least a
    step long.
    """

    def __init__(
        self,
        initial_size: int = 512,
        growth_step: int = 512,
        max_size: Optional[int] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        if initial_size <= 0:
            raise ValueError("initial_size must be > 0")
        if growth_step <= 0:
            raise ValueError("growth_step must be > 0")
        if max_size is not None and max_size <= 0:
            raise ValueError("max_size must be > 0 or None")

        self.initial_size = initial_size
        self.growth_step = growth_step
        self.max_size = max_size
        self.logger = get_logger(__name__, correlation_id, "output_buffer")

        self._storage = bytearray()
        self._length = 0
        self.grow_count = 0

    @classmethod
    def from_config(
        cls,
        config: SerializerConfig,
        correlation_id: Optional[str] = None
    ) -> "OutputBuffer":
        """Create a buffer sized by a serializer configuration."""
        return cls(
            initial_size=config.initial_buffer_size,
            growth_step=config.growth_step,
            max_size=config.max_output_bytes,
            correlation_id=correlation_id
        )

    @property
    def capacity(self) -> int:
        """Get the currently allocated size in bytes."""
        return len(self._storage)

    def __len__(self) -> int:
        return self._length

    def write(self, data: bytes) -> None:
        """Append ``data``, growing the storage when it does not fit.

        Raises:
            OutOfResourcesError: If memory runs out or the maximum size would
                be exceeded
        """
        pending = len(data)
        needed = self._length + pending
        if needed > self.capacity:
            if self.capacity == 0:
                new_capacity = max(self.initial_size, pending)
            elif pending < self.growth_step:
                new_capacity = self.capacity + self.growth_step
            else:
                new_capacity = self.capacity + pending + 1
            self._grow(new_capacity, needed)

        self._storage[self._length:needed] = data
        self._length = needed

    def _grow(self, new_capacity: int, needed: int) -> None:
        if self.max_size is not None:
            if needed > self.max_size:
                raise OutOfResourcesError(
                    f"Output exceeds maximum size of {self.max_size} bytes",
                    offset=self._length,
                    details={"max_size": self.max_size, "needed": needed}
                )
            new_capacity = min(new_capacity, self.max_size)

        try:
            storage = bytearray(new_capacity)
        except MemoryError as e:
            raise OutOfResourcesError(
                f"Unable to allocate {new_capacity} bytes of output",
                offset=self._length,
                details={"requested": new_capacity}
            ) from e

        storage[:self._length] = self._storage[:self._length]
        self._storage = storage
        self.grow_count += 1
        self.logger.debug(
            "Output buffer grown",
            extra={"capacity": new_capacity, "length": self._length}
        )

    def getvalue(self) -> bytes:
        """Get exactly the bytes written so far."""
        return bytes(self._storage[:self._length])


def _quote_value(name: str, value: str) -> str:
    # Single quotes only when the value itself holds a double quote
    if '"' in value:
        if "'" in value:
            raise InvalidArgumentError(
                f"Attribute '{name}' value contains both quote characters",
                details={"name": name, "value": value}
            )
        return f"'{value}'"
    return f'"{value}"'


def attribute_text(attribute: Attribute) -> str:
    """Render one attribute as `` name="value"`` with its leading space.

    Raises:
        InvalidArgumentError: If the value holds both ``"`` and ``'``, which
            no quoting can delimit without entity escapes
    """
    return f" {attribute.name}={_quote_value(attribute.name, attribute.text)}"


def _attributes_text(attributes: List[Attribute]) -> str:
    return "".join(attribute_text(attribute) for attribute in attributes)


def _pi_text(pi: ProcessingInstruction) -> str:
    if pi.data is None:
        return f"<?{pi.target}?>"
    return f"<?{pi.target} {pi.data}?>"


class XmlWriter:
    """Render nodes into compact markup.

    Tags are emitted with their attributes, children and close tag; empty tags
    as ``<name/>``; processing instructions as ``<?target data?>``; character
    data verbatim.
    """

    def __init__(
        self,
        config: Optional[SerializerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize writer.

        Args:
            config: Serializer configuration; defaults are used when omitted
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or SerializerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_writer")
        self._handlers: Dict[
            NodeKind, Callable[[_Pending, OutputBuffer, List[_Pending]], None]
        ] = {
            NodeKind.TAG: self._write_tag,
            NodeKind.EMPTY_TAG: self._write_empty_tag,
            NodeKind.ATTRIBUTE: self._write_attribute,
            NodeKind.CHARACTER_DATA: self._write_character_data,
            NodeKind.PROCESSING_INSTRUCTION: self._write_processing_instruction,
        }

    def render(self, node: Union[Node, Attribute]) -> bytes:
        """Render ``node`` and its subtree.

        Rendering the root includes the ``<Root>`` tag itself; use
        ``render_children`` for the document content alone.

        Raises:
            TypeError: If ``node`` is not a tree node
            OutOfResourcesError: If the output cannot be allocated
        """
        out = OutputBuffer.from_config(self.config, self.correlation_id)
        self._write_all([node], out)
        return out.getvalue()

    def render_children(self, tag: Tag) -> bytes:
        """Render the children of ``tag`` in order, without the tag itself."""
        out = OutputBuffer.from_config(self.config, self.correlation_id)
        self._write_all(list(reversed(tag.children)), out)
        return out.getvalue()

    def _write_all(self, stack: List[_Pending], out: OutputBuffer) -> None:
        while stack:
            item = stack.pop()
            if isinstance(item, bytes):
                out.write(item)
                continue
            handler = self._handlers.get(getattr(item, "kind", None))  # type: ignore[arg-type]
            if handler is None:
                raise TypeError(f"Cannot render {type(item).__name__}")
            handler(item, out, stack)

        self.logger.debug(
            "Rendered output",
            extra={"length": len(out), "grow_count": out.grow_count}
        )

    def _write_tag(self, tag: Tag, out: OutputBuffer, stack: List[_Pending]) -> None:
        out.write(encode_text(f"<{tag.name}{_attributes_text(tag.attributes)}>"))
        stack.append(encode_text(f"</{tag.name}>"))
        stack.extend(reversed(tag.children))

    def _write_empty_tag(
        self, tag: EmptyTag, out: OutputBuffer, stack: List[_Pending]
    ) -> None:
        out.write(encode_text(f"<{tag.name}{_attributes_text(tag.attributes)}/>"))

    def _write_attribute(
        self, attribute: Attribute, out: OutputBuffer, stack: List[_Pending]
    ) -> None:
        out.write(encode_text(attribute_text(attribute)))

    def _write_character_data(
        self, text: CharacterData, out: OutputBuffer, stack: List[_Pending]
    ) -> None:
        out.write(text.data)

    def _write_processing_instruction(
        self, pi: ProcessingInstruction, out: OutputBuffer, stack: List[_Pending]
    ) -> None:
        out.write(encode_text(_pi_text(pi)))


class PrettyPrinter:
    """Render a subtree as indented lines for inspection.

    Each nesting level adds two spaces. Character data gets a line of its own
    with non-printable bytes shown as ``.``.
    """

    def render(self, node: Node) -> str:
        """Render ``node`` and its subtree, one item per line.

        Raises:
            TypeError: If ``node`` is not a tree node
        """
        lines: List[str] = []
        # (item, level); a str item is a ready-made close line
        stack: List[tuple] = [(node, 0)]
        while stack:
            item, level = stack.pop()
            indent = INDENT * level
            if isinstance(item, str):
                lines.append(indent + item)
            elif isinstance(item, Tag):
                lines.append(f"{indent}<{item.name}{_attributes_text(item.attributes)}>")
                stack.append((f"</{item.name}>", level))
                stack.extend((child, level + 1) for child in reversed(item.children))
            elif isinstance(item, EmptyTag):
                lines.append(
                    f"{indent}<{item.name}{_attributes_text(item.attributes)}/>"
                )
            elif isinstance(item, ProcessingInstruction):
                lines.append(indent + _pi_text(item))
            elif isinstance(item, CharacterData):
                lines.append(indent + "".join(
                    chr(value) if is_printable(value) else "." for value in item.data
                ))
            else:
                raise TypeError(f"Cannot render {type(item).__name__}")
        return "".join(line + "\n" for line in lines)
