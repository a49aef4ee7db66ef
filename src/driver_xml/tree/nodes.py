"""Document tree node types and the operations that build and tear them down.

A document is a synthetic root ``Tag`` named ``Root`` whose children are the
top-level nodes of the parsed input. Child and attribute lists are plain
ordered lists owned by their parent; every non-root node belongs to exactly one
parent at a time.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, ClassVar, Iterator, List, Optional, Tuple, Union

ROOT_NAME = "Root"


class NodeKind(Enum):
    """Discriminator carried by every node type."""

    TAG = auto()                     # <name ...> ... </name>
    EMPTY_TAG = auto()               # <name .../>
    ATTRIBUTE = auto()               # name="value" inside a tag
    CHARACTER_DATA = auto()          # Text between markup
    PROCESSING_INSTRUCTION = auto()  # <?target data?>


@dataclass(eq=False)
class Attribute:
    """A ``name="value"`` pair attached to a tag.

    A value of ``None`` means the attribute carries no data; it renders as an
    empty quoted string.
    """

    name: str
    value: Optional[str] = None

    kind: ClassVar[NodeKind] = NodeKind.ATTRIBUTE

    def __post_init__(self) -> None:
        """Validate attribute name."""
        if not self.name:
            raise ValueError("Attribute name cannot be empty")

    @property
    def text(self) -> str:
        """Get the attribute value, or an empty string when there is none."""
        return self.value if self.value is not None else ""


class _AttributeHolder:
    """Attribute list operations shared by ``Tag`` and ``EmptyTag``."""

    attributes: List[Attribute]

    @property
    def attribute_count(self) -> int:
        """Get the number of attributes on this tag."""
        return len(self.attributes)

    def add_attribute(self, name: str, value: Optional[str] = None) -> Attribute:
        """Append a new attribute and return it.

        Duplicate names are kept; lookups return the first one.
        """
        attribute = Attribute(name, value)
        self.attributes.append(attribute)
        return attribute

    def find_attribute_by_name(self, name: str) -> Optional[Attribute]:
        """Find the first attribute whose name matches exactly."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


@dataclass(eq=False)
class CharacterData:
    """A run of text exactly as it appeared in the input."""

    data: bytes
    parent: Optional["Tag"] = field(default=None, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.CHARACTER_DATA

    def __post_init__(self) -> None:
        """Normalize data to immutable bytes."""
        if isinstance(self.data, str):
            self.data = self.data.encode("utf-8")
        elif isinstance(self.data, (bytearray, memoryview)):
            self.data = bytes(self.data)
        elif not isinstance(self.data, bytes):
            raise TypeError("Character data must be bytes or str")

    @property
    def length(self) -> int:
        """Get the number of bytes of character data."""
        return len(self.data)

    @property
    def text(self) -> str:
        """Get the data decoded as ASCII, with undecodable bytes replaced."""
        return self.data.decode("ascii", errors="replace")


@dataclass(eq=False)
class ProcessingInstruction:
    """A ``<?target data?>`` instruction."""

    target: str
    data: Optional[str] = None
    parent: Optional["Tag"] = field(default=None, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.PROCESSING_INSTRUCTION

    def __post_init__(self) -> None:
        """Validate target name."""
        if not self.target:
            raise ValueError("Processing instruction target cannot be empty")


@dataclass(eq=False)
class EmptyTag(_AttributeHolder):
    """A self-closing ``<name .../>`` element. It never has children."""

    name: str
    attributes: List[Attribute] = field(default_factory=list)
    parent: Optional["Tag"] = field(default=None, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.EMPTY_TAG

    def __post_init__(self) -> None:
        """Validate tag name."""
        if not self.name:
            raise ValueError("Tag name cannot be empty")

    @property
    def child_count(self) -> int:
        return 0

    def append_child(self, node: Any) -> None:
        raise TypeError(f"Empty tag '{self.name}' cannot have children")


@dataclass(eq=False)
class Tag(_AttributeHolder):
    """An element with a start tag, an end tag and ordered children.

    The document root is a ``Tag`` with ``is_root`` set; it is never the child
    of another node.
    """

    name: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Tag"] = field(default=None, repr=False)
    is_root: bool = False

    kind: ClassVar[NodeKind] = NodeKind.TAG

    def __post_init__(self) -> None:
        """Validate tag name and establish parent links for given children."""
        if not self.name:
            raise ValueError("Tag name cannot be empty")
        if self.is_root and self.parent is not None:
            raise ValueError("The root tag cannot have a parent")
        for child in self.children:
            if child.parent is not None and child.parent is not self:
                raise ValueError("Child already belongs to another tag")
            child.parent = self

    @classmethod
    def create_root(cls) -> "Tag":
        """Create an empty document root."""
        return cls(ROOT_NAME, is_root=True)

    @property
    def child_count(self) -> int:
        """Get the number of direct children."""
        return len(self.children)

    @property
    def depth(self) -> int:
        """Get the number of ancestors of this tag (root = 0)."""
        depth = 0
        ancestor = self.parent
        while ancestor is not None:
            depth += 1
            ancestor = ancestor.parent
        return depth

    def append_child(self, node: "Node") -> "Node":
        """Append ``node`` as the last child of this tag.

        Args:
            node: Detached node to append

        Returns:
            The appended node

        Raises:
            TypeError: If ``node`` is not a tree node
            ValueError: If ``node`` already has a parent, is a root, or is an
                ancestor of this tag
        """
        if not isinstance(node, (Tag, EmptyTag, CharacterData, ProcessingInstruction)):
            raise TypeError(f"Cannot append {type(node).__name__} as a child")
        if node.parent is not None:
            raise ValueError("Node already belongs to a tag")
        if isinstance(node, Tag):
            if node.is_root:
                raise ValueError("The root tag cannot be appended as a child")
            ancestor: Optional[Tag] = self
            while ancestor is not None:
                if ancestor is node:
                    raise ValueError("Appending a tag beneath itself creates a cycle")
                ancestor = ancestor.parent

        node.parent = self
        self.children.append(node)
        return node

    def create_tag(self, name: str) -> "Tag":
        """Append a new child element and return it."""
        return self.append_child(Tag(name))  # type: ignore[return-value]

    def create_empty_tag(self, name: str) -> EmptyTag:
        """Append a new self-closing child element and return it."""
        return self.append_child(EmptyTag(name))  # type: ignore[return-value]

    def add_character_data(self, data: Union[bytes, str]) -> CharacterData:
        """Append a text child and return it."""
        return self.append_child(CharacterData(data))  # type: ignore[return-value]

    def add_processing_instruction(
        self, target: str, data: Optional[str] = None
    ) -> ProcessingInstruction:
        """Append a processing-instruction child and return it."""
        return self.append_child(  # type: ignore[return-value]
            ProcessingInstruction(target, data)
        )

    def iter_descendants(self) -> Iterator["Node"]:
        """Iterate over all descendants in document (depth-first pre-) order."""
        stack: List[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Tag):
                stack.extend(reversed(node.children))

    def find_tag_by_name(self, name: str) -> Optional[Union["Tag", EmptyTag]]:
        """Find the first descendant element named ``name``.

        The whole subtree is searched in document order, so a match nested
        under an earlier sibling wins over a later sibling.
        """
        for node in self.iter_descendants():
            if isinstance(node, (Tag, EmptyTag)) and node.name == name:
                return node
        return None

    def count_nodes(self) -> int:
        """Count all descendant nodes, attributes excluded."""
        return sum(1 for _ in self.iter_descendants())

    def count_elements(self) -> int:
        """Count descendant ``Tag`` and ``EmptyTag`` nodes."""
        return sum(
            1 for node in self.iter_descendants()
            if isinstance(node, (Tag, EmptyTag))
        )

    def max_depth(self) -> int:
        """Get the depth of the deepest descendant relative to this tag."""
        deepest = 0
        stack: List[Tuple[Node, int]] = [(child, 1) for child in self.children]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            if isinstance(node, Tag):
                stack.extend((child, level + 1) for child in node.children)
        return deepest

    def structure(self) -> Tuple[Any, ...]:
        """Get a nested tuple view of this subtree for structural comparison."""
        return _structure(self)


Node = Union[Tag, EmptyTag, CharacterData, ProcessingInstruction]


def _structure(node: Node) -> Tuple[Any, ...]:
    if isinstance(node, Tag):
        return (
            "tag",
            node.name,
            tuple((a.name, a.value) for a in node.attributes),
            tuple(_structure(child) for child in node.children),
        )
    if isinstance(node, EmptyTag):
        return (
            "empty",
            node.name,
            tuple((a.name, a.value) for a in node.attributes),
        )
    if isinstance(node, CharacterData):
        return ("text", node.data)
    if isinstance(node, ProcessingInstruction):
        return ("pi", node.target, node.data)
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def delete_subtree(node: Node) -> int:
    """Release ``node`` and everything beneath it.

    Attributes go first, then each child subtree (last to first), then the
    node is unlinked from its parent. Sibling order of the remaining children
    is unchanged. Deleting the root empties it in place instead.

    Args:
        node: Node to delete

    Returns:
        Number of nodes released, attributes included. The root itself is not
        counted because it survives the call.
    """
    released = 0
    # (node, children_done); a node is unlinked only after its children
    stack: List[Tuple[Node, bool]] = [(node, False)]
    while stack:
        current, children_done = stack.pop()
        if not children_done:
            if isinstance(current, (Tag, EmptyTag)):
                released += len(current.attributes)
                current.attributes.clear()
            stack.append((current, True))
            if isinstance(current, Tag):
                # Pushed in order so the last child is released first
                stack.extend((child, False) for child in current.children)
            continue

        if isinstance(current, Tag) and current.is_root:
            continue

        parent = current.parent
        if parent is not None:
            if parent.children and parent.children[-1] is current:
                parent.children.pop()
            else:
                parent.children.remove(current)
            current.parent = None
        released += 1

    return released
