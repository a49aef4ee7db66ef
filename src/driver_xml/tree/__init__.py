"""Document tree for driver-xml.

Key Components:
    Tag: Element with attributes and ordered children (also the document root)
    EmptyTag: Self-closing element with attributes only
    Attribute: name="value" pair
    CharacterData: Text exactly as consumed from the input
    ProcessingInstruction: <?target data?>

The recursive-descent builder lives in ``driver_xml.tree.builder``; it depends
on the lexical layer, which in turn depends on the node types exported here.
"""

from .nodes import (
    ROOT_NAME,
    Attribute,
    CharacterData,
    EmptyTag,
    Node,
    NodeKind,
    ProcessingInstruction,
    Tag,
    delete_subtree,
)

__all__ = [
    "ROOT_NAME",
    "Attribute",
    "CharacterData",
    "EmptyTag",
    "Node",
    "NodeKind",
    "ProcessingInstruction",
    "Tag",
    "delete_subtree",
]
