"""Serialization of document trees into compact and indented text."""

from .writer import OutputBuffer, PrettyPrinter, XmlWriter, attribute_text

__all__ = [
    "OutputBuffer",
    "PrettyPrinter",
    "XmlWriter",
    "attribute_text",
]
