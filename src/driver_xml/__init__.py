"""driver-xml: a small XML parser and serializer for ASCII driver payloads.

Turns a byte buffer holding a restricted, ASCII-only subset of XML into an
ordered tree of tags, empty tags, character data and processing instructions,
and turns such a tree back into equivalent text.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), render()
- Level 2: Configured parser - DriverXmlParser class
"""

__version__ = "0.1.0"
__author__ = "driver-xml developers"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured parser
from .api import (
    DriverXmlParser,
    parse,
    parse_file,
    parse_string,
    render,
    render_pretty,
)

# Configuration and status types for advanced usage
from .shared.config import DriverXmlConfig
from .shared.errors import DriverXmlError, XmlStatus

# Core result objects and tree nodes
from .tree.builder import ParseResult
from .tree.nodes import (
    Attribute,
    CharacterData,
    EmptyTag,
    ProcessingInstruction,
    Tag,
    delete_subtree,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "render",
    "render_pretty",

    # Level 2: Configured parser
    "DriverXmlParser",

    # Results, status and tree nodes
    "ParseResult",
    "XmlStatus",
    "DriverXmlError",
    "Attribute",
    "CharacterData",
    "EmptyTag",
    "ProcessingInstruction",
    "Tag",
    "delete_subtree",

    # Configuration
    "DriverXmlConfig",
]
