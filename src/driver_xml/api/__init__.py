"""Public API for driver-xml with progressive disclosure.

Level 1 functions parse and render in a single call; Level 2 is the reusable
``DriverXmlParser`` class.
"""

from .parser import (
    DriverXmlParser,
    parse,
    parse_file,
    parse_string,
    render,
    render_pretty,
)

__all__ = [
    "DriverXmlParser",
    "parse",
    "parse_file",
    "parse_string",
    "render",
    "render_pretty",
]
