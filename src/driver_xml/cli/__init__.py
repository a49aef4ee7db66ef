"""Command-line interface for driver-xml.

Parses a single document and prints its tree, its compact re-serialization and
optionally a hex dump of the output.
"""

from .main import main

__all__ = ["main"]
