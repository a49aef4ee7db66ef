"""Lexical layer: chunk extraction plus name, attribute and PI extraction."""

from .attributes import (
    extract_attribute,
    extract_pi_data,
    extract_tag_name,
    iter_attributes,
)
from .extractor import (
    SKIPPED_CHUNK_TYPES,
    Chunk,
    ChunkExtractor,
    ChunkType,
    Cursor,
)

__all__ = [
    "extract_attribute",
    "extract_pi_data",
    "extract_tag_name",
    "iter_attributes",
    "SKIPPED_CHUNK_TYPES",
    "Chunk",
    "ChunkExtractor",
    "ChunkType",
    "Cursor",
]
