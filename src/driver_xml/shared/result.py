"""Diagnostic and performance records shared by the parser and serializer."""

import os
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

import psutil


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Input was tolerated but something was dropped
    ERROR = auto()
    CRITICAL = auto()   # The operation failed


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    offset: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to a JSON-friendly dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "offset": self.offset,
            "details": dict(self.details) if self.details else {},
        }


@dataclass
class PerformanceMetrics:
    """Performance counters for a parse operation."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    bytes_processed: int = 0
    chunks_extracted: int = 0
    nodes_created: int = 0
    nodes_discarded: int = 0
    max_depth_reached: int = 0

    @property
    def bytes_per_second(self) -> float:
        """Calculate input bytes processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms

    @property
    def chunks_per_second(self) -> float:
        """Calculate chunks extracted per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.chunks_extracted * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "bytes_processed": self.bytes_processed,
            "chunks_extracted": self.chunks_extracted,
            "nodes_created": self.nodes_created,
            "nodes_discarded": self.nodes_discarded,
            "max_depth_reached": self.max_depth_reached,
        }


def current_memory_usage() -> int:
    """Return the resident set size of this process in bytes."""
    return psutil.Process(os.getpid()).memory_info().rss
