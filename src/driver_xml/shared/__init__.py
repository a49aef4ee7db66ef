"""Shared utilities for driver-xml.

This module provides configuration objects, status codes and exceptions,
diagnostic records and logging helpers used across all components.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DriverXmlConfig,
    GlobalConfig,
    ParserConfig,
    SerializerConfig,
)
from .errors import (
    DriverXmlError,
    InvalidArgumentError,
    InvalidAttributeError,
    InvalidCharacterError,
    InvalidNameError,
    MalformedInputError,
    NestingDepthError,
    OutOfResourcesError,
    TagMismatchError,
    TruncatedInputError,
    UnclosedElementError,
    XmlStatus,
)
from .logging import CorrelationLogger, configure_logging, get_logger
from .result import DiagnosticEntry, DiagnosticSeverity, PerformanceMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DriverXmlConfig",
    "GlobalConfig",
    "ParserConfig",
    "SerializerConfig",
    "DriverXmlError",
    "InvalidArgumentError",
    "InvalidAttributeError",
    "InvalidCharacterError",
    "InvalidNameError",
    "MalformedInputError",
    "NestingDepthError",
    "OutOfResourcesError",
    "TagMismatchError",
    "TruncatedInputError",
    "UnclosedElementError",
    "XmlStatus",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
