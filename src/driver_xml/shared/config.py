"""Configuration classes for driver-xml.

This module provides the configuration objects consulted by the tree builder,
the serializer and the public API.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("parser", "serializer", "global_")


@dataclass
class ParserConfig:
    """Configuration for chunk extraction and tree building."""

    max_nesting_depth: int = 256
    validate_characters: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.max_nesting_depth <= 0:
            raise ValueError("max_nesting_depth must be > 0")


@dataclass
class SerializerConfig:
    """Configuration for the growable output buffer."""

    initial_buffer_size: int = 512
    growth_step: int = 512
    max_output_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if self.initial_buffer_size <= 0:
            raise ValueError("initial_buffer_size must be > 0")
        if self.growth_step <= 0:
            raise ValueError("growth_step must be > 0")
        if self.max_output_bytes is not None and self.max_output_bytes <= 0:
            raise ValueError("max_output_bytes must be > 0 or None")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class DriverXmlConfig:
    """Immutable configuration for parsing and rendering.

    Frozen so one instance can be shared between parser objects safely.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.parser.__post_init__()
            self.serializer.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if (
            self.serializer.max_output_bytes is not None
            and self.serializer.initial_buffer_size > self.serializer.max_output_bytes
        ):
            raise ConfigValidationError(
                "serializer.initial_buffer_size exceeds serializer.max_output_bytes",
                field_name="serializer.initial_buffer_size",
                suggestions=["Reduce serializer.initial_buffer_size",
                             "Increase serializer.max_output_bytes"]
            )

    def override(self, **kwargs: Any) -> "DriverXmlConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override

        Returns:
            New DriverXmlConfig instance with overrides applied

        Example:
            >>> config = DriverXmlConfig()
            >>> new_config = config.override(
            ...     parser__max_nesting_depth=32,
            ...     serializer__growth_step=1024
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                # rsplit so "global___field" yields the "global_" component
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component '{component}'",
                        field_name=key
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENTS:
                current = getattr(self, component)
                if component in nested_overrides:
                    new_fields[component] = replace(
                        current, **nested_overrides[component]
                    )
                else:
                    new_fields[component] = current
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        for key, value in nested_overrides.items():
            if key not in _COMPONENTS:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary representation of the configuration
        """
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DriverXmlConfig":
        """Create configuration from dictionary.

        Missing sections and fields take their defaults.

        Args:
            data: Dictionary containing configuration data

        Returns:
            DriverXmlConfig instance created from dictionary

        Raises:
            ConfigValidationError: If a section or field is unknown or invalid
        """
        component_classes = {
            "parser": ParserConfig,
            "serializer": SerializerConfig,
            "global_": GlobalConfig,
        }
        fields: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in component_classes:
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"Section '{key}' must be a mapping", field_name=key
                        )
                    fields[key] = component_classes[key](**value)
                elif key == "name":
                    fields[key] = value
                else:
                    raise ConfigValidationError(
                        f"Unknown configuration section '{key}'", field_name=key
                    )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**fields)

    @classmethod
    def from_json(cls, json_str: str) -> "DriverXmlConfig":
        """Create configuration from JSON string.

        Raises:
            ConfigValidationError: If the text is not a JSON object or fails validation
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "DriverXmlConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "DriverXmlConfig":
        """Create configuration preset for small, trusted driver payloads."""
        return cls(
            parser=ParserConfig(max_nesting_depth=32, validate_characters=True),
            serializer=SerializerConfig(
                initial_buffer_size=512,
                growth_step=512,
                max_output_bytes=1024 * 1024
            ),
            name="strict"
        )

    @classmethod
    def permissive(cls) -> "DriverXmlConfig":
        """Create configuration preset for deep documents with unchecked bytes."""
        return cls(
            parser=ParserConfig(max_nesting_depth=512, validate_characters=False),
            serializer=SerializerConfig(initial_buffer_size=4096, growth_step=4096),
            name="permissive"
        )
