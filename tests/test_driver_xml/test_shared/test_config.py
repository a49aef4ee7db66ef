"""Tests for the configuration system."""

import dataclasses
import json

import pytest

from driver_xml.shared.config import (
    ConfigError,
    ConfigValidationError,
    DriverXmlConfig,
    GlobalConfig,
    ParserConfig,
    SerializerConfig,
)


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self) -> None:
        """Test default parser configuration values."""
        config = ParserConfig()

        assert config.max_nesting_depth == 256
        assert config.validate_characters is True

    def test_validation_failures(self) -> None:
        """Test that a non-positive depth limit is rejected."""
        with pytest.raises(ValueError, match="max_nesting_depth must be > 0"):
            ParserConfig(max_nesting_depth=0)
        with pytest.raises(ValueError, match="max_nesting_depth must be > 0"):
            ParserConfig(max_nesting_depth=-5)


class TestSerializerConfig:
    """Test suite for SerializerConfig."""

    def test_default_configuration(self) -> None:
        """Test default serializer configuration values."""
        config = SerializerConfig()

        assert config.initial_buffer_size == 512
        assert config.growth_step == 512
        assert config.max_output_bytes is None

    def test_validation_failures(self) -> None:
        """Test serializer configuration validation failures."""
        with pytest.raises(ValueError, match="initial_buffer_size must be > 0"):
            SerializerConfig(initial_buffer_size=0)
        with pytest.raises(ValueError, match="growth_step must be > 0"):
            SerializerConfig(growth_step=0)
        with pytest.raises(ValueError, match="max_output_bytes must be > 0 or None"):
            SerializerConfig(max_output_bytes=0)


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_configuration(self) -> None:
        """Test default global configuration values."""
        config = GlobalConfig()

        assert config.logging_level == "WARNING"
        assert config.enable_correlation_tracking is True
        assert config.enable_metrics is True

    def test_invalid_logging_level(self) -> None:
        """Test that unknown logging levels are rejected."""
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestDriverXmlConfig:
    """Test suite for the aggregate configuration."""

    def test_default_components(self) -> None:
        """Test that the aggregate holds default component configs."""
        config = DriverXmlConfig()

        assert config.parser == ParserConfig()
        assert config.serializer == SerializerConfig()
        assert config.global_ == GlobalConfig()
        assert config.name is None

    def test_is_frozen(self) -> None:
        """Test that the aggregate cannot be mutated."""
        config = DriverXmlConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.name = "changed"  # type: ignore[misc]

    def test_cross_component_validation(self) -> None:
        """Test that an initial buffer larger than the output cap is rejected."""
        with pytest.raises(ConfigValidationError, match="initial_buffer_size exceeds"):
            DriverXmlConfig(
                serializer=SerializerConfig(initial_buffer_size=1024, max_output_bytes=100)
            )

    def test_override_nested_fields(self) -> None:
        """Test overriding component fields with double-underscore keys."""
        config = DriverXmlConfig()

        new_config = config.override(
            parser__max_nesting_depth=8,
            serializer__growth_step=64,
            global___logging_level="DEBUG",
            name="custom"
        )

        assert new_config.parser.max_nesting_depth == 8
        assert new_config.serializer.growth_step == 64
        assert new_config.global_.logging_level == "DEBUG"
        assert new_config.name == "custom"
        # Original untouched
        assert config.parser.max_nesting_depth == 256

    def test_override_invalid_value_raises(self) -> None:
        """Test that overrides are validated."""
        with pytest.raises(ConfigValidationError, match="max_nesting_depth must be > 0"):
            DriverXmlConfig().override(parser__max_nesting_depth=0)

    def test_override_unknown_component_raises(self) -> None:
        """Test that unknown components are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            DriverXmlConfig().override(tokenizer__speed=1)

    def test_override_unknown_field_raises(self) -> None:
        """Test that unknown fields of a known component are rejected."""
        with pytest.raises(ConfigValidationError):
            DriverXmlConfig().override(parser__bogus=1)

    def test_dict_round_trip(self) -> None:
        """Test conversion to and from a dictionary."""
        config = DriverXmlConfig.strict()

        data = config.to_dict()
        restored = DriverXmlConfig.from_dict(data)

        assert data["parser"]["max_nesting_depth"] == 32
        assert data["serializer"]["max_output_bytes"] == 1024 * 1024
        assert restored == config

    def test_json_round_trip(self) -> None:
        """Test conversion to and from JSON."""
        config = DriverXmlConfig().override(parser__validate_characters=False)

        restored = DriverXmlConfig.from_json(config.to_json())

        assert json.loads(config.to_json())["parser"]["validate_characters"] is False
        assert restored == config

    def test_from_dict_partial_uses_defaults(self) -> None:
        """Test that missing sections and fields take defaults."""
        config = DriverXmlConfig.from_dict({"parser": {"max_nesting_depth": 10}})

        assert config.parser.max_nesting_depth == 10
        assert config.parser.validate_characters is True
        assert config.serializer == SerializerConfig()

    def test_from_dict_errors(self) -> None:
        """Test rejection of unknown sections, unknown fields and bad values."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration section"):
            DriverXmlConfig.from_dict({"tree": {}})
        with pytest.raises(ConfigValidationError):
            DriverXmlConfig.from_dict({"parser": {"depth": 3}})
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            DriverXmlConfig.from_dict({"parser": 3})
        with pytest.raises(ConfigValidationError, match="growth_step must be > 0"):
            DriverXmlConfig.from_dict({"serializer": {"growth_step": -1}})

    def test_from_json_errors(self) -> None:
        """Test rejection of malformed JSON and non-object JSON."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            DriverXmlConfig.from_json("{not json")
        with pytest.raises(ConfigValidationError, match="must be an object"):
            DriverXmlConfig.from_json("[1, 2]")

    def test_validation_error_is_config_error(self) -> None:
        """Test the configuration exception hierarchy."""
        error = ConfigValidationError("bad", field_name="x", suggestions=["fix"])

        assert isinstance(error, ConfigError)
        assert error.field_name == "x"
        assert error.suggestions == ["fix"]

    def test_presets(self) -> None:
        """Test the preset factory methods."""
        default = DriverXmlConfig.default()
        strict = DriverXmlConfig.strict()
        permissive = DriverXmlConfig.permissive()

        assert default.name == "default"
        assert default.parser == ParserConfig()

        assert strict.name == "strict"
        assert strict.parser.max_nesting_depth < default.parser.max_nesting_depth
        assert strict.serializer.max_output_bytes is not None

        assert permissive.name == "permissive"
        assert permissive.parser.max_nesting_depth > default.parser.max_nesting_depth
        assert permissive.parser.validate_characters is False
