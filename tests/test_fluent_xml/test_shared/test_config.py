"""Tests for the configuration system."""

import json

import pytest

from fluent_xml.shared.config import (
    ENV_CHUNK_SIZE,
    ENV_INDENT_UNIT,
    ENV_KEY_SEPARATOR,
    ConfigError,
    ConfigValidationError,
    FlattenConfig,
    QueryConfig,
    SerializerConfig,
    XMLConfig,
)


class TestSerializerConfig:
    """Test suite for SerializerConfig."""

    def test_default_configuration(self):
        """Test that the defaults are the four-space wire format."""
        config = SerializerConfig()

        assert config.indent_unit == "    "
        assert config.newline == "\n"

    def test_custom_whitespace_accepted(self):
        """Test that any whitespace indent and newline are accepted."""
        config = SerializerConfig(indent_unit="\t", newline="\r\n")

        assert config.indent_unit == "\t"

    def test_validation_failures(self):
        """Test serializer configuration validation failures."""
        with pytest.raises(ValueError, match="indent_unit must contain only whitespace"):
            SerializerConfig(indent_unit="--")

        with pytest.raises(ValueError, match="newline must be a non-empty whitespace string"):
            SerializerConfig(newline="")

        with pytest.raises(ValueError, match="newline must be a non-empty whitespace string"):
            SerializerConfig(newline="x")


class TestQueryConfig:
    """Test suite for QueryConfig."""

    def test_default_configuration(self):
        """Test default query configuration values."""
        config = QueryConfig()

        assert config.enable_caching is True
        assert config.cache_size_limit == 256

    def test_zero_cache_allowed(self):
        """Test that a zero cache size is a valid way to disable caching."""
        assert QueryConfig(cache_size_limit=0).cache_size_limit == 0

    def test_negative_cache_rejected(self):
        """Test that a negative cache size is rejected."""
        with pytest.raises(ValueError, match="cache_size_limit must be >= 0"):
            QueryConfig(cache_size_limit=-1)


class TestFlattenConfig:
    """Test suite for FlattenConfig."""

    def test_default_configuration(self):
        """Test default flatten configuration values."""
        config = FlattenConfig()

        assert config.key_separator == "."
        assert config.chunk_size == 8192
        assert config.huge_tree is False

    def test_validation_failures(self):
        """Test flatten configuration validation failures."""
        with pytest.raises(ValueError, match="key_separator cannot be empty"):
            FlattenConfig(key_separator="")

        with pytest.raises(ValueError, match="chunk_size must be > 0"):
            FlattenConfig(chunk_size=0)


class TestXMLConfig:
    """Test suite for the aggregate XMLConfig."""

    def test_default_configuration(self):
        """Test that the aggregate holds default component configurations."""
        config = XMLConfig()

        assert config.serializer == SerializerConfig()
        assert config.query == QueryConfig()
        assert config.flatten == FlattenConfig()
        assert config.name is None

    def test_frozen(self):
        """Test that the aggregate cannot be mutated."""
        config = XMLConfig()

        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_override_nested_fields(self):
        """Test component__field overrides create a new configuration."""
        config = XMLConfig()
        updated = config.override(
            flatten__key_separator="/",
            query__cache_size_limit=8,
            name="custom",
        )

        assert updated.flatten.key_separator == "/"
        assert updated.query.cache_size_limit == 8
        assert updated.name == "custom"
        assert config.flatten.key_separator == "."

    def test_override_unknown_component(self):
        """Test that an unknown component is reported with suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            XMLConfig().override(parser__strict=True)

        assert exc_info.value.field_name == "parser__strict"
        assert "flatten" in exc_info.value.suggestions

    def test_override_unknown_field(self):
        """Test that an unknown field inside a component is rejected."""
        with pytest.raises(ConfigValidationError):
            XMLConfig().override(flatten__missing=1)

    def test_override_invalid_value(self):
        """Test that validation runs on overridden components."""
        with pytest.raises(ConfigValidationError, match="key_separator cannot be empty"):
            XMLConfig().override(flatten__key_separator="")

    def test_validation_error_is_config_error(self):
        """Test the exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)

    def test_to_dict(self):
        """Test conversion to a plain dictionary."""
        data = XMLConfig(name="demo").to_dict()

        assert data["serializer"] == {"indent_unit": "    ", "newline": "\n"}
        assert data["flatten"]["key_separator"] == "."
        assert data["name"] == "demo"

    def test_json_round_trip(self):
        """Test that a configuration survives JSON serialization."""
        config = XMLConfig().override(flatten__chunk_size=16, description="small chunks")

        restored = XMLConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["flatten"]["chunk_size"] == 16

    def test_from_dict_ignores_unknown_keys(self):
        """Test that unknown keys in a dump are skipped."""
        config = XMLConfig.from_dict({
            "flatten": {"key_separator": "_", "legacy_option": True},
            "unknown_component": {},
        })

        assert config.flatten.key_separator == "_"

    def test_from_dict_invalid_value(self):
        """Test that invalid dumped values raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError):
            XMLConfig.from_dict({"flatten": {"chunk_size": -5}})


class TestXMLConfigFromEnv:
    """Test suite for environment-driven configuration."""

    def test_empty_environment(self):
        """Test that no variables leaves the defaults in place."""
        assert XMLConfig.from_env({}) == XMLConfig()

    def test_all_variables(self):
        """Test that every supported variable is applied."""
        config = XMLConfig.from_env({
            ENV_KEY_SEPARATOR: "::",
            ENV_INDENT_UNIT: "  ",
            ENV_CHUNK_SIZE: "1024",
        })

        assert config.flatten.key_separator == "::"
        assert config.serializer.indent_unit == "  "
        assert config.flatten.chunk_size == 1024

    def test_non_integer_chunk_size(self):
        """Test that a non-numeric chunk size is reported clearly."""
        with pytest.raises(ConfigValidationError, match=ENV_CHUNK_SIZE) as exc_info:
            XMLConfig.from_env({ENV_CHUNK_SIZE: "large"})

        assert exc_info.value.field_name == "flatten.chunk_size"

    def test_reads_process_environment(self, monkeypatch):
        """Test that os.environ is read when no mapping is given."""
        monkeypatch.setenv(ENV_KEY_SEPARATOR, "/")
        monkeypatch.delenv(ENV_INDENT_UNIT, raising=False)
        monkeypatch.delenv(ENV_CHUNK_SIZE, raising=False)

        assert XMLConfig.from_env().flatten.key_separator == "/"
