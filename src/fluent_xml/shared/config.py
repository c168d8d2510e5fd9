"""Configuration classes for fluent XML rendering, querying and flattening.

Component configurations validate themselves in ``__post_init__``; the frozen
``XMLConfig`` aggregate ties them together and handles serialization,
overrides and environment loading.
"""

import json
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

# Environment variables understood by XMLConfig.from_env()
ENV_KEY_SEPARATOR = "FLUENT_XML_KEY_SEPARATOR"
ENV_INDENT_UNIT = "FLUENT_XML_INDENT_UNIT"
ENV_CHUNK_SIZE = "FLUENT_XML_CHUNK_SIZE"

_COMPONENTS = ("serializer", "query", "flatten")


@dataclass
class SerializerConfig:
    """Configuration for rendering node trees to text.

    The defaults are the wire format the path-query layer matches against.
    """

    indent_unit: str = "    "
    newline: str = "\n"

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if self.indent_unit.strip():
            raise ValueError("indent_unit must contain only whitespace")
        if not self.newline or self.newline.strip():
            raise ValueError("newline must be a non-empty whitespace string")


@dataclass
class QueryConfig:
    """Configuration for path-expression compilation."""

    enable_caching: bool = True
    cache_size_limit: int = 256

    def __post_init__(self) -> None:
        """Validate query configuration."""
        if self.cache_size_limit < 0:
            raise ValueError("cache_size_limit must be >= 0")


@dataclass
class FlattenConfig:
    """Configuration for streaming XML flattening."""

    key_separator: str = "."
    chunk_size: int = 8192
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate flatten configuration."""
        if not self.key_separator:
            raise ValueError("key_separator cannot be empty")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


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
class XMLConfig:
    """Immutable configuration for every fluent XML component.

    Thread-safe due to frozen dataclass implementation.
    """

    serializer: SerializerConfig = field(default_factory=SerializerConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    flatten: FlattenConfig = field(default_factory=FlattenConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Re-validate the component configurations."""
        try:
            self.serializer.__post_init__()
            self.query.__post_init__()
            self.flatten.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "XMLConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Top-level fields, or ``component__field`` for nested ones

        Returns:
            New XMLConfig instance with overrides applied

        Example:
            >>> config = XMLConfig().override(flatten__key_separator="/")
            >>> config.flatten.key_separator
            '/'
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENTS:
                current_config = getattr(self, component)
                if isinstance(nested_overrides.get(component), dict):
                    new_fields[component] = replace(
                        current_config, **nested_overrides[component]
                    )
                else:
                    new_fields[component] = nested_overrides.get(
                        component, current_config
                    )

            for key, value in nested_overrides.items():
                if key not in _COMPONENTS:
                    new_fields[key] = value

            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XMLConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored so that older or newer dumps still load.
        """
        component_classes = {
            "serializer": SerializerConfig,
            "query": QueryConfig,
            "flatten": FlattenConfig,
        }

        field_values: Dict[str, Any] = {}
        try:
            for name, component_class in component_classes.items():
                if name in data:
                    known = component_class.__dataclass_fields__
                    field_values[name] = component_class(
                        **{k: v for k, v in data[name].items() if k in known}
                    )
            for name in ("name", "description"):
                if name in data:
                    field_values[name] = data[name]
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "XMLConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "XMLConfig":
        """Create configuration from ``FLUENT_XML_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            XMLConfig with any variables that are set applied over the defaults
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}

        if ENV_KEY_SEPARATOR in environ:
            overrides["flatten__key_separator"] = environ[ENV_KEY_SEPARATOR]
        if ENV_INDENT_UNIT in environ:
            overrides["serializer__indent_unit"] = environ[ENV_INDENT_UNIT]
        if ENV_CHUNK_SIZE in environ:
            try:
                overrides["flatten__chunk_size"] = int(environ[ENV_CHUNK_SIZE])
            except ValueError as e:
                raise ConfigValidationError(
                    f"{ENV_CHUNK_SIZE} must be an integer",
                    field_name="flatten.chunk_size",
                ) from e

        return cls().override(**overrides)
