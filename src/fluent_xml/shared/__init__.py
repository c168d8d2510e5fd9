"""Shared utilities for fluent XML processing.

This module provides the configuration objects, result types and logging
helpers used by the tree, query and flatten layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    FlattenConfig,
    QueryConfig,
    SerializerConfig,
    XMLConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    FlattenResult,
    QueryResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "FlattenConfig",
    "QueryConfig",
    "SerializerConfig",
    "XMLConfig",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "FlattenResult",
    "QueryResult",
]
