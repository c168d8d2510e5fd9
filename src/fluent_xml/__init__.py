"""Fluent XML.

Build XML documents with a chainable node API, read values back with a small
XPath-like path language, and flatten documents into dotted-path mappings.

Progressive API Disclosure:
- Level 1: Simple functions - create(), parse(), get(), to_map()
- Level 2: Configured facade - FluentXML class
"""

__version__ = "0.1.0"
__author__ = "Fluent XML Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured facade
from .api import (
    FluentXML,
    create,
    flatten,
    get,
    get_each,
    parse,
    parse_file,
    parse_string,
    query,
    render,
    to_map,
    to_map_from_uri,
    to_multi_map,
)

# Configuration classes for advanced usage
from .shared.config import (
    ConfigError,
    ConfigValidationError,
    FlattenConfig,
    QueryConfig,
    SerializerConfig,
    XMLConfig,
)

# Core result objects for all API levels
from .shared.result import DiagnosticEntry, DiagnosticSeverity, FlattenResult, QueryResult
from .tree.node import Attribute, Node

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions (progressive disclosure entry point)
    "create",
    "parse",
    "parse_string",
    "parse_file",
    "render",
    "get",
    "query",
    "get_each",
    "flatten",
    "to_map",
    "to_multi_map",
    "to_map_from_uri",

    # Level 2: Configured facade
    "FluentXML",

    # Result objects and data structures
    "Node",
    "Attribute",
    "QueryResult",
    "FlattenResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",

    # Configuration classes for advanced usage
    "XMLConfig",
    "SerializerConfig",
    "QueryConfig",
    "FlattenConfig",
    "ConfigError",
    "ConfigValidationError",
]
