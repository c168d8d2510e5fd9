"""Restricted XPath-like queries over rendered XML text."""

from .compiler import (
    AttributeCapture,
    CompiledPath,
    NameMatch,
    PathCompiler,
    Segment,
    TextCapture,
    WholeElementCapture,
    compile_path,
    parse_segments,
)
from .engine import (
    AttributeCallback,
    QueryEngine,
    get,
    get_each,
    iter_attributes,
    query,
)

__all__ = [
    "AttributeCapture",
    "CompiledPath",
    "NameMatch",
    "PathCompiler",
    "Segment",
    "TextCapture",
    "WholeElementCapture",
    "compile_path",
    "parse_segments",
    "AttributeCallback",
    "QueryEngine",
    "get",
    "get_each",
    "iter_attributes",
    "query",
]
