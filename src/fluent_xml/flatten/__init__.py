"""Streaming flattening of XML documents into dotted-path mappings."""

from .flattener import (
    FlattenSource,
    XMLFlattener,
    flatten,
    to_map,
    to_map_from_uri,
    to_multi_map,
)
from .handler import DEFAULT_KEY_SEPARATOR, FlatteningHandler, local_name

__all__ = [
    "FlattenSource",
    "XMLFlattener",
    "flatten",
    "to_map",
    "to_map_from_uri",
    "to_multi_map",
    "DEFAULT_KEY_SEPARATOR",
    "FlatteningHandler",
    "local_name",
]
