"""Progressive-disclosure API for fluent XML building, querying and flattening."""

from .parser import (
    WRAPPER_NODE_NAME,
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

__all__ = [
    "WRAPPER_NODE_NAME",
    "FluentXML",
    "create",
    "flatten",
    "get",
    "get_each",
    "parse",
    "parse_file",
    "parse_string",
    "query",
    "render",
    "to_map",
    "to_map_from_uri",
    "to_multi_map",
]
