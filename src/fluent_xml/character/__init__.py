"""Character stream adapters for fluent XML sources."""

from .stream import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ENCODING,
    InputType,
    is_local_uri,
    iter_chunks,
    open_uri,
    read_text,
    to_input_stream,
    uri_to_path,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_ENCODING",
    "InputType",
    "is_local_uri",
    "iter_chunks",
    "open_uri",
    "read_text",
    "to_input_stream",
    "uri_to_path",
]
