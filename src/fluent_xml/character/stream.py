"""Stream adapters for XML sources.

The flattener feeds its XML event source incrementally, so every accepted
input (text, bytes, paths, file-like objects, URIs) is normalized here into
an iterator of chunks.
"""

import io
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO, Union
from urllib.parse import unquote, urlparse
from urllib.request import urlopen

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]
Chunk = Union[str, bytes]

DEFAULT_ENCODING = "utf-8"
DEFAULT_CHUNK_SIZE = 8192

_LOCAL_SCHEMES = ("", "file")


def to_input_stream(text: str, encoding: str = DEFAULT_ENCODING) -> BinaryIO:
    """Wrap a string in a binary stream.

    Args:
        text: Character data to expose as bytes
        encoding: Encoding used for the conversion

    Returns:
        In-memory binary stream positioned at the start
    """
    return io.BytesIO(text.encode(encoding))


def iter_chunks(
    source: InputType,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = DEFAULT_ENCODING,
    keep_text: bool = False,
) -> Iterator[Chunk]:
    """Yield ``source`` in chunks of at most ``chunk_size`` bytes or characters.

    Strings are treated as XML content, not as file names; pass a ``Path``
    to read from disk. Text from strings and text-mode file objects is
    encoded with ``encoding`` unless ``keep_text`` is set, in which case it
    is yielded as ``str`` so a parser can ignore the declared encoding of
    already-decoded text.

    Raises:
        TypeError: If the source type is not supported
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    if isinstance(source, str):
        if keep_text:
            for start in range(0, len(source), chunk_size):
                yield source[start:start + chunk_size]
        else:
            yield from _read_chunks(to_input_stream(source, encoding), chunk_size, encoding)
    elif isinstance(source, (bytes, bytearray)):
        yield from _read_chunks(io.BytesIO(bytes(source)), chunk_size, encoding)
    elif isinstance(source, Path):
        with source.open("rb") as file:
            yield from _read_chunks(file, chunk_size, encoding)
    elif hasattr(source, "read"):
        yield from _read_chunks(source, chunk_size, encoding, keep_text)
    else:
        raise TypeError(f"Unsupported XML source type: {type(source).__name__}")


def _read_chunks(
    stream: Union[BinaryIO, TextIO],
    chunk_size: int,
    encoding: str,
    keep_text: bool = False,
) -> Iterator[Chunk]:
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        if isinstance(chunk, str) and not keep_text:
            chunk = chunk.encode(encoding)
        yield chunk


def uri_to_path(uri: str) -> Path:
    """Convert a plain path or ``file://`` URI into a ``Path``."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def is_local_uri(uri: str) -> bool:
    """Check whether ``uri`` refers to the local file system."""
    scheme = urlparse(uri).scheme
    # Single-letter schemes are Windows drive letters
    return scheme in _LOCAL_SCHEMES or len(scheme) == 1


@contextmanager
def open_uri(uri: str) -> Iterator[BinaryIO]:
    """Open ``uri`` as a binary stream and close it afterwards.

    Local paths and ``file://`` URIs are opened directly; any other scheme
    is handed to ``urllib``.
    """
    if is_local_uri(uri):
        with uri_to_path(uri).open("rb") as file:
            yield file
    else:
        with urlopen(uri) as response:
            yield response


def read_text(
    source: InputType,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = DEFAULT_ENCODING,
) -> str:
    """Read a whole source into a string, decoding bytes with ``encoding``."""
    if isinstance(source, str):
        return source
    return b"".join(iter_chunks(source, chunk_size, encoding)).decode(encoding)
