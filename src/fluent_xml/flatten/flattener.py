"""Streaming XML flattener built on lxml's parser-target interface.

The document is fed to ``lxml.etree.XMLParser`` in chunks (text sources as
``str``, so lxml never re-decodes them); the parser calls back into a
``FlatteningHandler`` so no element tree is ever built. Entity resolution and
network access are switched off.

Never-fail: any error (malformed XML, unreadable source) is logged and turned
into an empty mapping. ``flatten`` additionally reports the cause through
``FlattenResult.diagnostics``; ``to_map`` cannot tell an empty document from
a failed one.
"""

import time
from typing import Any, Dict, List, Optional, Union

from lxml import etree

from fluent_xml.character.stream import InputType, iter_chunks, open_uri
from fluent_xml.flatten.handler import FlatteningHandler
from fluent_xml.shared import (
    DiagnosticSeverity,
    FlattenConfig,
    FlattenResult,
    SerializerConfig,
    get_logger,
)
from fluent_xml.tree.node import Node
from fluent_xml.tree.serializer import XMLSerializer

FlattenSource = Union[InputType, Node]

# Max length for content preview in logs
PREVIEW_LENGTH = 100
MS_PER_SECOND = 1000

_COMPONENT = "xml_flattener"


class XMLFlattener:
    """Flatten XML documents into single-level dotted-path mappings.

    Examples:
        >>> flattener = XMLFlattener()
        >>> flattener.to_map('<a id="1"><b>x</b></a>')
        {'a.id': '1', 'a.b': 'x'}
    """

    def __init__(
        self,
        config: Optional[FlattenConfig] = None,
        serializer_config: Optional[SerializerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize flattener.

        Args:
            config: Flatten configuration (key separator, chunk size)
            serializer_config: Rendering settings used for Node sources
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or FlattenConfig()
        self.correlation_id = correlation_id
        self.serializer = XMLSerializer(serializer_config)
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

    def flatten(self, source: FlattenSource, multi_value: bool = False) -> FlattenResult:
        """Flatten ``source`` and describe the outcome.

        Args:
            source: XML text, bytes, Path, file-like object or Node
            multi_value: Keep every value per key as a list

        Returns:
            FlattenResult; on failure ``success`` is False and the mapping empty
        """
        start_time = time.time()
        result = FlattenResult(correlation_id=self.correlation_id)

        self.logger.info(
            "Starting flatten operation",
            extra={
                "source_type": type(source).__name__,
                "preview": _preview(source),
                "multi_value": multi_value,
            }
        )

        try:
            if isinstance(source, Node):
                source = self.serializer.render(source)

            handler = FlatteningHandler(self.config.key_separator, multi_value)
            parser = self._create_parser(handler)
            for chunk in iter_chunks(source, self.config.chunk_size, keep_text=True):
                parser.feed(chunk)
            result.mapping = parser.close()

            result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
            self.logger.info(
                "Flatten operation completed",
                extra={
                    "key_count": result.key_count,
                    "elements_seen": handler.elements_seen,
                    "processing_time_ms": result.processing_time_ms,
                }
            )

        except Exception as e:
            # Never-fail: collapse any failure into an empty mapping
            result = self._error_result(e, start_time)

        return result

    def flatten_uri(self, uri: str, multi_value: bool = False) -> FlattenResult:
        """Flatten the document at ``uri`` (path, ``file://`` or URL)."""
        start_time = time.time()
        try:
            with open_uri(uri) as stream:
                return self.flatten(stream, multi_value)
        except Exception as e:
            return self._error_result(e, start_time, details={"uri": uri})

    def to_map(self, source: FlattenSource) -> Dict[str, str]:
        """Flatten ``source``; ``{}`` on failure."""
        return self.flatten(source).mapping

    def to_multi_map(self, source: FlattenSource) -> Dict[str, List[str]]:
        """Flatten ``source`` keeping every value per key; ``{}`` on failure."""
        return self.flatten(source, multi_value=True).mapping

    def to_map_from_uri(self, uri: str) -> Dict[str, str]:
        """Flatten the document at ``uri``; ``{}`` on failure."""
        return self.flatten_uri(uri).mapping

    def _create_parser(self, handler: FlatteningHandler) -> Any:
        return etree.XMLParser(
            target=handler,
            resolve_entities=False,
            no_network=True,
            huge_tree=self.config.huge_tree,
        )

    def _error_result(
        self,
        error: Exception,
        start_time: float,
        details: Optional[Dict[str, Any]] = None
    ) -> FlattenResult:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self.logger.exception(
            "Flatten operation failed",
            extra={"processing_time_ms": processing_time, **(details or {})}
        )

        result = FlattenResult(
            mapping={},
            success=False,
            processing_time_ms=processing_time,
            correlation_id=self.correlation_id,
        )
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            f"Flatten failed: {error}",
            _COMPONENT,
            details={"exception_type": type(error).__name__, **(details or {})}
        )
        return result


def _preview(source: Any) -> str:
    if isinstance(source, (str, bytes)):
        text = source if isinstance(source, str) else source.decode("utf-8", "replace")
        return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text
    return repr(source)[:PREVIEW_LENGTH]


_default_flattener = XMLFlattener()


def flatten(source: FlattenSource, multi_value: bool = False) -> FlattenResult:
    """Flatten ``source`` with the default flattener."""
    return _default_flattener.flatten(source, multi_value)


def to_map(source: FlattenSource) -> Dict[str, str]:
    """Flatten ``source`` into dotted keys; ``{}`` on failure."""
    return _default_flattener.to_map(source)


def to_multi_map(source: FlattenSource) -> Dict[str, List[str]]:
    """Flatten ``source`` keeping every value per key; ``{}`` on failure."""
    return _default_flattener.to_multi_map(source)


def to_map_from_uri(uri: str) -> Dict[str, str]:
    """Flatten the document at ``uri``; ``{}`` on failure."""
    return _default_flattener.to_map_from_uri(uri)
