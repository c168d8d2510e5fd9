"""Core API with progressive disclosure for building, querying and flattening XML.

Level 1 is a set of module functions backed by default-configured
components. Level 2 is ``FluentXML``, which builds every component from one
``XMLConfig`` and keeps usage statistics. Nothing here raises on bad XML or
bad paths: failures come back as ``""``, ``False`` or an empty mapping, with
the cause in the logs and in the result objects.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fluent_xml.character.stream import DEFAULT_ENCODING, InputType, read_text
from fluent_xml.flatten.flattener import (
    FlattenSource,
    XMLFlattener,
    flatten,
    to_map,
    to_map_from_uri,
    to_multi_map,
)
from fluent_xml.query.engine import (
    AttributeCallback,
    QueryEngine,
    QueryTarget,
    get,
    get_each,
    query,
)
from fluent_xml.shared import (
    FlattenResult,
    QueryResult,
    XMLConfig,
    get_logger,
)
from fluent_xml.tree.node import Node
from fluent_xml.tree.serializer import XMLSerializer, render

# Name of the node that wraps loaded XML text
WRAPPER_NODE_NAME = "xml"

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion

__all__ = [
    "WRAPPER_NODE_NAME",
    "FluentXML",
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
]


def create(name: str) -> Node:
    """Start a new document with a root element called ``name``.

    Examples:
        >>> doc = create("order").set_attribute("id", "1")
        >>> doc.render().splitlines()[0]
        '<order id="1"/>'
    """
    return Node.create_root(name)


def parse(input_data: InputType, correlation_id: Optional[str] = None) -> Node:
    """Load XML text into the text of a wrapper ``xml`` node.

    The content is not parsed into child nodes; it is kept verbatim so that
    path queries can run against it through the wrapper.

    Args:
        input_data: XML content as string, bytes, file-like object, or Path
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Wrapper node; its text is empty when the input could not be read

    Examples:
        >>> parse('<author name="The Author"/>').get("//author/@name")
        'The Author'
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")

    logger.info(
        "Starting parse operation",
        extra={
            "input_type": type(input_data).__name__,
            "has_correlation_id": correlation_id is not None
        }
    )

    wrapper = Node.create_root(WRAPPER_NODE_NAME)
    try:
        wrapper.set_text(read_text(input_data))
    except Exception:
        # Never-fail: an unreadable source loads as an empty document
        logger.exception(
            "Parse operation failed",
            extra={"processing_time_ms": (time.time() - start_time) * MS_PER_SECOND}
        )
        wrapper.set_text("")
        return wrapper

    logger.info(
        "Parse operation completed",
        extra={
            "text_length": len(wrapper.text or ""),
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND
        }
    )
    return wrapper


def parse_string(xml_string: str, correlation_id: Optional[str] = None) -> Node:
    """Load an XML string into a wrapper ``xml`` node.

    Args:
        xml_string: XML content
        correlation_id: Optional correlation ID for request tracking
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.debug(
        "Parsing XML string",
        extra={
            "string_length": len(xml_string),
            "preview": (
                xml_string[:PREVIEW_LENGTH] + "..."
                if len(xml_string) > PREVIEW_LENGTH else xml_string
            )
        }
    )
    return parse(xml_string, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = DEFAULT_ENCODING,
    correlation_id: Optional[str] = None
) -> Node:
    """Load an XML file into a wrapper ``xml`` node.

    Args:
        file_path: Path to the XML file
        encoding: Encoding of the file contents
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Wrapper node; its text is empty when the file cannot be read
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    path = Path(file_path)

    wrapper = Node.create_root(WRAPPER_NODE_NAME)
    try:
        wrapper.set_text(read_text(path, encoding=encoding))
    except OSError:
        logger.exception(
            "Failed to read XML file",
            extra={"file_path": str(path)}
        )
        wrapper.set_text("")
    except UnicodeDecodeError:
        logger.exception(
            "Failed to decode XML file",
            extra={"file_path": str(path), "encoding": encoding}
        )
        wrapper.set_text("")

    return wrapper


class FluentXML:
    """Configured facade over the serializer, query engine and flattener.

    Attributes:
        config: Aggregate configuration the components were built from
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> xml = FluentXML(XMLConfig().override(flatten__key_separator="/"))
        >>> xml.to_map('<a><b>x</b></a>')
        {'a/b': 'x'}
        >>> xml.statistics["total_flattens"]
        1
    """

    def __init__(
        self,
        config: Optional[XMLConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize facade.

        Args:
            config: Aggregate configuration (defaults to ``XMLConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or XMLConfig()
        self.correlation_id = correlation_id

        self.logger = get_logger(__name__, correlation_id, "fluent_xml")

        self._build_components()
        self.reset_statistics()

        self.logger.info(
            "FluentXML initialized",
            extra={"config_name": self.config.name}
        )

    def _build_components(self) -> None:
        self.serializer = XMLSerializer(self.config.serializer)
        self.engine = QueryEngine(
            self.config.query, self.config.serializer, self.correlation_id
        )
        self.flattener = XMLFlattener(
            self.config.flatten, self.config.serializer, self.correlation_id
        )

    def create(self, name: str) -> Node:
        """Start a new document with a root element called ``name``."""
        return Node.create_root(name)

    def parse(self, input_data: InputType) -> Node:
        """Load XML text into a wrapper ``xml`` node."""
        return parse(input_data, self.correlation_id)

    def render(self, node: Node) -> str:
        """Render ``node`` with the configured indentation."""
        return self.serializer.render(node)

    def query(self, target: QueryTarget, xpath: str) -> QueryResult:
        """Run ``xpath`` against ``target`` and record the outcome."""
        result = self.engine.query(target, xpath)
        self._query_count += 1
        if result.matched:
            self._matched_queries += 1
        return result

    def get(self, target: QueryTarget, xpath: str) -> str:
        """Return the value located by ``xpath`` in ``target``, or ``""``."""
        return self.query(target, xpath).value

    def get_each(
        self, target: QueryTarget, xpath: str, callback: AttributeCallback
    ) -> bool:
        """Call ``callback`` with the attributes of every match of ``xpath``."""
        matched = self.engine.get_each(target, xpath, callback)
        self._query_count += 1
        if matched:
            self._matched_queries += 1
        return matched

    def flatten(self, source: FlattenSource, multi_value: bool = False) -> FlattenResult:
        """Flatten ``source`` and record the outcome."""
        return self._record_flatten(self.flattener.flatten(source, multi_value))

    def flatten_uri(self, uri: str, multi_value: bool = False) -> FlattenResult:
        """Flatten the document at ``uri`` and record the outcome."""
        return self._record_flatten(self.flattener.flatten_uri(uri, multi_value))

    def to_map(self, source: FlattenSource) -> Dict[str, str]:
        """Flatten ``source`` into dotted keys; ``{}`` on failure."""
        return self.flatten(source).mapping

    def to_multi_map(self, source: FlattenSource) -> Dict[str, List[str]]:
        """Flatten ``source`` keeping every value per key; ``{}`` on failure."""
        return self.flatten(source, multi_value=True).mapping

    def to_map_from_uri(self, uri: str) -> Dict[str, str]:
        """Flatten the document at ``uri``; ``{}`` on failure."""
        return self.flatten_uri(uri).mapping

    def reconfigure(self, config: XMLConfig) -> None:
        """Rebuild every component from ``config``.

        Args:
            config: New aggregate configuration
        """
        self.config = config
        self._build_components()

        self.logger.info(
            "FluentXML reconfigured",
            extra={"config_name": self.config.name}
        )

    def _record_flatten(self, result: FlattenResult) -> FlattenResult:
        self._flatten_count += 1
        self._total_flatten_time += result.processing_time_ms
        if result.success:
            self._successful_flattens += 1
        return result

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get usage statistics.

        Returns:
            Dictionary with query, flatten and path-cache counters
        """
        return {
            "total_queries": self._query_count,
            "matched_queries": self._matched_queries,
            "total_flattens": self._flatten_count,
            "successful_flattens": self._successful_flattens,
            "flatten_success_rate": (
                self._successful_flattens / self._flatten_count
                if self._flatten_count > 0 else 0.0
            ),
            "total_flatten_time_ms": self._total_flatten_time,
            "average_flatten_time_ms": (
                self._total_flatten_time / self._flatten_count
                if self._flatten_count > 0 else 0.0
            ),
            "path_cache_hits": self.engine.compiler.cache_hits,
            "path_cache_misses": self.engine.compiler.cache_misses,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset usage statistics."""
        self._query_count = 0
        self._matched_queries = 0
        self._flatten_count = 0
        self._successful_flattens = 0
        self._total_flatten_time = 0.0

        self.logger.debug("FluentXML statistics reset")
