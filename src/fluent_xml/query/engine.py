"""Path-query engine: run compiled path expressions against rendered XML.

A query is matched against the rendered text of the node it is invoked on
(its own subtree), or against a raw XML string. Lookups never raise: a
missing node, a malformed expression or an internal error all come back as
``""`` from ``get`` and as diagnostics on the ``QueryResult`` from ``query``.
"""

import logging
import re
import time
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

from fluent_xml.query.compiler import CompiledPath, PathCompiler
from fluent_xml.shared import (
    DiagnosticSeverity,
    QueryConfig,
    QueryResult,
    SerializerConfig,
    get_logger,
)
from fluent_xml.tree.node import Node
from fluent_xml.tree.serializer import XMLSerializer

# Opening/closing tags inside a matched snippet
NODE_PATTERN = re.compile(r"<(.*?)>", re.DOTALL)

# name="value" pairs inside a matched snippet
ATTRIBUTE_PATTERN = re.compile(r"""(\w*)\s*=\s*["']([^"]+)["']""", re.DOTALL)

QueryTarget = Union[Node, str]
AttributeCallback = Callable[[Dict[str, str]], None]

_COMPONENT = "query_engine"

# Span of the returned value inside the searched text
_Span = Tuple[int, int]


class QueryEngine:
    """Evaluate path expressions against nodes or raw XML text.

    Holds no per-query state, so one engine can serve many threads.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        serializer_config: Optional[SerializerConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize query engine.

        Args:
            config: Query configuration (compiled-path caching)
            serializer_config: Rendering settings used for Node targets
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or QueryConfig()
        self.correlation_id = correlation_id
        self.compiler = PathCompiler(self.config, correlation_id)
        self.serializer = XMLSerializer(serializer_config)
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

    def query(self, target: QueryTarget, xpath: str) -> QueryResult:
        """Run ``xpath`` once and describe the outcome.

        Args:
            target: Node whose subtree is searched, or raw XML text
            xpath: Path expression

        Returns:
            QueryResult whose ``value`` is ``""`` when nothing matched
        """
        result = QueryResult(xpath=xpath, correlation_id=self.correlation_id)

        try:
            compiled = self.compiler.compile(xpath)
            result.pattern = compiled.pattern
            result.whole_element = compiled.whole_element
            result.diagnostics.extend(compiled.diagnostics)

            found = self._match(compiled, self._source_text(target))
            if found is not None:
                result.value = found[0]
                result.matched = True

        except Exception as e:
            # Never-fail: a broken lookup reads as "not found"
            self.logger.exception(
                "Path query failed",
                extra={"xpath": xpath}
            )
            result.value = ""
            result.matched = False
            result.add_diagnostic(
                DiagnosticSeverity.ERROR,
                f"Path query failed: {e}",
                _COMPONENT,
                details={"exception_type": type(e).__name__}
            )

        return result

    def get(self, target: QueryTarget, xpath: str) -> str:
        """Return the text or attribute value located by ``xpath``, or ``""``."""
        return self.query(target, xpath).value

    def iter_attributes(
        self, target: QueryTarget, xpath: str
    ) -> Iterator[Dict[str, str]]:
        """Yield the ``name="value"`` pairs of each successive match.

        After every match the last tag of the matched snippet is cut from a
        private copy of the text and the lookup runs again, until nothing
        matches. The target itself is never modified.
        """
        try:
            compiled = self.compiler.compile(xpath)
            working = self._source_text(target)
        except Exception:
            self.logger.exception(
                "Repeated path query failed",
                extra={"xpath": xpath}
            )
            return

        iterations = 0
        while True:
            found = self._match(compiled, working)
            if found is None or found[0] == "":
                break

            snippet, span = found
            iterations += 1
            yield {
                match.group(1): match.group(2)
                for match in ATTRIBUTE_PATTERN.finditer(snippet)
            }

            last_tag = None
            for last_tag in NODE_PATTERN.finditer(snippet):
                pass
            if last_tag is None:
                # Nothing left to cut, the next lookup would find the same value
                break

            start = max(span[0] + last_tag.start(), 0)
            end = span[0] + last_tag.end()
            working = working[:start] + working[end:]

        self.logger.debug(
            "Repeated path query finished",
            extra={"xpath": xpath, "matches": iterations}
        )

    def get_each(
        self, target: QueryTarget, xpath: str, callback: AttributeCallback
    ) -> bool:
        """Call ``callback`` with the attributes of every match of ``xpath``.

        Returns:
            False when the first lookup finds nothing, True otherwise
        """
        matched = False
        for attributes in self.iter_attributes(target, xpath):
            matched = True
            callback(attributes)
        return matched

    def _source_text(self, target: QueryTarget) -> str:
        if isinstance(target, Node):
            return self.serializer.render(target)
        return target

    def _match(
        self, compiled: CompiledPath, text: str
    ) -> Optional[Tuple[str, _Span]]:
        """Match once, returning the extracted value and its span in ``text``.

        The whole-element form yields ``"<"`` plus the full match; its span
        then starts one character before the match, where the ``<`` sits.
        Otherwise the last populated capture group wins. A path with nothing
        to locate, such as ``""`` or ``"//"``, never matches.
        """
        if not compiled.produces_value:
            return None

        start_time = time.time()
        match = compiled.regex.search(text)

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Path query matched" if match else "Path query found nothing",
                extra={
                    "pattern": compiled.pattern,
                    "text_length": len(text),
                    "processing_time_ms": (time.time() - start_time) * 1000,
                }
            )

        if match is None:
            return None

        if compiled.whole_element:
            return "<" + match.group(0), (match.start() - 1, match.end())

        for index in range(len(match.groups()), 0, -1):
            if match.group(index) is not None:
                return match.group(index), match.span(index)

        return match.group(0), match.span(0)


_default_engine = QueryEngine()


def query(target: QueryTarget, xpath: str) -> QueryResult:
    """Run ``xpath`` against ``target`` with the default engine."""
    return _default_engine.query(target, xpath)


def get(target: QueryTarget, xpath: str) -> str:
    """Return the value located by ``xpath`` in ``target``, or ``""``."""
    return _default_engine.get(target, xpath)


def get_each(target: QueryTarget, xpath: str, callback: AttributeCallback) -> bool:
    """Call ``callback`` for every match of ``xpath`` in ``target``."""
    return _default_engine.get_each(target, xpath, callback)


def iter_attributes(target: QueryTarget, xpath: str) -> Iterator[Dict[str, str]]:
    """Yield the attributes of every match of ``xpath`` in ``target``."""
    return _default_engine.iter_attributes(target, xpath)
