"""Compile restricted XPath-like expressions into regular expressions.

Supported grammar::

    //name ( /segment )*
    segment ::= text() | @ | @name(|name)* | name

The expression is scanned left to right and each segment becomes one tagged
variant. The regular expression is derived from the variants, so matching
stays a separate step from compilation:

========================  =============================================
``//name``                ``\\bname\\b``
``/name``                 ``(.*?)(\\bname\\b)``
``/text()``               ``(.*)</last-name>``
``/@``                    ``(.*?)>``
``/@a|b``                 ``(.*?)(\\ba\\b|\\bb\\b)\\s*=\\s*["']([^"]+)["']``
========================  =============================================

``text()`` is greedy up to the closing tag of the last named node, so the
capture includes any nested child markup.
"""

import re
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple, Union

from fluent_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    QueryConfig,
    get_logger,
)

# Splits an expression into (slashes, segment) pairs
XPATH_PATTERN = re.compile(r"(/+)([^/]*)", re.DOTALL)

TEXT_NODE_TEST = "text()"
ATTRIBUTE_PREFIX = "@"
ATTRIBUTE_ALTERNATIVE = "|"

_COMPONENT = "path_compiler"


@dataclass(frozen=True)
class NameMatch:
    """Literal element-name test."""

    name: str
    descendant: bool = False

    def to_regex(self) -> str:
        word = rf"\b{re.escape(self.name)}\b"
        if self.descendant:
            return word
        return rf"(.*?)({word})"


@dataclass(frozen=True)
class TextCapture:
    """``text()``: everything up to the close tag of the last named node."""

    node_name: str

    def to_regex(self) -> str:
        return rf"(.*)</{re.escape(self.node_name)}>"


@dataclass(frozen=True)
class AttributeCapture:
    """``@a|b``: the quoted value of the first matching attribute."""

    names: Tuple[str, ...]

    def to_regex(self) -> str:
        alternatives = "|".join(rf"\b{re.escape(name)}\b" for name in self.names)
        return rf"""(.*?)({alternatives})\s*=\s*["']([^"]+)["']"""


@dataclass(frozen=True)
class WholeElementCapture:
    """Bare ``@``: the whole opening tag, for later attribute extraction."""

    def to_regex(self) -> str:
        return r"(.*?)>"


Segment = Union[NameMatch, TextCapture, AttributeCapture, WholeElementCapture]


@dataclass(frozen=True)
class CompiledPath:
    """A path expression compiled to segments and a regular expression."""

    xpath: str
    segments: Tuple[Segment, ...]
    pattern: str
    regex: Pattern[str] = field(compare=False, repr=False)
    diagnostics: Tuple[DiagnosticEntry, ...] = field(default=(), compare=False)

    @property
    def whole_element(self) -> bool:
        """True when the result is the whole located opening tag."""
        return bool(self.segments) and isinstance(
            self.segments[-1], WholeElementCapture
        )

    @property
    def produces_value(self) -> bool:
        """True when some segment names an element or captures a value."""
        return any(
            not isinstance(segment, NameMatch) or segment.name
            for segment in self.segments
        )

    @property
    def is_malformed(self) -> bool:
        """True when the expression fell outside the supported grammar."""
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )


def parse_segments(xpath: str) -> Tuple[Tuple[Segment, ...], List[str]]:
    """Turn a path expression into tagged segments.

    Args:
        xpath: Path expression to scan

    Returns:
        Tuple of (segments, grammar warnings)
    """
    segments: List[Segment] = []
    warnings: List[str] = []
    node_name: Optional[str] = None

    if not xpath.startswith("//"):
        warnings.append("Path expression should start with '//'")

    for match in XPATH_PATTERN.finditer(xpath):
        slashes, segment = match.group(1), match.group(2)

        if slashes == "//":
            node_name = segment
            segments.append(NameMatch(segment, descendant=True))
        elif slashes == "/":
            if segment == TEXT_NODE_TEST:
                if node_name is None:
                    warnings.append("text() used before any element name")
                segments.append(TextCapture(node_name or ""))
            elif segment == ATTRIBUTE_PREFIX:
                segments.append(WholeElementCapture())
            elif segment.startswith(ATTRIBUTE_PREFIX):
                names = tuple(segment[1:].split(ATTRIBUTE_ALTERNATIVE))
                if not all(names):
                    warnings.append(f"Empty attribute name in segment {segment!r}")
                segments.append(AttributeCapture(names))
            else:
                node_name = segment
                segments.append(NameMatch(segment))
        else:
            warnings.append(f"Ignored segment after {len(slashes)} slashes: {segment!r}")
            continue

        if not segment:
            warnings.append("Empty path segment")

    return tuple(segments), warnings


def compile_segments(segments: Tuple[Segment, ...]) -> str:
    """Join the regular expressions of ``segments``."""
    return "".join(segment.to_regex() for segment in segments)


class PathCompiler:
    """Compiler for path expressions with a bounded LRU cache.

    Safe to share between threads; the cache is guarded by a lock.
    """

    def __init__(
        self,
        config: Optional[QueryConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize path compiler.

        Args:
            config: Query configuration (caching behaviour)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or QueryConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

        self._cache: "OrderedDict[str, CompiledPath]" = OrderedDict()
        self._lock = threading.Lock()
        self.cache_hits = 0
        self.cache_misses = 0

    def compile(self, xpath: str) -> CompiledPath:
        """Compile ``xpath``, reusing a cached result when possible."""
        if not self._caching_enabled:
            return self._compile(xpath)

        with self._lock:
            cached = self._cache.get(xpath)
            if cached is not None:
                self._cache.move_to_end(xpath)
                self.cache_hits += 1
                return cached
            self.cache_misses += 1

        compiled = self._compile(xpath)

        with self._lock:
            self._cache[xpath] = compiled
            self._cache.move_to_end(xpath)
            while len(self._cache) > self.config.cache_size_limit:
                self._cache.popitem(last=False)

        return compiled

    def clear_cache(self) -> None:
        """Drop all cached compiled paths."""
        with self._lock:
            self._cache.clear()
            self.cache_hits = 0
            self.cache_misses = 0

    @property
    def cache_size(self) -> int:
        """Number of compiled paths currently cached."""
        return len(self._cache)

    @property
    def _caching_enabled(self) -> bool:
        return self.config.enable_caching and self.config.cache_size_limit > 0

    def _compile(self, xpath: str) -> CompiledPath:
        segments, warnings = parse_segments(xpath)
        pattern = compile_segments(segments)

        diagnostics = tuple(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=message,
                component=_COMPONENT,
                details={"xpath": xpath},
                correlation_id=self.correlation_id,
            )
            for message in warnings
        )

        self.logger.debug(
            "Converted path expression to regular expression",
            extra={"xpath": xpath, "pattern": pattern, "warnings": warnings}
        )

        return CompiledPath(
            xpath=xpath,
            segments=segments,
            pattern=pattern,
            regex=re.compile(pattern, re.DOTALL),
            diagnostics=diagnostics,
        )


_default_compiler = PathCompiler()


def compile_path(xpath: str) -> CompiledPath:
    """Compile ``xpath`` with the shared default compiler."""
    return _default_compiler.compile(xpath)
