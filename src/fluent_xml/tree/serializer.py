"""Deterministic text rendering for node trees.

The output format is relied on by the path-query layer, which matches
regular expressions against it:

- ``<name`` followed by `` attr="value"`` per attribute, in insertion order,
  with no escaping
- ``/>`` when the node has no children and ``text is None``, else ``>``
- non-empty text on its own line, one level deeper
- children one level deeper, then ``</name>`` at the node's own level

Indentation is an explicit depth carried on a work stack, so concurrent
renders never share formatting state.
"""

from typing import List, Optional, Tuple

from fluent_xml.shared.config import SerializerConfig
from fluent_xml.tree.node import Node


class XMLSerializer:
    """Render nodes to indented XML text."""

    def __init__(self, config: Optional[SerializerConfig] = None) -> None:
        """Initialize serializer.

        Args:
            config: Indentation and newline settings (defaults to the wire format)
        """
        self.config = config or SerializerConfig()

    def render(self, node: Node, depth: int = 0) -> str:
        """Render ``node`` and its subtree.

        Args:
            node: Node to render
            depth: Indent level of the node's own tags

        Returns:
            XML text, one tag or text line per line
        """
        indent_unit = self.config.indent_unit
        newline = self.config.newline
        parts: List[str] = []

        # (node, depth, closing) frames; a closing frame emits the end tag
        stack: List[Tuple[Node, int, bool]] = [(node, depth, False)]
        while stack:
            current, level, closing = stack.pop()
            indent = indent_unit * level

            if closing:
                parts.append(f"{indent}</{current.name}>{newline}")
                continue

            parts.append(f"{indent}<{current.name}")
            for attribute in current.attributes:
                parts.append(f' {attribute.name}="{attribute.value}"')

            # Empty string text still counts as content and keeps the closing tag
            has_content = bool(current.children) or current.text is not None
            parts.append(">" if has_content else "/>")
            parts.append(newline)

            if current.text:
                parts.append(f"{indent_unit * (level + 1)}{current.text}{newline}")

            if has_content:
                stack.append((current, level, True))
            for child in reversed(current.children):
                stack.append((child, level + 1, False))

        return "".join(parts)


_default_serializer = XMLSerializer()


def render(node: Node, depth: int = 0) -> str:
    """Render ``node`` with the default wire-format serializer."""
    return _default_serializer.render(node, depth)
