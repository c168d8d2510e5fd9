"""Node tree and fluent builder.

A ``Node`` is one XML element. The children list owns child nodes; the parent
reference exists only so that ``end_node``/``end_all`` can walk back up while
building. Trees are append-only: nothing is ever removed.

Example:
    >>> root = (
    ...     Node.create_root("demo").set_text("Root blah")
    ...     .create_child("demo1").set_text("Blah 1").set_attribute("id", "scooby")
    ...     .create_child("address", "Address 1").end_node()
    ...     .end_all()
    ... )
    >>> root.get("//demo1/@id")
    'scooby'
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional

if TYPE_CHECKING:
    from fluent_xml.shared.result import QueryResult

# Delimiter for setting several attributes to the same value in one call
ATTRIBUTE_NAME_DELIMITER = "&"


@dataclass(frozen=True)
class Attribute:
    """A single ``name="value"`` pair on a node."""

    name: str
    value: str


class Node:
    """One XML element with optional text, attributes and children."""

    def __init__(self, name: str, parent: Optional["Node"] = None) -> None:
        """Initialize a node.

        Prefer ``Node.create_root`` and ``create_child`` over calling this
        directly; they keep the parent's children list in sync.

        Args:
            name: Element name
            parent: Enclosing node, or None for the root
        """
        self._name = name
        self._parent = parent
        self.text: Optional[str] = None
        self.attributes: List[Attribute] = []
        self.children: List["Node"] = []

    @classmethod
    def create_root(cls, name: str) -> "Node":
        """Create a new root node with no parent."""
        return cls(name)

    @property
    def name(self) -> str:
        """Element name, fixed at creation."""
        return self._name

    @property
    def parent(self) -> Optional["Node"]:
        """Enclosing node, or None for the root."""
        return self._parent

    @property
    def is_root(self) -> bool:
        """Check whether this node is the root of its tree."""
        return self._parent is None

    # Fluent builder operations

    def create_child(self, name: str, text: Optional[str] = None) -> "Node":
        """Create a node under this one and return the new child.

        Args:
            name: Element name of the child
            text: Optional text for the child

        Returns:
            The new child, so that building continues one level down
        """
        child = Node(name, self)
        child.text = text
        self.children.append(child)
        return child

    def set_text(self, text: Optional[str]) -> "Node":
        """Set this node's text and return this node."""
        self.text = text
        return self

    def set_attribute(self, name_spec: str, value: Any) -> "Node":
        """Add an attribute and return this node.

        ``name_spec`` may hold several names separated by ``&``; each
        (trimmed) name gets the same value. ``None`` is stored as ``""``,
        anything else through ``str()``.
        """
        value_string = "" if value is None else str(value)

        if ATTRIBUTE_NAME_DELIMITER not in name_spec:
            self.attributes.append(Attribute(name_spec, value_string))
        else:
            for name in name_spec.split(ATTRIBUTE_NAME_DELIMITER):
                self.attributes.append(Attribute(name.strip(), value_string))

        return self

    def end_node(self) -> "Node":
        """Close this node; returns the parent, or this node at the root."""
        if self._parent is None:
            return self
        return self._parent

    def end_all(self) -> "Node":
        """Close every open node up to and including the root; returns the root."""
        node = self
        while node._parent is not None:
            node = node.end_node()
        return node

    # Navigation

    def get_depth(self) -> int:
        """Get depth of this node in the tree (root = 0)."""
        depth = 0
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return depth

    def iter_nodes(self) -> Iterator["Node"]:
        """Iterate over this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get the first attribute value with ``name``."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    # Text views

    def render(self) -> str:
        """Render this node and its subtree as indented XML text."""
        from fluent_xml.tree.serializer import render

        return render(self)

    def get(self, xpath: str) -> str:
        """Look up text or an attribute value in this node's subtree.

        Returns:
            The located value, or ``""`` when nothing matched
        """
        from fluent_xml.query.engine import get

        return get(self, xpath)

    def query(self, xpath: str) -> "QueryResult":
        """Like ``get`` but returns a QueryResult with diagnostics."""
        from fluent_xml.query.engine import query

        return query(self, xpath)

    def get_each(
        self, xpath: str, callback: Callable[[Dict[str, str]], None]
    ) -> bool:
        """Call ``callback`` with the attributes of every match of ``xpath``.

        Returns:
            False if nothing matched, True otherwise
        """
        from fluent_xml.query.engine import get_each

        return get_each(self, xpath, callback)

    def to_map(self) -> Dict[str, str]:
        """Flatten the rendered subtree into dotted keys."""
        from fluent_xml.flatten.flattener import to_map

        return to_map(self)

    def to_multi_map(self) -> Dict[str, List[str]]:
        """Flatten the rendered subtree, keeping every value per key."""
        from fluent_xml.flatten.flattener import to_multi_map

        return to_multi_map(self)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"Node(name={self._name!r}, text={self.text!r}, "
            f"attributes={len(self.attributes)}, children={len(self.children)})"
        )
