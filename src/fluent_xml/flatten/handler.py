"""Event handler that flattens an XML document into dotted-path keys.

The handler receives start-element, character and end-element events in
document order and records:

- ``a.b.c`` for the trimmed text of element ``c`` under ``a/b``
- ``a.b.attr`` for each attribute of element ``b`` under ``a``

Only the latest run of character data is kept per element, a run being all
the text between two pieces of markup (tags, comments or processing
instructions); the parser may deliver one run in several pieces. Keys are not
unique across siblings: ``<r><p>x</p><p>y</p></r>`` leaves a single ``r.p``
entry holding ``y``. Use ``multi_value=True`` to keep every value.

The method names ``start``, ``data``, ``end``, ``comment``, ``pi`` and
``close`` make an instance usable directly as an ``lxml.etree.XMLParser``
target.
"""

from typing import Any, Dict, List, Mapping, Optional

DEFAULT_KEY_SEPARATOR = "."


def local_name(name: str) -> str:
    """Strip an lxml ``{namespace}`` prefix from an element or attribute name."""
    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name


class FlatteningHandler:
    """Collect dotted-path keys and values from XML parse events."""

    def __init__(
        self,
        key_separator: str = DEFAULT_KEY_SEPARATOR,
        multi_value: bool = False
    ) -> None:
        """Initialize handler.

        Args:
            key_separator: Text placed between path segments
            multi_value: Keep every written value per key as a list instead
                of letting the last write win
        """
        if not key_separator:
            raise ValueError("key_separator cannot be empty")

        self.key_separator = key_separator
        self.multi_value = multi_value

        self.key: Optional[str] = None
        self._key_stack: List[Optional[str]] = []
        self._pending_value = ""
        self._has_pending_value = False
        self._run = ""
        self._in_run = False
        self._map: Dict[str, Any] = {}

        self.elements_seen = 0

    @property
    def mapping(self) -> Dict[str, Any]:
        """The mapping built so far, in first-write order."""
        return self._map

    def start_element(self, name: str, attributes: Mapping[str, str]) -> None:
        """Handle an opening tag."""
        if self._has_pending_value and self._pending_value:
            self._put(self.key, self._pending_value)
        self._pending_value = ""
        self._has_pending_value = False
        self._in_run = False

        name = local_name(name)
        self._key_stack.append(self.key)
        self.key = name if self.key is None else self.key + self.key_separator + name
        self.elements_seen += 1

        for attribute_name, attribute_value in attributes.items():
            self._put(
                self.key + self.key_separator + local_name(attribute_name),
                attribute_value
            )

    def characters(self, text: str) -> None:
        """Handle character data; replaces any run from before the last tag."""
        self._run = self._run + text if self._in_run else text
        self._in_run = True
        self._pending_value = self._run.strip()
        self._has_pending_value = True

    def end_element(self, name: str) -> None:
        """Handle a closing tag."""
        if self._has_pending_value:
            self._put(self.key, self._pending_value)
            self._has_pending_value = False
        self._in_run = False

        # Restore the parent path; element names may contain the separator
        self.key = self._key_stack.pop() if self._key_stack else None

    def comment(self, text: str) -> None:
        """Handle a comment; it ends the current character run."""
        self._in_run = False

    def pi(self, target: str, data: Optional[str] = None) -> None:
        """Handle a processing instruction; it ends the current character run."""
        self._in_run = False

    def close(self) -> Dict[str, Any]:
        """Finish the document and return the mapping."""
        return self._map

    # lxml parser-target interface
    start = start_element
    data = characters
    end = end_element

    def _put(self, key: Optional[str], value: str) -> None:
        if key is None:
            return
        if self.multi_value:
            values: List[str] = self._map.setdefault(key, [])
            values.append(value)
        else:
            self._map[key] = value
