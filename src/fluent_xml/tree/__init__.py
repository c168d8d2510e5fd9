"""Node tree, fluent builder and serializer."""

from .node import ATTRIBUTE_NAME_DELIMITER, Attribute, Node
from .serializer import XMLSerializer, render

__all__ = [
    "ATTRIBUTE_NAME_DELIMITER",
    "Attribute",
    "Node",
    "XMLSerializer",
    "render",
]
