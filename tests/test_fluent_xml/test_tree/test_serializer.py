"""Tests for rendering node trees to indented XML text."""

import threading

from fluent_xml.shared.config import SerializerConfig
from fluent_xml.tree.node import Node
from fluent_xml.tree.serializer import XMLSerializer, render

DEMO_RENDERED = (
    "<demo>\n"
    "    Root blah\n"
    '    <demo1 id="scooby">\n'
    "        Blah 1\n"
    "        <address>\n"
    "            Address 1\n"
    "        </address>\n"
    "        <country>\n"
    "            UK\n"
    "        </country>\n"
    "    </demo1>\n"
    "</demo>\n"
)


def build_demo() -> Node:
    return (
        Node.create_root("demo").set_text("Root blah")
        .create_child("demo1").set_text("Blah 1").set_attribute("id", "scooby")
        .create_child("address").set_text("Address 1").end_node()
        .create_child("country").set_text("UK").end_node()
        .end_node()
    )


class TestRender:
    """Test the wire-format rendering rules."""

    def test_demo_document(self):
        """Test the exact rendering of the demo builder chain."""
        assert render(build_demo()) == DEMO_RENDERED

    def test_demo_contains_attribute(self):
        """Test that the demo document carries the scooby attribute."""
        assert 'id="scooby"' in render(build_demo())

    def test_root_tag_once_at_zero_indent(self):
        """Test that the root opening tag appears exactly once, unindented."""
        lines = render(build_demo()).splitlines()

        assert lines[0] == "<demo>"
        assert lines.count("<demo>") == 1
        assert lines[-1] == "</demo>"

    def test_self_closing_without_text(self):
        """Test that a node with no children and no text self-closes."""
        assert render(Node.create_root("empty")) == "<empty/>\n"

    def test_empty_text_keeps_closing_tag(self):
        """Test that empty text counts as content but emits no text line."""
        assert render(Node.create_root("a").set_text("")) == "<a>\n</a>\n"

    def test_attributes_in_insertion_order(self):
        """Test attribute order and the absence of escaping."""
        node = Node.create_root("n").set_attribute("b", "2").set_attribute("a", "x&y")

        assert render(node) == '<n b="2" a="x&y"/>\n'

    def test_subtree_rendered_from_depth_zero(self):
        """Test that rendering a child starts at zero indentation."""
        demo1 = build_demo().children[0]

        assert render(demo1).startswith('<demo1 id="scooby">\n    Blah 1\n')

    def test_explicit_depth(self):
        """Test rendering at a given starting depth."""
        assert render(Node.create_root("a"), depth=2) == "        <a/>\n"


class TestXMLSerializer:
    """Test configured serializers."""

    def test_custom_indent_and_newline(self):
        """Test that indentation and line endings follow the configuration."""
        serializer = XMLSerializer(SerializerConfig(indent_unit="\t", newline="\r\n"))
        root = Node.create_root("a")
        root.create_child("b", "x")

        assert serializer.render(root) == "<a>\r\n\t<b>\r\n\t\tx\r\n\t</b>\r\n</a>\r\n"

    def test_default_configuration(self):
        """Test that the default serializer matches the module function."""
        assert XMLSerializer().render(build_demo()) == render(build_demo())

    def test_concurrent_renders(self):
        """Test that concurrent renders of the same tree agree."""
        root = build_demo()
        outputs = []

        def worker():
            for _ in range(50):
                outputs.append(render(root))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(outputs) == 200
        assert set(outputs) == {DEMO_RENDERED}


class TestDeepTrees:
    """Test trees deeper than the interpreter's recursion limit."""

    DEPTH = 2000

    def build_chain(self) -> Node:
        root = Node.create_root("r").set_attribute("id", "scooby")
        node = root
        for _ in range(self.DEPTH):
            node = node.create_child("c")
        return root

    def test_render_deep_chain(self):
        """Test that a very deep chain renders every level."""
        lines = render(self.build_chain()).splitlines()

        assert len(lines) == 2 * self.DEPTH + 1
        assert lines[0] == '<r id="scooby">'
        assert lines[self.DEPTH] == " " * 4 * self.DEPTH + "<c/>"
        assert lines[-1] == "</r>"

    def test_query_deep_chain(self):
        """Test that lookups on a very deep chain still find values."""
        assert self.build_chain().get("//r/@id") == "scooby"
