"""Tests for the node tree and fluent builder."""

from fluent_xml.tree.node import ATTRIBUTE_NAME_DELIMITER, Attribute, Node


def build_demo() -> Node:
    """Build the demo document used across the tree tests."""
    return (
        Node.create_root("demo").set_text("Root blah")
        .create_child("demo1").set_text("Blah 1").set_attribute("id", "scooby")
        .create_child("address").set_text("Address 1").end_node()
        .create_child("country").set_text("UK").end_node()
        .end_node()
    )


class TestNodeCreation:
    """Test root and child creation."""

    def test_create_root(self):
        """Test that a root has no parent, text, attributes or children."""
        root = Node.create_root("order")

        assert root.name == "order"
        assert root.parent is None
        assert root.is_root is True
        assert root.text is None
        assert root.attributes == []
        assert root.children == []

    def test_create_child_returns_child(self):
        """Test that create_child appends to the parent and returns the child."""
        root = Node.create_root("order")

        child = root.create_child("item")

        assert child.name == "item"
        assert child.parent is root
        assert child.is_root is False
        assert root.children == [child]

    def test_create_child_with_text(self):
        """Test the text overload of create_child."""
        child = Node.create_root("order").create_child("item", "pen")

        assert child.text == "pen"

    def test_children_keep_insertion_order(self):
        """Test that children are kept in creation order."""
        root = Node.create_root("list")
        for name in ("a", "b", "c"):
            root.create_child(name)

        assert [child.name for child in root.children] == ["a", "b", "c"]


class TestBuilderChaining:
    """Test the fluent builder operations."""

    def test_set_text_returns_self(self):
        """Test that set_text returns the same node."""
        node = Node.create_root("a")

        assert node.set_text("x") is node
        assert node.text == "x"

    def test_set_attribute_returns_self(self):
        """Test that set_attribute returns the same node."""
        node = Node.create_root("node")

        assert node.set_attribute("id", "scooby") is node
        assert node.attributes == [Attribute("id", "scooby")]

    def test_set_attribute_stringifies_values(self):
        """Test conversion of non-string attribute values."""
        node = Node.create_root("n").set_attribute("count", 3).set_attribute("flag", None)

        assert node.get_attribute("count") == "3"
        assert node.get_attribute("flag") == ""

    def test_set_attribute_multiple_names(self):
        """Test that delimited names each get the same trimmed attribute."""
        node = Node.create_root("author").set_attribute(
            f"name {ATTRIBUTE_NAME_DELIMITER} NAME", "The Author"
        )

        assert node.attributes == [
            Attribute("name", "The Author"),
            Attribute("NAME", "The Author"),
        ]

    def test_duplicate_attributes_kept(self):
        """Test that attributes are appended, never replaced."""
        node = Node.create_root("n").set_attribute("id", "1").set_attribute("id", "2")

        assert [attribute.value for attribute in node.attributes] == ["1", "2"]
        assert node.get_attribute("id") == "1"
        assert node.get_attribute("missing", "fallback") == "fallback"

    def test_end_node_returns_parent(self):
        """Test that end_node walks one level up."""
        root = Node.create_root("a")
        child = root.create_child("b")

        assert child.end_node() is root

    def test_end_node_at_root_is_idempotent(self):
        """Test that end_node at the root keeps returning the root."""
        root = Node.create_root("a")

        assert root.end_node() is root
        assert root.end_node().end_node().end_node() is root

    def test_end_all_returns_root(self):
        """Test that end_all climbs to the root from any depth."""
        root = Node.create_root("a")
        leaf = root.create_child("b").create_child("c").create_child("d")

        assert leaf.end_all() is root
        assert root.end_all() is root

    def test_demo_chain_structure(self):
        """Test the tree produced by the demo builder chain."""
        root = build_demo()

        assert root.name == "demo"
        assert root.text == "Root blah"
        demo1 = root.children[0]
        assert demo1.get_attribute("id") == "scooby"
        assert [child.name for child in demo1.children] == ["address", "country"]


class TestNavigation:
    """Test navigation helpers."""

    def test_get_depth(self):
        """Test depth counts from the root."""
        root = Node.create_root("a")
        grandchild = root.create_child("b").create_child("c")

        assert root.get_depth() == 0
        assert grandchild.get_depth() == 2

    def test_iter_nodes_preorder(self):
        """Test pre-order document traversal."""
        names = [node.name for node in build_demo().iter_nodes()]

        assert names == ["demo", "demo1", "address", "country"]

    def test_repr(self):
        """Test the debugging representation."""
        node = Node.create_root("a").set_text("x")
        node.create_child("b")

        assert repr(node) == "Node(name='a', text='x', attributes=0, children=1)"


class TestDelegates:
    """Test convenience methods that delegate to the other layers."""

    def test_str_renders(self):
        """Test that str() renders the subtree."""
        assert str(build_demo()) == build_demo().render()
        assert 'id="scooby"' in str(build_demo())

    def test_get(self):
        """Test attribute lookup through the node."""
        node = Node.create_root("node").set_attribute("id", "scooby")

        assert node.get("//node/@id") == "scooby"

    def test_query(self):
        """Test result-object lookup through the node."""
        result = build_demo().query("//demo1/@id")

        assert result.value == "scooby"
        assert result.matched is True

    def test_get_each(self):
        """Test repeated attribute lookup through the node."""
        root = Node.create_root("list")
        root.create_child("item").set_attribute("id", "1")
        root.create_child("item").set_attribute("id", "2")
        seen = []

        assert root.get_each("//list/item/@", seen.append) is True
        assert seen == [{"id": "1"}, {"id": "2"}]

    def test_to_map(self):
        """Test flattening through the node."""
        root = Node.create_root("a").set_attribute("id", "1")
        root.create_child("b", "x")

        # Indentation after the last child is read as an empty value for "a"
        assert root.to_map() == {"a.id": "1", "a.b": "x", "a": ""}

    def test_to_multi_map(self):
        """Test multi-value flattening through the node."""
        root = Node.create_root("a")
        root.create_child("b", "x")
        root.create_child("b", "y")

        assert root.to_multi_map() == {"a.b": ["x", "y"], "a": [""]}
