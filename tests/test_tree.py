"""Tests for the ordered tree."""

import pytest

from jrnl_md.errors import DuplicateKeyError, NotFoundError, ParseError
from jrnl_md.models import Entry
from jrnl_md.tree import TreeNode


def build_tree() -> TreeNode:
    """Small two-level tree with leaves under 'b' and 'a'."""
    root = TreeNode()
    b = root.get_or_create_child("b")
    a = root.get_or_create_child("a")
    b.add_child(TreeNode("b2", Entry(date="2018-01-02T00:00:00", body="b2")))
    b.add_child(TreeNode("b1", Entry(date="2018-01-01T00:00:00", body="b1")))
    a.add_child(TreeNode("a1", Entry(date="2017-01-01T00:00:00", body="a1")))
    return root


class TestAddChild:
    """Tests for add_child."""

    def test_children_sorted_regardless_of_insert_order(self):
        """Child keys stay in ascending order."""
        root = TreeNode()
        for key in ["c", "a", "d", "b"]:
            root.add_child(TreeNode(key))

        assert root.keys == ("a", "b", "c", "d")
        assert [c.key for c in root.children()] == ["a", "b", "c", "d"]

    def test_ordering_is_string_comparison(self):
        """Keys compare as strings, not numbers."""
        root = TreeNode()
        for key in ["2", "10", "1"]:
            root.add_child(TreeNode(key))

        assert root.keys == ("1", "10", "2")

    def test_duplicate_key_rejected(self):
        """Adding a second child with the same key fails."""
        root = TreeNode()
        root.add_child(TreeNode("a"))

        with pytest.raises(DuplicateKeyError):
            root.add_child(TreeNode("a"))
        assert len(root) == 1

    def test_keyless_child_rejected(self):
        """Only the root may have a null key."""
        with pytest.raises(ValueError):
            TreeNode().add_child(TreeNode())


class TestLookup:
    """Tests for find_child, get_or_create_child and descend."""

    def test_find_child_missing_returns_none(self):
        """find_child never creates."""
        root = TreeNode()
        assert root.find_child("x") is None
        assert len(root) == 0

    def test_get_or_create_is_idempotent(self):
        """A second call returns the same node."""
        root = TreeNode()
        first = root.get_or_create_child("x")
        second = root.get_or_create_child("x")

        assert first is second
        assert len(root) == 1
        assert "x" in root

    def test_internal_nodes_hold_no_value(self):
        """Created internal nodes are not leaves."""
        node = TreeNode().get_or_create_child("x")
        assert node.value is None
        assert not node.is_leaf

    def test_descend(self):
        """descend follows a key path."""
        root = build_tree()
        assert root.descend("b", "b1").value.body == "b1"

    def test_descend_missing_raises(self):
        """descend raises NotFoundError at the first missing key."""
        root = build_tree()
        with pytest.raises(NotFoundError):
            root.descend("b", "zz")


class TestSerialization:
    """Tests for serialize/deserialize."""

    def test_serialized_shape(self):
        """Serialized nodes carry key, value, keys and index."""
        doc = build_tree().serialize()

        assert doc["key"] is None
        assert doc["value"] is None
        assert doc["keys"] == ["a", "b"]
        assert set(doc["index"]) == {"a", "b"}
        leaf = doc["index"]["b"]["index"]["b1"]
        assert leaf["value"] == {"date": "2018-01-01T00:00:00", "body": "b1"}
        assert leaf["keys"] == []

    def test_round_trip(self):
        """Deserializing a serialized tree rebuilds it."""
        original = build_tree()
        rebuilt = TreeNode.deserialize(original.serialize())

        assert rebuilt.serialize() == original.serialize()
        assert rebuilt.descend("a", "a1").value == Entry(date="2017-01-01T00:00:00", body="a1")

    def test_rebuilt_tree_is_live(self):
        """Rebuilt nodes keep enforcing invariants."""
        rebuilt = TreeNode.deserialize(build_tree().serialize())

        rebuilt.find_child("b").add_child(TreeNode("b0"))
        assert rebuilt.find_child("b").keys == ("b0", "b1", "b2")
        with pytest.raises(DuplicateKeyError):
            rebuilt.add_child(TreeNode("a"))

    def test_unsorted_keys_are_resorted(self):
        """The rebuilt order comes from insertion, not document order."""
        doc = {
            "key": None, "value": None, "keys": ["b", "a"],
            "index": {
                "a": {"key": "a", "value": None, "keys": [], "index": {}},
                "b": {"key": "b", "value": None, "keys": [], "index": {}},
            },
        }
        assert TreeNode.deserialize(doc).keys == ("a", "b")

    @pytest.mark.parametrize("doc", [
        [],
        {"key": None, "value": None, "keys": []},
        {"key": None, "value": None, "keys": ["a"], "index": {}},
        {"key": None, "value": None, "keys": [1], "index": {"1": {}}},
        {"key": None, "value": None, "keys": ["a"], "index": {"a": "nope"}},
        {"key": 5, "value": None, "keys": [], "index": {}},
        {"key": None, "value": None, "keys": ["a", "a"],
         "index": {"a": {"key": "a", "value": None, "keys": [], "index": {}}}},
        {"key": None, "value": None, "keys": ["a"],
         "index": {"a": {"key": "b", "value": None, "keys": [], "index": {}}}},
        {"key": None, "value": None, "keys": ["a"],
         "index": {"a": {"key": "a", "value": {"date": 1}, "keys": [], "index": {}}}},
    ])
    def test_malformed_documents_rejected(self, doc):
        """Malformed documents raise ParseError."""
        with pytest.raises(ParseError):
            TreeNode.deserialize(doc)
