"""Ordered multiway tree used to index journal entries.

Each node keeps its children in two structures kept in sync on every insert:
a dict for O(1) lookup by key and a list of keys sorted ascending by string
comparison. Traversals rely on that sorted list for chronological order.

Serialized form (one node)::

    {"key": str | None, "value": dict | None, "keys": [str, ...], "index": {key: node}}
"""

from __future__ import annotations

import bisect
from typing import Any, Callable, Optional

from .errors import DuplicateKeyError, NotFoundError, ParseError
from .models import Entry


class TreeNode:
    """A node keyed by string with sorted, uniquely keyed children."""

    def __init__(self, key: Optional[str] = None, value: Optional[Entry] = None):
        self.key = key
        self.value = value
        self._index: dict[str, TreeNode] = {}
        self._keys: list[str] = []

    def __repr__(self) -> str:
        return f"TreeNode(key={self.key!r}, children={len(self._keys)}, leaf={self.is_leaf})"

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    @property
    def keys(self) -> tuple[str, ...]:
        """Child keys in ascending order."""
        return tuple(self._keys)

    @property
    def is_leaf(self) -> bool:
        """True if the node holds an entry."""
        return self.value is not None

    def add_child(self, node: TreeNode) -> None:
        """Insert a child keyed by ``node.key``.

        Raises:
            DuplicateKeyError: If a child with that key already exists
            ValueError: If the node has no key
        """
        if node.key is None:
            raise ValueError("Child nodes must have a key")
        if node.key in self._index:
            raise DuplicateKeyError(f"Key '{node.key}' already exists under '{self.key}'")

        self._index[node.key] = node
        bisect.insort(self._keys, node.key)

    def find_child(self, key: str) -> Optional[TreeNode]:
        """Return the child with ``key``, or None. Never creates."""
        return self._index.get(key)

    def get_or_create_child(self, key: str, value: Optional[Entry] = None) -> TreeNode:
        """Return the child with ``key``, creating and inserting it if absent."""
        child = self._index.get(key)
        if child is None:
            child = TreeNode(key, value)
            self.add_child(child)
        return child

    def children(self) -> list[TreeNode]:
        """Children in ascending key order."""
        return [self._index[k] for k in self._keys]

    def descend(self, *keys: str) -> TreeNode:
        """Follow a path of child keys from this node.

        Raises:
            NotFoundError: At the first key that has no child
        """
        node = self
        for key in keys:
            child = node.find_child(key)
            if child is None:
                raise NotFoundError(f"No node '{key}' under '{node.key}'")
            node = child
        return node

    def serialize(self) -> dict[str, Any]:
        """Convert the subtree rooted here to plain dicts for JSON."""
        return {
            "key": self.key,
            "value": self.value.to_dict() if self.value is not None else None,
            "keys": list(self._keys),
            "index": {k: self._index[k].serialize() for k in self._keys},
        }

    @classmethod
    def deserialize(
        cls,
        doc: Any,
        value_factory: Callable[[dict], Entry] = Entry.from_dict,
    ) -> TreeNode:
        """Rebuild a tree from its serialized form.

        Every document node becomes a fresh TreeNode attached to its parent
        through ``add_child``, so the rebuilt tree obeys the same invariants
        as one built by live inserts.

        Raises:
            ParseError: If the document is not a well-formed tree
        """
        root = cls._build_node(doc, path="<root>", value_factory=value_factory)
        stack: list[tuple[dict, TreeNode, str]] = [(doc, root, "<root>")]

        while stack:
            node_doc, node, path = stack.pop()
            keys = node_doc["keys"]
            index = node_doc["index"]

            if not isinstance(keys, list) or not isinstance(index, dict):
                raise ParseError(f"{path}: 'keys' must be a list and 'index' an object")
            if not all(isinstance(k, str) for k in keys):
                raise ParseError(f"{path}: child keys must be strings")
            if len(keys) != len(index) or set(keys) != set(index):
                raise ParseError(f"{path}: 'keys' does not match 'index'")

            for key in keys:
                child_path = f"{path}/{key}"
                child_doc = index[key]
                child = cls._build_node(child_doc, path=child_path, value_factory=value_factory)
                if child.key != key:
                    raise ParseError(f"{child_path}: node key {child.key!r} does not match its slot")
                try:
                    node.add_child(child)
                except DuplicateKeyError as e:
                    raise ParseError(f"{child_path}: {e}") from e
                stack.append((child_doc, child, child_path))

        return root

    @classmethod
    def _build_node(
        cls,
        node_doc: Any,
        path: str,
        value_factory: Callable[[dict], Entry],
    ) -> TreeNode:
        """Create a childless node from one document node."""
        if not isinstance(node_doc, dict):
            raise ParseError(f"{path}: node must be an object")
        missing = [f for f in ("key", "keys", "index") if f not in node_doc]
        if missing:
            raise ParseError(f"{path}: missing fields {missing}")

        key = node_doc["key"]
        if key is not None and not isinstance(key, str):
            raise ParseError(f"{path}: key must be a string or null")

        raw_value = node_doc.get("value")
        value = None
        if raw_value is not None:
            try:
                value = value_factory(raw_value)
            except ValueError as e:
                raise ParseError(f"{path}: invalid value: {e}") from e

        return cls(key, value)
