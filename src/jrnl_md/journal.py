"""Date-indexed journal store backed by a single JSON file.

Entries live at the leaves of a four-level tree::

    root -> year ("2018") -> month ("03") -> day ("14") -> timestamp -> Entry

Month and day keys are zero-padded so that sorted string keys are also in
calendar order. Leaf keys come from ``leaf_key``: the normalized
timestamp, in UTC when the entry carries an offset.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

import portalocker
from loguru import logger

from .errors import JournalIOError, ParseError
from .locking import locked_atomic_write
from .models import Entry, date_keys, leaf_key
from .tree import TreeNode

T = TypeVar("T")

# Depth of timestamp leaves below the root: year, month, day, timestamp
LEAF_DEPTH = 4


def journal_path(storage_dir: Path, name: str) -> Path:
    """Path of the backing file for the journal called ``name``."""
    if not name.endswith(".json"):
        name = name + ".json"
    return Path(storage_dir) / name


def check_layout(root: TreeNode, path: Path) -> None:
    """Verify that a loaded tree has the year/month/day/timestamp layout.

    Internal nodes hold no value. Entries sit exactly at leaf depth, have
    no children, and are filed under the path and key their own date maps to.

    Raises:
        ParseError: On the first node that breaks the layout
    """
    stack = [(root, ())]
    while stack:
        node, keys = stack.pop()
        where = "/".join(keys) or "<root>"

        if len(keys) < LEAF_DEPTH:
            if node.value is not None:
                raise ParseError(f"Journal {path}: {where} holds an entry above day level")
            stack.extend((child, keys + (child.key,)) for child in node.children())
            continue

        if node.value is None or len(node):
            raise ParseError(f"Journal {path}: {where} must be an entry with no children")
        try:
            timestamp = node.value.timestamp
        except ValueError as e:
            raise ParseError(f"Journal {path}: {where} has an invalid date: {e}") from e
        expected = date_keys(timestamp.date()) + (leaf_key(timestamp),)
        if keys != expected:
            raise ParseError(
                f"Journal {path}: entry dated {node.value.date!r} is filed under {where}"
            )


class Journal:
    """In-memory tree of entries paired with its backing file."""

    def __init__(self, path: Path, root: Optional[TreeNode] = None, lock_timeout: float = 10.0):
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._root = root if root is not None else TreeNode()

    def __repr__(self) -> str:
        return f"Journal(path={str(self.path)!r})"

    def __len__(self) -> int:
        return sum(1 for _ in self.list_all())

    def __iter__(self) -> Iterator[Entry]:
        return self.list_all()

    @property
    def name(self) -> str:
        return self.path.stem

    def add(self, entry: Entry) -> None:
        """Index an entry under its year, month and day.

        Raises:
            ValueError: If the entry date is not an ISO 8601 timestamp
            DuplicateKeyError: If an entry with the same timestamp exists
        """
        timestamp = entry.timestamp
        year, month, day = date_keys(timestamp.date())

        year_node = self._root.get_or_create_child(year)
        month_node = year_node.get_or_create_child(month)
        day_node = month_node.get_or_create_child(day)

        key = leaf_key(timestamp)
        day_node.add_child(TreeNode(key, entry))
        logger.debug("Indexed entry {} in journal '{}'", key, self.name)

    def find(self, search: Callable[[TreeNode], Iterator[T]]) -> list[T]:
        """Run a read-only traversal over the tree and collect its results."""
        return list(search(self._root))

    def list_all(self) -> Iterator[Entry]:
        """Yield every entry in ascending timestamp order.

        Breadth-first over sorted children; every leaf sits at the same
        depth, so leaves come out in key order.
        """
        queue = deque([self._root])
        while queue:
            node = queue.popleft()
            if node.is_leaf:
                yield node.value
                continue
            queue.extend(node.children())

    # ========== Persistence ==========

    @classmethod
    def load(cls, path: Path, lock_timeout: float = 10.0) -> Journal:
        """Load a journal, or start an empty one if the file does not exist.

        Raises:
            JournalIOError: If the file exists but cannot be read
            ParseError: If the file contents are not a valid journal tree
        """
        path = Path(path)
        if not path.exists():
            logger.info("No journal file at {}, starting empty", path)
            return cls(path, lock_timeout=lock_timeout)

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Journal {path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise JournalIOError(f"Cannot read journal {path}: {e}") from e

        try:
            doc = json.loads(content)
        except ValueError as e:
            raise ParseError(f"Journal {path} is not valid JSON: {e}") from e

        root = TreeNode.deserialize(doc)
        if root.key is not None or root.value is not None:
            raise ParseError(f"Journal {path}: root node must have null key and value")
        check_layout(root, path)

        logger.info("Loaded journal {}", path)
        return cls(path, root, lock_timeout=lock_timeout)

    def save(self) -> None:
        """Write the whole tree to the backing file.

        Raises:
            JournalIOError: If the file cannot be written or locked
        """
        payload = json.dumps(self._root.serialize(), indent=2, ensure_ascii=False)
        try:
            with locked_atomic_write(self.path, timeout=self.lock_timeout) as f:
                f.write(payload)
        except (OSError, portalocker.LockException) as e:
            raise JournalIOError(f"Cannot write journal {self.path}: {e}") from e
        logger.info("Saved journal {}", self.path)

    @classmethod
    async def load_async(cls, path: Path, lock_timeout: float = 10.0) -> Journal:
        """``load`` run in a worker thread."""
        return await asyncio.to_thread(cls.load, path, lock_timeout)

    async def save_async(self) -> None:
        """``save`` run in a worker thread."""
        await asyncio.to_thread(self.save)
