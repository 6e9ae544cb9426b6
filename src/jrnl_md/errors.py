"""Exceptions raised by the journal store and its collaborators."""

from __future__ import annotations


class JournalError(Exception):
    """Base exception for journal operations."""
    pass


class DuplicateKeyError(JournalError):
    """Raised when a child with the same key already exists on a node.

    For the journal this means two entries share the exact same timestamp.
    """
    pass


class ParseError(JournalError):
    """Raised when a persisted journal cannot be rebuilt into a tree."""
    pass


class JournalIOError(JournalError):
    """Raised when a journal file cannot be read or written."""
    pass


class NotFoundError(JournalError):
    """Raised when a key path does not exist in the tree.

    Query strategies treat this as "no match" and return nothing.
    """
    pass


class EditorError(JournalError):
    """Raised when the external editor exits unsuccessfully."""
    pass
