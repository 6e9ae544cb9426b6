"""Shared pytest fixtures for jrnl-md tests."""

import tempfile
from pathlib import Path

import pytest

from jrnl_md.config import AppConfig
from jrnl_md.journal import Journal
from jrnl_md.models import Entry


@pytest.fixture
def temp_dir():
    """Create a temporary storage directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def journal_file(temp_dir):
    """Path of a journal file that does not exist yet."""
    return temp_dir / "personal.json"


@pytest.fixture
def journal(journal_file):
    """An empty journal backed by a temp file."""
    return Journal(journal_file)


@pytest.fixture
def make_entries():
    """Factory for entries with the given dates and numbered bodies."""

    def _make(*dates: str) -> list[Entry]:
        return [Entry(date=d, body=f"Entry {i + 1}") for i, d in enumerate(dates)]

    return _make


@pytest.fixture
def make_journal():
    """Factory for an unsaved journal holding the given entries."""

    def _make(path: Path, entries: list[Entry]) -> Journal:
        journal = Journal(path)
        for entry in entries:
            journal.add(entry)
        return journal

    return _make


@pytest.fixture
def config(temp_dir):
    """Create a test configuration."""
    return AppConfig(
        storage_dir=temp_dir,
        editor="true",
        default_journal="personal",
    )
