"""Render journal entries to the terminal as Markdown."""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule

from .models import Entry


def render_entries(entries: Iterable[Entry], console: Optional[Console] = None) -> int:
    """Print entries with a date header above each Markdown body.

    Returns:
        Number of entries printed
    """
    console = console or Console()
    count = 0
    for entry in entries:
        console.print(Rule(entry.date, align="left"))
        console.print(Markdown(entry.body.strip()))
        console.print()
        count += 1
    return count
