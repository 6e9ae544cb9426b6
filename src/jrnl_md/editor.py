"""Create journal entries in the user's text editor."""

from __future__ import annotations

import shlex
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from .errors import EditorError
from .models import Entry, format_timestamp, local_now


def parse_temp_file(contents: str) -> Optional[Entry]:
    """Parse an edited temp file into an entry.

    The first line is the entry date, the rest is the body. Returns None
    when the file is empty (the user quit without writing anything).
    """
    if not contents:
        return None

    lines = contents.split("\n")
    entry_date = lines[0].strip()
    body = "\n".join(lines[1:])
    return Entry(date=entry_date, body=body)


class EditorService:
    """Opens the configured editor on a temp file and reads the entry back."""

    def __init__(self, command: str, tmp_dir: Optional[Path] = None):
        self.command = command
        self.tmp_dir = tmp_dir

    def create_entry(self, now: Optional[datetime] = None) -> Optional[Entry]:
        """Let the user write a new entry, pre-filled with the current time.

        Returns:
            The new entry, or None if nothing was written

        Raises:
            EditorError: If the editor exits with a non-zero status
        """
        stamp = format_timestamp(now or local_now())
        with tempfile.NamedTemporaryFile(
            "w", suffix=".md", dir=self.tmp_dir, delete=False, encoding="utf-8"
        ) as f:
            f.write(f"{stamp}\n")
            temp_path = Path(f.name)

        try:
            self._spawn(temp_path)
            entry = parse_temp_file(temp_path.read_text(encoding="utf-8"))
        finally:
            temp_path.unlink(missing_ok=True)

        if entry is None or not entry.body.strip():
            logger.info("Editor closed without an entry body")
            return None
        return entry

    def _spawn(self, path: Path) -> None:
        args = shlex.split(self.command) + [str(path)]
        logger.debug("Running editor: {}", args)
        try:
            result = subprocess.run(args)
        except OSError as e:
            raise EditorError(f"Cannot start editor '{self.command}': {e}") from e
        if result.returncode != 0:
            raise EditorError(f"Editor exited with code {result.returncode}")
