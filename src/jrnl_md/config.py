"""Configuration loading for jrnl-md.

Settings come from ``config.toml`` or ``config.json`` in the storage
directory (``~/.jrnl-md`` by default). Missing files mean defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .journal import journal_path

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Python <3.11
    except ImportError:  # pragma: no cover
        tomllib = None


DEFAULT_STORAGE_DIR = Path.home() / ".jrnl-md"


def default_editor() -> str:
    """Editor command from the environment, falling back to vi."""
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"


@dataclass
class AppConfig:
    """Configuration for the journal application."""

    storage_dir: Path = field(default_factory=lambda: DEFAULT_STORAGE_DIR)
    editor: str = field(default_factory=default_editor)
    default_journal: str = "journal"

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    # Seconds to wait for the journal file lock when saving
    lock_timeout: float = 10.0

    def get_journal_path(self, name: Optional[str] = None) -> Path:
        return journal_path(self.storage_dir, name or self.default_journal)

    def get_config_path(self) -> Path:
        return self.storage_dir / "config.json"


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    if tomllib is None:
        raise ImportError("tomli required for TOML config: pip install tomli")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dict_to_config(data: dict[str, Any], storage_dir: Path) -> AppConfig:
    """Convert dictionary to AppConfig.

    Accepts the sectioned layout::

        [storage]  dir, lock_timeout
        [editor]   command
        [journal]  default
        [logging]  level, file

    A flat top-level ``editor`` string (as written by
    ``write_default_config``) is accepted too.
    """
    config = AppConfig(storage_dir=storage_dir)

    if "storage" in data:
        storage = data["storage"]
        if "dir" in storage:
            config.storage_dir = Path(storage["dir"]).expanduser()
        if "lock_timeout" in storage:
            config.lock_timeout = float(storage["lock_timeout"])

    editor = data.get("editor")
    if isinstance(editor, str):
        if editor:
            config.editor = editor
    elif isinstance(editor, dict) and editor.get("command"):
        config.editor = editor["command"]

    if "journal" in data:
        if "default" in data["journal"]:
            config.default_journal = data["journal"]["default"]

    if "logging" in data:
        log = data["logging"]
        if "level" in log:
            config.log_level = str(log["level"]).upper()
        if "file" in log:
            config.log_file = str(Path(log["file"]).expanduser())

    return config


def find_config_file(storage_dir: Path) -> Optional[Path]:
    """Find configuration file in the storage directory.

    Search order:
    1. config.toml
    2. config.json
    """
    for name in ("config.toml", "config.json"):
        path = storage_dir / name
        if path.exists():
            return path

    return None


def load_config(storage_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> AppConfig:
    """Load application configuration.

    Args:
        storage_dir: Directory holding journals and config (default ~/.jrnl-md)
        config_path: Optional explicit path to config file

    Returns:
        AppConfig instance
    """
    storage_dir = Path(storage_dir) if storage_dir is not None else DEFAULT_STORAGE_DIR

    if config_path is None:
        config_path = find_config_file(storage_dir)

    if config_path is None:
        # No config file - use defaults
        return AppConfig(storage_dir=storage_dir)

    suffix = config_path.suffix.lower()

    if suffix == ".toml":
        return dict_to_config(load_toml_config(config_path), storage_dir)

    elif suffix == ".json":
        return dict_to_config(load_json_config(config_path), storage_dir)

    else:
        raise ValueError(f"Unsupported config file type: {suffix}")


def write_default_config(config: AppConfig) -> Path:
    """Write ``config.json`` with the current editor if none exists yet."""
    existing = find_config_file(config.storage_dir)
    if existing is not None:
        return existing

    path = config.get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"editor": config.editor}, indent=2), encoding="utf-8")
    return path
