"""jrnl-md command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import AppConfig, load_config, write_default_config
from .editor import EditorService
from .errors import JournalError
from .filters import FilterService
from .journal import Journal
from .logging import setup_logging
from .models import FilterParams, parse_date
from .render import render_entries
from .server import HAS_MCP, run_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jrnl-md",
        description="Markdown journal kept in a date-indexed JSON file",
    )
    parser.add_argument(
        "--storage-dir",
        "-s",
        type=Path,
        help="Directory holding journals and config (default: ~/.jrnl-md)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to config file (default: auto-detect in storage dir)",
    )
    parser.add_argument(
        "--log-level",
        help="Log level override (DEBUG, INFO, WARNING, ERROR)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create a new journal entry")
    create.add_argument("journal", nargs="?", help="The name of the journal to add the entry to")

    show = commands.add_parser("show", help="Show the journal entries that match the filter")
    show.add_argument("journal", nargs="?", help="The name of the journal to show entries from")
    filtering = show.add_argument_group("filtering")
    filtering.add_argument("--from", dest="from_date", type=parse_date, help="View entries on and after this date")
    filtering.add_argument("--to", dest="to_date", type=parse_date, help="View entries up to and on this date")
    filtering.add_argument("--on", type=parse_date, help="View entries on this date")
    filtering.add_argument("--last", type=int, help="Show the last n entries")

    commands.add_parser("serve", help="Run the MCP server on stdio")

    return parser


def cmd_create(config: AppConfig, journal_name: Optional[str]) -> int:
    journal = Journal.load(config.get_journal_path(journal_name), lock_timeout=config.lock_timeout)
    entry = EditorService(config.editor).create_entry()
    if entry is None:
        print("Nothing written, no entry created.")
        return 0

    journal.add(entry)
    journal.save()
    print(f"Added entry {entry.date} to '{journal.name}'")
    return 0


def cmd_show(config: AppConfig, args: argparse.Namespace) -> int:
    params = FilterParams(
        from_date=args.from_date,
        to_date=args.to_date,
        on=args.on,
        last=args.last,
        journal=args.journal,
    )
    journal = Journal.load(config.get_journal_path(args.journal), lock_timeout=config.lock_timeout)
    entries = FilterService().filter(journal, params)
    if not entries:
        print("No matching entries.")
        return 0
    render_entries(entries)
    return 0


def cmd_serve(config: AppConfig) -> int:
    if not HAS_MCP:
        print("Error: MCP package not installed.", file=sys.stderr)
        print("Install with: pip install jrnl-md[mcp]", file=sys.stderr)
        return 1
    asyncio.run(run_server(config))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.storage_dir, args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(level=args.log_level or config.log_level, log_file=config.log_file)
    config.storage_dir.mkdir(parents=True, exist_ok=True)
    write_default_config(config)

    try:
        if args.command == "create":
            return cmd_create(config, args.journal)
        if args.command == "show":
            return cmd_show(config, args)
        return cmd_serve(config)
    except (JournalError, ValueError) as e:
        logger.debug("Command {} failed", args.command)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
