"""MCP tool definitions wrapping the journal store."""

from __future__ import annotations

from typing import Any

from .config import AppConfig
from .errors import DuplicateKeyError, JournalError, JournalIOError, ParseError
from .filters import FilterService
from .journal import Journal
from .models import Entry, FilterParams, format_timestamp, local_now, parse_timestamp

DATE_DESCRIPTION = "ISO 8601 date (YYYY-MM-DD)"


def make_tools() -> dict[str, dict]:
    """Create MCP tool definitions for the journal store.

    Returns:
        Dict mapping tool names to their definitions.
    """

    tools = {}

    # ========== journal_add ==========
    tools["journal_add"] = {
        "name": "journal_add",
        "description": "Add a Markdown entry to a journal. Entries are keyed by timestamp; two entries may not share one.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "journal": {
                    "type": "string",
                    "description": "Journal name (default from config)",
                },
                "body": {
                    "type": "string",
                    "description": "Entry text (Markdown)",
                },
                "date": {
                    "type": "string",
                    "description": "ISO 8601 timestamp for the entry (default: now)",
                },
            },
            "required": ["body"],
        },
    }

    # ========== journal_show ==========
    tools["journal_show"] = {
        "name": "journal_show",
        "description": "Return journal entries in chronological order, optionally filtered by date.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "journal": {
                    "type": "string",
                    "description": "Journal name (default from config)",
                },
                "from": {
                    "type": "string",
                    "description": f"Entries on and after this date. {DATE_DESCRIPTION}",
                },
                "to": {
                    "type": "string",
                    "description": f"Entries up to and on this date, used with 'from'. {DATE_DESCRIPTION}",
                },
                "on": {
                    "type": "string",
                    "description": f"Entries on this date. {DATE_DESCRIPTION}",
                },
                "last": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "The most recent N entries",
                },
            },
        },
    }

    return tools


async def execute_tool(config: AppConfig, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Execute a tool and return the result.

    Args:
        config: Application configuration
        name: Tool name
        arguments: Tool arguments

    Returns:
        Result dictionary with ``success`` and either data or error details
    """
    try:
        path = config.get_journal_path(arguments.get("journal"))

        if name == "journal_add":
            date_arg = arguments.get("date")
            stamp = format_timestamp(parse_timestamp(str(date_arg)) if date_arg else local_now())
            entry = Entry(date=stamp, body=arguments["body"])

            journal = await Journal.load_async(path, lock_timeout=config.lock_timeout)
            journal.add(entry)
            await journal.save_async()
            return {
                "success": True,
                "journal": journal.name,
                "entry": entry.to_dict(),
            }

        elif name == "journal_show":
            params = FilterParams.from_dict(arguments)
            journal = await Journal.load_async(path, lock_timeout=config.lock_timeout)
            entries = FilterService().filter(journal, params)
            return {
                "success": True,
                "journal": journal.name,
                "count": len(entries),
                "entries": [e.to_dict() for e in entries],
            }

        else:
            return {
                "success": False,
                "error": f"Unknown tool: {name}",
            }

    except DuplicateKeyError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "duplicate_key",
            "suggestion": "An entry with this exact timestamp already exists",
        }

    except ParseError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "parse_error",
            "suggestion": "The journal file is corrupt; restore it from a backup",
        }

    except JournalIOError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "io_error",
        }

    except JournalError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "journal_error",
        }

    except (KeyError, ValueError) as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "invalid_argument",
        }
