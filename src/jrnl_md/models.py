"""Data models for journal entries and query parameters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional


def local_now() -> datetime:
    """Get current local time with timezone info."""
    return datetime.now().astimezone()


def format_timestamp(dt: datetime) -> str:
    """Format datetime as ISO 8601 with millisecond precision."""
    return dt.isoformat(timespec='milliseconds')


def parse_timestamp(s: str) -> datetime:
    """Parse ISO 8601 timestamp string."""
    return datetime.fromisoformat(s.strip())


def parse_date(value: Any) -> date:
    """Coerce an ISO date, ISO timestamp, date or datetime to a date.

    Raises:
        ValueError: If the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    try:
        return parse_timestamp(value).date()
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}") from None


def leaf_key(dt: datetime) -> str:
    """Leaf key for an entry timestamp.

    Offset-aware timestamps are keyed by their UTC instant so that a repeated
    wall-clock hour (DST fall-back) still sorts by real time. Naive
    timestamps are keyed as written.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return format_timestamp(dt)


def date_keys(d: date) -> tuple[str, str, str]:
    """Tree keys (year, month, day) for a calendar date.

    Month and day are zero-padded so that string order is calendar order.
    """
    return f"{d.year:04d}", f"{d.month:02d}", f"{d.day:02d}"


@dataclass(frozen=True)
class Entry:
    """A single journal entry."""
    date: str
    body: str

    @property
    def timestamp(self) -> datetime:
        """The entry date parsed as a datetime."""
        return parse_timestamp(self.date)

    def to_dict(self) -> dict:
        """Convert entry to dictionary for JSON serialization."""
        return {"date": self.date, "body": self.body}

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        """Build an entry from its serialized form.

        Raises:
            ValueError: If either field is missing or not a string
        """
        if not isinstance(data, dict):
            raise ValueError(f"Entry must be an object, got {type(data).__name__}")
        entry_date = data.get("date")
        body = data.get("body")
        if not isinstance(entry_date, str) or not isinstance(body, str):
            raise ValueError("Entry requires string 'date' and 'body' fields")
        return cls(date=entry_date, body=body)


@dataclass
class FilterParams:
    """Query parameters selecting which entries to return."""
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    on: Optional[date] = None
    last: Optional[int] = None
    journal: Optional[str] = None

    def __post_init__(self):
        if self.last is not None and self.last < 0:
            raise ValueError(f"last must be a non-negative integer, got {self.last}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterParams":
        """Build params from wire names (from, to, on, last, journal)."""

        def opt_date(key: str) -> Optional[date]:
            value = data.get(key)
            if value is None or value == "":
                return None
            return parse_date(value)

        last = data.get("last")
        if last is not None:
            try:
                last = int(last)
            except (TypeError, ValueError):
                raise ValueError(f"last must be an integer, got {last!r}") from None

        return cls(
            from_date=opt_date("from"),
            to_date=opt_date("to"),
            on=opt_date("on"),
            last=last,
            journal=data.get("journal"),
        )
