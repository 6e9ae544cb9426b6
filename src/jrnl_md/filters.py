"""Query strategies over the journal's date tree.

Each filter decides for itself whether it applies to a set of parameters
and walks the year/month/day tree directly, pruning whole subtrees instead
of scanning every entry. ``FilterService`` runs every applicable filter and
concatenates the results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from loguru import logger

from .errors import NotFoundError
from .journal import Journal
from .models import Entry, FilterParams, date_keys
from .tree import TreeNode

FIRST_MONTH, LAST_MONTH = "01", "12"
FIRST_DAY, LAST_DAY = "01", "31"


def iter_entries(node: TreeNode) -> Iterator[Entry]:
    """Yield all entries below ``node`` in ascending key order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf:
            yield current.value
            continue
        stack.extend(reversed(current.children()))


def iter_entries_reversed(node: TreeNode) -> Iterator[Entry]:
    """Yield all entries below ``node`` in descending key order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf:
            yield current.value
            continue
        stack.extend(current.children())


class Filter(ABC):
    """A query strategy over the journal tree."""

    @abstractmethod
    def applies(self, params: FilterParams) -> bool:
        """Whether the parameters select this filter."""

    @abstractmethod
    def search(self, root: TreeNode, params: FilterParams) -> Iterator[Entry]:
        """Walk the tree from ``root`` yielding matching entries in order."""

    def execute(self, journal: Journal, params: FilterParams) -> list[Entry]:
        """Run the filter against a journal."""
        results = journal.find(lambda root: self.search(root, params))
        logger.debug("{} matched {} entries", type(self).__name__, len(results))
        return results


class OnFilter(Filter):
    """Entries created on one exact day."""

    def applies(self, params: FilterParams) -> bool:
        return params.on is not None

    def search(self, root: TreeNode, params: FilterParams) -> Iterator[Entry]:
        try:
            day = root.descend(*date_keys(params.on))
        except NotFoundError:
            return
        yield from iter_entries(day)


class FromFilter(Filter):
    """Entries created on or after a date."""

    def applies(self, params: FilterParams) -> bool:
        return params.from_date is not None and params.to_date is None

    def search(self, root: TreeNode, params: FilterParams) -> Iterator[Entry]:
        from_year, from_month, from_day = date_keys(params.from_date)

        for year in root.children():
            if year.key < from_year:
                continue
            if year.key > from_year:
                yield from iter_entries(year)
                continue

            for month in year.children():
                if month.key < from_month:
                    continue
                if month.key > from_month:
                    yield from iter_entries(month)
                    continue

                for day in month.children():
                    if day.key >= from_day:
                        yield from iter_entries(day)


class RangeFilter(Filter):
    """Entries created between two dates, both days included."""

    def applies(self, params: FilterParams) -> bool:
        return params.from_date is not None and params.to_date is not None

    def search(self, root: TreeNode, params: FilterParams) -> Iterator[Entry]:
        if params.from_date > params.to_date:
            return

        from_year, from_month, from_day = date_keys(params.from_date)
        to_year, to_month, to_day = date_keys(params.to_date)

        for year in root.children():
            if year.key < from_year:
                continue
            if year.key > to_year:
                break

            first_month = from_month if year.key == from_year else FIRST_MONTH
            last_month = to_month if year.key == to_year else LAST_MONTH

            for month in year.children():
                if month.key < first_month:
                    continue
                if month.key > last_month:
                    break

                starts_here = year.key == from_year and month.key == from_month
                ends_here = year.key == to_year and month.key == to_month
                first_day = from_day if starts_here else FIRST_DAY
                last_day = to_day if ends_here else LAST_DAY

                for day in month.children():
                    if day.key < first_day:
                        continue
                    if day.key > last_day:
                        break
                    yield from iter_entries(day)


class LastFilter(Filter):
    """The most recent N entries, oldest first."""

    def applies(self, params: FilterParams) -> bool:
        return params.last is not None

    def search(self, root: TreeNode, params: FilterParams) -> Iterator[Entry]:
        collected: list[Entry] = []
        if params.last > 0:
            for entry in iter_entries_reversed(root):
                collected.append(entry)
                if len(collected) == params.last:
                    break
        collected.reverse()
        yield from collected


class FilterService:
    """Runs every applicable filter against a journal."""

    def __init__(self, filters: tuple[Filter, ...] | None = None):
        self.filters = filters if filters is not None else (
            RangeFilter(),
            LastFilter(),
            FromFilter(),
            OnFilter(),
        )

    def filter(self, journal: Journal, params: FilterParams) -> list[Entry]:
        """Entries matched by the applicable filters, or every entry if none apply.

        Results from several filters are concatenated in filter order.
        """
        matched = [f for f in self.filters if f.applies(params)]
        if not matched:
            return list(journal.list_all())

        results: list[Entry] = []
        for f in matched:
            results.extend(f.execute(journal, params))
        return results
