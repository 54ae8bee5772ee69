"""Dashboard view state: filter, search, pagination and view mode.

Derivation order is filter, then search, then paginate. Changing the filter
or the search query returns to page 1; changing the view mode does not.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .models import FilterType, Seat, Table, ViewMode, guest_matches, matches_filter, occupancy

DEFAULT_PAGE_SIZE = 24


def filter_tables(tables: Sequence[Table], filter_type: FilterType) -> List[Table]:
    return [t for t in tables if matches_filter(t, filter_type)]


def search_tables(tables: Sequence[Table], query: str) -> List[Table]:
    """Keep tables with at least one guest matching ``query``.

    An empty query returns the input unchanged.
    """
    if not query:
        return list(tables)
    return [t for t in tables if any(guest_matches(s, query) for s in t.seats)]


def find_guests(tables: Sequence[Table], query: str) -> List[Tuple[Table, Seat]]:
    """Return every ``(table, seat)`` whose guest matches ``query``."""
    if not query.strip():
        return []
    results: List[Tuple[Table, Seat]] = []
    for table in tables:
        for seat in table.seats:
            if guest_matches(seat, query):
                results.append((table, seat))
    return results


@dataclass
class ViewState:
    """Owns the loaded table collection and the derived visible subset."""

    page_size: int = DEFAULT_PAGE_SIZE
    tables: List[Table] = field(default_factory=list)
    filter: FilterType = FilterType.ALL
    view_mode: ViewMode = ViewMode.GRID
    search_query: str = ""
    page: int = 1
    loaded: bool = False

    # ----------------------------- inputs -----------------------------
    def set_tables(self, tables: Sequence[Table]) -> None:
        """Replace the whole collection, as done after every reload."""
        self.tables = list(tables)
        self.loaded = True
        # A reload can shrink the result set below the current page.
        self.go_to_page(self.page)

    def set_filter(self, filter_type: FilterType) -> None:
        self.filter = FilterType.parse(filter_type)
        self.page = 1

    def set_search(self, query: str) -> None:
        self.search_query = query or ""
        self.page = 1

    def clear_search(self) -> None:
        self.set_search("")

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode.parse(mode, self.view_mode)

    def reset_filters(self) -> None:
        self.set_filter(FilterType.ALL)

    # ----------------------------- pagination -----------------------------
    @property
    def page_count(self) -> int:
        return math.ceil(len(self.filtered_tables) / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    def next_page(self) -> None:
        if self.has_next:
            self.page += 1

    def previous_page(self) -> None:
        if self.has_previous:
            self.page -= 1

    def go_to_page(self, page: int) -> None:
        self.page = max(1, min(int(page), max(1, self.page_count)))

    # ----------------------------- derived views -----------------------------
    @property
    def filtered_tables(self) -> List[Table]:
        """Tables passing both the active filter and the search query."""
        return search_tables(filter_tables(self.tables, self.filter), self.search_query)

    @property
    def visible_tables(self) -> List[Table]:
        start = (self.page - 1) * self.page_size
        return self.filtered_tables[start:start + self.page_size]

    @property
    def guest_count(self) -> int:
        """Seated guests across the filtered and searched tables."""
        return sum(occupancy(t) for t in self.filtered_tables)

    @property
    def quick_results(self) -> List[Tuple[Table, Seat]]:
        """Guest matches across the whole collection, ignoring the filter."""
        return find_guests(self.tables, self.search_query)

    def select_quick_result(self, seat_id: str) -> Optional[Table]:
        """Pick a quick search hit: clears the query and returns its table."""
        table = self.table_for_seat(seat_id)
        self.clear_search()
        return table

    def table_by_id(self, table_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.id == table_id), None)

    def table_for_seat(self, seat_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.find_seat(seat_id) is not None), None)
