import pathlib
import sys

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_seat_manager.models import TABLE_CAPACITY, Seat, Table
from wedding_seat_manager.store import InMemorySeatStore


def make_table(label, guests=(), present=(), table_id=None):
    """Build a table with eight seats; ``guests`` fill seats from seat 1."""
    table_id = table_id or label.lower().replace(" ", "-")
    seats = []
    for n in range(1, TABLE_CAPACITY + 1):
        name = guests[n - 1] if n - 1 < len(guests) else None
        seats.append(Seat(
            id=f"{table_id}-s{n}",
            seat_no=str(n),
            guest_name=name,
            is_present=name is not None and name in present,
        ))
    return Table(id=table_id, label=label, seats=seats)


class FailingStore(InMemorySeatStore):
    """In-memory store that raises on demand."""

    def __init__(self, records=(), fail_fetch=False, fail_update=False, fail_sessions=False):
        super().__init__(records)
        self.fail_fetch = fail_fetch
        self.fail_update = fail_update
        self.fail_sessions = fail_sessions

    def fetch_tables(self):
        if self.fail_fetch:
            raise ConnectionError("store unreachable")
        return super().fetch_tables()

    def update_seat(self, seat_id, values):
        if self.fail_update:
            raise ConnectionError("store unreachable")
        super().update_seat(seat_id, values)

    def count_sessions(self):
        if self.fail_sessions:
            raise ConnectionError("store unreachable")
        return super().count_sessions()


@pytest.fixture
def tables():
    return [
        make_table("Table 1", ["Alice", "Bob"], present=["Bob"]),
        make_table("Table 2", ["Carol", "Dan", "Erin", "Frank", "Gina", "Hank", "Ivy", "Jack"]),
        make_table("Table 3"),
    ]


@pytest.fixture
def store(tables):
    return InMemorySeatStore.from_tables(tables)
