"""Data models for the wedding seat manager."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import math

TABLE_CAPACITY = 8


def parse_bool(value: object) -> bool:
    """Parse common truthy values into bool.

    Accepts real booleans, ``1``/``0`` and strings such as ``"true"`` or
    ``"yes"``. ``None`` and ``float('nan')`` from ``pandas`` are ``False``.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return str(value).strip().lower() in {"true", "1", "yes", "y", "present"}


def parse_guest_name(value: object) -> Optional[str]:
    """Normalize a guest name. Blank values mean the seat is unassigned."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return None
    return text


def seat_sort_key(seat_no: str):
    """Sort seat labels numerically where possible ("2" before "10")."""
    text = str(seat_no).strip()
    if text.isdigit():
        return (0, int(text), text)
    return (1, 0, text)


class TableStatus(str, Enum):
    """Occupancy label for a table."""

    EMPTY = "Empty"
    IN_PROGRESS = "In Progress"
    COMPLETE = "Complete"


class FilterType(str, Enum):
    """Table listing filter."""

    ALL = "all"
    AVAILABLE = "available"
    TAKEN = "taken"

    @classmethod
    def parse(cls, value: object, default: "FilterType" = None) -> "FilterType":
        """Return the member for ``value`` or ``default`` for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default if default is not None else cls.ALL


class ViewMode(str, Enum):
    """Dashboard layout preference."""

    GRID = "grid"
    LIST = "list"

    @classmethod
    def parse(cls, value: object, default: "ViewMode" = None) -> "ViewMode":
        """Return the member for ``value`` or ``default`` for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default if default is not None else cls.GRID


@dataclass
class Seat:
    """One assignable position at a table."""

    id: str
    seat_no: str
    guest_name: Optional[str] = None
    is_present: bool = False

    @property
    def is_assigned(self) -> bool:
        return self.guest_name is not None

    @property
    def status(self) -> str:
        # Unassigned seats never count as present.
        return "present" if self.is_assigned and self.is_present else "absent"

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Seat":
        return cls(
            id=str(record["id"]),
            seat_no=str(record.get("seat_no", "")),
            guest_name=parse_guest_name(record.get("guest_name")),
            is_present=parse_bool(record.get("is_present", False)),
        )


@dataclass
class Table:
    """A named seating unit holding up to ``TABLE_CAPACITY`` seats."""

    id: str
    label: str
    seats: List[Seat] = field(default_factory=list)

    def find_seat(self, seat_id: str) -> Optional[Seat]:
        return next((s for s in self.seats if s.id == seat_id), None)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Table":
        """Build a table from a store row with nested ``seats``."""
        seats = [Seat.from_record(s) for s in record.get("seats") or []]
        seats.sort(key=lambda s: seat_sort_key(s.seat_no))
        return cls(id=str(record["id"]), label=str(record.get("label", "")), seats=seats)


# ----------------------------- derivations -----------------------------

def occupancy(table: Table) -> int:
    """Count seats holding a guest name."""
    return sum(1 for seat in table.seats if seat.guest_name is not None)


def present_count(table: Table) -> int:
    return sum(1 for seat in table.seats if seat.status == "present")


def fill_percentage(table: Table) -> float:
    return occupancy(table) / TABLE_CAPACITY * 100


def status_label(table: Table) -> TableStatus:
    filled = occupancy(table)
    if filled == 0:
        return TableStatus.EMPTY
    if filled >= TABLE_CAPACITY:
        return TableStatus.COMPLETE
    return TableStatus.IN_PROGRESS


def is_available(table: Table) -> bool:
    return occupancy(table) < TABLE_CAPACITY


def is_taken(table: Table) -> bool:
    return occupancy(table) == TABLE_CAPACITY


def matches_filter(table: Table, filter_type: FilterType) -> bool:
    if filter_type is FilterType.AVAILABLE:
        return is_available(table)
    if filter_type is FilterType.TAKEN:
        return is_taken(table)
    return True


def guest_matches(seat: Seat, query: str) -> bool:
    """Case-insensitive substring match on the seat's guest name."""
    if seat.guest_name is None:
        return False
    return query.lower() in seat.guest_name.lower()
