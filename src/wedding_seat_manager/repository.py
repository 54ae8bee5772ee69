"""Table repository: loads the seating chart and applies seat mutations."""
from __future__ import annotations

from typing import List

from loguru import logger

from .exceptions import FetchError
from .models import Seat, Table
from .store import SeatStore


class TableRepository:
    """Thin adapter over a :class:`SeatStore`.

    Every store failure is logged and re-raised as :class:`FetchError`. No
    local state is kept; callers reload the whole collection after a change.
    """

    def __init__(self, store: SeatStore) -> None:
        self.store = store

    def load_all(self) -> List[Table]:
        """Fetch every table with its seats, sorted by label ascending."""
        try:
            records = self.store.fetch_tables()
        except Exception as exc:
            logger.exception("Error fetching tables")
            raise FetchError("Could not load tables") from exc
        tables = [Table.from_record(r) for r in records]
        logger.debug("Loaded {} tables", len(tables))
        return tables

    def set_guest_name(self, seat_id: str, name: str, editing: bool = False) -> None:
        """Write ``name`` to the seat and reset presence to absent.

        The reset applies to renames as well as fresh assignments.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Guest name must not be empty")
        action = "updating" if editing else "assigning"
        self._update(seat_id, {"guest_name": name, "is_present": False}, action)
        logger.info("{} guest {!r} on seat {}", "Renamed" if editing else "Assigned", name, seat_id)

    def clear_guest(self, seat_id: str) -> None:
        """Unassign the seat. Safe on an already empty seat."""
        self._update(seat_id, {"guest_name": None, "is_present": False}, "removing")
        logger.info("Cleared seat {}", seat_id)

    def set_presence(self, seat_id: str, present: bool) -> None:
        self._update(seat_id, {"is_present": bool(present)}, "toggling presence")
        logger.info("Seat {} marked {}", seat_id, "present" if present else "absent")

    def toggle_presence(self, seat: Seat) -> bool:
        """Flip presence for an occupied seat. Returns the new flag.

        Unassigned seats are left alone.
        """
        if not seat.is_assigned:
            logger.warning("Ignoring presence toggle on unassigned seat {}", seat.id)
            return False
        new_value = not seat.is_present
        self.set_presence(seat.id, new_value)
        return new_value

    def _update(self, seat_id: str, values: dict, action: str) -> None:
        try:
            self.store.update_seat(seat_id, values)
        except Exception as exc:
            logger.exception("Error {} for seat {}", action, seat_id)
            raise FetchError(f"Error {action} for seat {seat_id}") from exc
