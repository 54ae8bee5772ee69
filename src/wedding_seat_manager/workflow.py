"""Guest assignment workflow behind the table management dialog.

States::

    CLOSED -> TABLE_SELECTED -> SEAT_EDITING -> SUBMITTING -> CLOSED
                             -> CONFIRMING_REMOVAL -> SUBMITTING -> CLOSED
                             -> SUBMITTING (presence) -> TABLE_SELECTED

A successful assign, edit or removal reloads the collection and closes the
dialog. A presence toggle reloads and keeps the dialog open. A failed call is
logged and the previous state is restored.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from loguru import logger

from .exceptions import FetchError, WorkflowError
from .models import Seat, Table
from .repository import TableRepository
from .view_state import ViewState


class WorkflowState(str, Enum):
    CLOSED = "closed"
    TABLE_SELECTED = "table_selected"
    SEAT_EDITING = "seat_editing"
    CONFIRMING_REMOVAL = "confirming_removal"
    SUBMITTING = "submitting"


class GuestAssignmentWorkflow:
    """Drives one dialog session for a single table."""

    def __init__(self, repository: TableRepository, view_state: ViewState) -> None:
        self.repository = repository
        self.view_state = view_state
        self.state = WorkflowState.CLOSED
        self.table_id: Optional[str] = None
        self.active_seat_id: Optional[str] = None
        self.editing_existing = False
        self.guest_input = ""
        self.pending_removal_id: Optional[str] = None
        self.last_error: Optional[str] = None

    # ----------------------------- accessors -----------------------------
    @property
    def is_open(self) -> bool:
        return self.state is not WorkflowState.CLOSED

    @property
    def is_submitting(self) -> bool:
        return self.state is WorkflowState.SUBMITTING

    @property
    def table(self) -> Optional[Table]:
        if self.table_id is None:
            return None
        return self.view_state.table_by_id(self.table_id)

    @property
    def active_seat(self) -> Optional[Seat]:
        table = self.table
        if table is None or self.active_seat_id is None:
            return None
        return table.find_seat(self.active_seat_id)

    def can_submit(self) -> bool:
        return self.state is WorkflowState.SEAT_EDITING and bool(self.guest_input.strip())

    # ----------------------------- transitions -----------------------------
    def open_table(self, table: Table) -> None:
        self._require_not(WorkflowState.SUBMITTING)
        self.table_id = table.id
        self._reset_seat()
        self.pending_removal_id = None
        self.last_error = None
        self.state = WorkflowState.TABLE_SELECTED

    def open_from_search(self, seat_id: str) -> Optional[Table]:
        """Open the dialog for a quick search hit and clear the search."""
        table = self.view_state.select_quick_result(seat_id)
        if table is not None:
            self.open_table(table)
        return table

    def close(self) -> None:
        self._require_not(WorkflowState.SUBMITTING)
        self._close()

    def begin_assign(self, seat_id: str) -> None:
        seat = self._seat_in_table(seat_id)
        if seat.is_assigned:
            raise WorkflowError(f"Seat {seat.seat_no} already has a guest")
        self.active_seat_id = seat.id
        self.editing_existing = False
        self.guest_input = ""
        self.state = WorkflowState.SEAT_EDITING

    def begin_edit(self, seat_id: str) -> None:
        seat = self._seat_in_table(seat_id)
        if not seat.is_assigned:
            raise WorkflowError(f"Seat {seat.seat_no} has no guest to edit")
        self.active_seat_id = seat.id
        self.editing_existing = True
        self.guest_input = seat.guest_name or ""
        self.state = WorkflowState.SEAT_EDITING

    def set_input(self, text: str) -> None:
        self._require(WorkflowState.SEAT_EDITING)
        self.guest_input = text or ""

    def cancel_edit(self) -> None:
        self._require(WorkflowState.SEAT_EDITING)
        self._reset_seat()
        self.state = WorkflowState.TABLE_SELECTED

    def submit(self) -> bool:
        """Save the guest name for the active seat.

        Returns False without side effects when the input is blank.
        """
        self._require(WorkflowState.SEAT_EDITING)
        if not self.can_submit():
            return False
        seat_id, name, editing = self.active_seat_id, self.guest_input, self.editing_existing
        return self._run(
            WorkflowState.SEAT_EDITING,
            lambda: self.repository.set_guest_name(seat_id, name, editing=editing),
            close_on_success=True,
        )

    def request_removal(self, seat_id: str) -> None:
        seat = self._seat_in_table(seat_id)
        self.pending_removal_id = seat.id
        self.state = WorkflowState.CONFIRMING_REMOVAL

    def cancel_removal(self) -> None:
        self._require(WorkflowState.CONFIRMING_REMOVAL)
        self.pending_removal_id = None
        self.state = WorkflowState.TABLE_SELECTED

    def confirm_removal(self) -> bool:
        self._require(WorkflowState.CONFIRMING_REMOVAL)
        seat_id = self.pending_removal_id
        ok = self._run(
            WorkflowState.TABLE_SELECTED,
            lambda: self.repository.clear_guest(seat_id),
            close_on_success=True,
        )
        if not ok:
            self.pending_removal_id = None
        return ok

    def toggle_presence(self, seat_id: str) -> bool:
        seat = self._seat_in_table(seat_id)
        if not seat.is_assigned:
            raise WorkflowError(f"Seat {seat.seat_no} has no guest")
        self._reset_seat()
        return self._run(
            WorkflowState.TABLE_SELECTED,
            lambda: self.repository.toggle_presence(seat),
            close_on_success=False,
        )

    def refresh(self) -> bool:
        """Reload the collection. Keeps the last good data on failure."""
        try:
            self.view_state.set_tables(self.repository.load_all())
        except FetchError as exc:
            self.last_error = str(exc)
            return False
        return True

    # ----------------------------- internals -----------------------------
    def _run(self, restore: WorkflowState, action: Callable[[], None], close_on_success: bool) -> bool:
        self.state = WorkflowState.SUBMITTING
        self.last_error = None
        try:
            action()
        except FetchError as exc:
            self.last_error = str(exc)
            self.state = restore
            return False
        self.refresh()
        if close_on_success or self.table is None:
            self._close()
        else:
            self.state = WorkflowState.TABLE_SELECTED
        return True

    def _close(self) -> None:
        self.state = WorkflowState.CLOSED
        self.table_id = None
        self.pending_removal_id = None
        self._reset_seat()

    def _reset_seat(self) -> None:
        self.active_seat_id = None
        self.editing_existing = False
        self.guest_input = ""

    def _seat_in_table(self, seat_id: str) -> Seat:
        if self.state not in (WorkflowState.TABLE_SELECTED, WorkflowState.SEAT_EDITING):
            raise WorkflowError(f"Cannot act on a seat while {self.state.value}")
        table = self.table
        seat = table.find_seat(seat_id) if table is not None else None
        if seat is None:
            raise WorkflowError(f"Seat {seat_id} is not part of the open table")
        return seat

    def _require(self, state: WorkflowState) -> None:
        if self.state is not state:
            raise WorkflowError(f"Expected {state.value}, workflow is {self.state.value}")

    def _require_not(self, state: WorkflowState) -> None:
        if self.state is state:
            logger.warning("Rejected action while {}", state.value)
            raise WorkflowError(f"Not allowed while {state.value}")
