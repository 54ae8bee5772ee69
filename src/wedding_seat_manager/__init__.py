"""Wedding seat manager package."""
from .models import Seat, Table, TableStatus, FilterType, ViewMode, occupancy, status_label
from .exceptions import FetchError, WorkflowError, LoginError
from .repository import TableRepository
from .view_state import ViewState
from .workflow import GuestAssignmentWorkflow, WorkflowState

__all__ = [
    "Seat",
    "Table",
    "TableStatus",
    "FilterType",
    "ViewMode",
    "occupancy",
    "status_label",
    "FetchError",
    "WorkflowError",
    "LoginError",
    "TableRepository",
    "ViewState",
    "GuestAssignmentWorkflow",
    "WorkflowState",
]
