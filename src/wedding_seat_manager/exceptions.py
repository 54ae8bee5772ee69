"""Error types shared across the seat manager."""
from __future__ import annotations


class FetchError(Exception):
    """The seating store could not be reached or rejected a request."""


class WorkflowError(ValueError):
    """An action was requested in a state that does not allow it."""


class LoginError(Exception):
    """Login was refused. ``message`` is safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
