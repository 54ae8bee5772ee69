"""Per-browser application session.

Replaces ad hoc global flags with one object that is loaded at startup and
saved at the points where it changes (login, logout, view mode change).

In the Streamlit app the storage is ``st.session_state``, which lives only as
long as the browser tab's websocket session. Reloading the page starts a new
session: the user is logged out and the view mode falls back to grid.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import MutableMapping, Optional

from .models import ViewMode

KEY_AUTHENTICATED = "isAuthenticated"
KEY_ADMIN = "isAdmin"
KEY_SESSION_ID = "sessionId"
KEY_VIEW_MODE = "viewMode"


@dataclass
class AppSession:
    is_authenticated: bool = False
    is_admin: bool = False
    session_id: Optional[str] = None
    view_mode: ViewMode = ViewMode.GRID

    @classmethod
    def load(cls, storage: MutableMapping) -> "AppSession":
        """Read persisted values, ignoring anything malformed."""
        authenticated = storage.get(KEY_AUTHENTICATED) == "true"
        session_id = storage.get(KEY_SESSION_ID)
        return cls(
            is_authenticated=authenticated,
            is_admin=authenticated and storage.get(KEY_ADMIN) == "true",
            session_id=str(session_id) if authenticated and session_id else None,
            view_mode=ViewMode.parse(storage.get(KEY_VIEW_MODE), ViewMode.GRID),
        )

    def save(self, storage: MutableMapping) -> None:
        storage[KEY_VIEW_MODE] = self.view_mode.value
        if self.is_authenticated:
            storage[KEY_AUTHENTICATED] = "true"
            storage[KEY_ADMIN] = "true" if self.is_admin else "false"
            if self.session_id:
                storage[KEY_SESSION_ID] = self.session_id
        else:
            for key in (KEY_AUTHENTICATED, KEY_ADMIN, KEY_SESSION_ID):
                storage.pop(key, None)

    def login(self, is_admin: bool, session_id: str) -> None:
        self.is_authenticated = True
        self.is_admin = is_admin
        self.session_id = session_id

    def logout(self) -> None:
        # View mode is a preference and survives logout.
        self.is_authenticated = False
        self.is_admin = False
        self.session_id = None

    def set_view_mode(self, mode: object) -> None:
        self.view_mode = ViewMode.parse(mode, self.view_mode)
