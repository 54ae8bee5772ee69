"""Login checks: configured credentials plus a session capacity limit.

This is a gate for event staff, not a security boundary. Sessions are never
expired or validated after login.
"""
from __future__ import annotations

import hmac
import uuid
from enum import Enum
from typing import Dict

from loguru import logger

from .config import Settings
from .exceptions import LoginError
from .store import SeatStore

MSG_CAPACITY = "Maximum number of users reached. Please try again later."
MSG_INVALID = "Invalid username or password"
MSG_UNAVAILABLE = "Login unavailable - try again later."
MSG_FAILED = "Login failed. Please try again."


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    REJECTED = "rejected"


class Authenticator:
    def __init__(
        self,
        store: SeatStore,
        credentials: Dict[str, tuple],
        max_sessions: int = 20,
        allow_login: bool = True,
    ) -> None:
        # credentials: username -> (password, Role)
        self.store = store
        self.credentials = credentials
        self.max_sessions = max_sessions
        self.allow_login = allow_login

    @classmethod
    def from_settings(cls, store: SeatStore, settings: Settings) -> "Authenticator":
        credentials = {}
        if settings.ADMIN_PASSWORD:
            credentials[settings.ADMIN_USERNAME] = (settings.ADMIN_PASSWORD, Role.ADMIN)
        if settings.STAFF_PASSWORD:
            credentials[settings.STAFF_USERNAME] = (settings.STAFF_PASSWORD, Role.STAFF)
        if not credentials:
            logger.warning("No login credentials configured; every login will be rejected")
        return cls(store, credentials, settings.MAX_SESSIONS, settings.ALLOW_LOGIN)

    def authenticate(self, username: str, password: str) -> Role:
        entry = self.credentials.get((username or "").strip())
        if entry is None:
            return Role.REJECTED
        expected, role = entry
        if hmac.compare_digest(str(expected).encode(), str(password or "").encode()):
            return role
        return Role.REJECTED

    def session_capacity_remaining(self) -> int:
        return max(0, self.max_sessions - self.store.count_sessions())

    def login(self, username: str, password: str) -> tuple:
        """Run the full login check. Returns ``(role, session_id)``.

        Raises :class:`LoginError` with a user facing message on refusal.
        """
        try:
            if self.session_capacity_remaining() <= 0:
                raise LoginError(MSG_CAPACITY)
            role = self.authenticate(username, password)
            if role is Role.REJECTED:
                raise LoginError(MSG_INVALID)
            if not self.allow_login:
                raise LoginError(MSG_UNAVAILABLE)
            session_id = str(uuid.uuid4())
            self.store.insert_session(session_id)
        except LoginError as exc:
            logger.info("Login refused for {!r}: {}", username, exc.message)
            raise
        except Exception as exc:
            logger.exception("Login error")
            raise LoginError(MSG_FAILED) from exc
        logger.info("User {!r} logged in as {}", username, role.value)
        return role, session_id
