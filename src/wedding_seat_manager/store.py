"""Seating store backends.

The hosted store owns three relations: ``tables``, ``seats`` (nested under a
table) and ``sessions``. Everything here speaks plain row dictionaries; model
conversion happens in the repository.
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

from loguru import logger

from .config import Settings
from .models import TABLE_CAPACITY, Table

TABLE_QUERY = "id, label, seats(id, seat_no, guest_name, is_present)"


class SeatStore(ABC):
    """Key-based CRUD access to tables, seats and sessions."""

    @abstractmethod
    def fetch_tables(self) -> List[Dict[str, Any]]:
        """Return all tables with nested seats, ordered by label ascending."""

    @abstractmethod
    def update_seat(self, seat_id: str, values: Dict[str, Any]) -> None:
        """Apply ``values`` to the seat with ``seat_id``."""

    @abstractmethod
    def count_sessions(self) -> int:
        ...

    @abstractmethod
    def insert_session(self, session_id: str) -> None:
        ...


class SupabaseSeatStore(SeatStore):
    """Store backed by a hosted Supabase project."""

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseSeatStore":
        from supabase import create_client

        return cls(create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY))

    def fetch_tables(self) -> List[Dict[str, Any]]:
        response = self.client.table("tables").select(TABLE_QUERY).order("label").execute()
        return list(response.data or [])

    def update_seat(self, seat_id: str, values: Dict[str, Any]) -> None:
        self.client.table("seats").update(values).eq("id", seat_id).execute()

    def count_sessions(self) -> int:
        response = self.client.table("sessions").select("*", count="exact", head=True).execute()
        return int(response.count or 0)

    def insert_session(self, session_id: str) -> None:
        self.client.table("sessions").insert({"session_id": session_id}).execute()


class InMemorySeatStore(SeatStore):
    """Process-local store used for demo mode and tests."""

    def __init__(self, records: Iterable[Dict[str, Any]] = ()) -> None:
        self._tables: List[Dict[str, Any]] = [copy.deepcopy(r) for r in records]
        self._sessions: List[str] = []

    @classmethod
    def from_tables(cls, tables: Iterable[Table]) -> "InMemorySeatStore":
        records = []
        for t in tables:
            records.append({
                "id": t.id,
                "label": t.label,
                "seats": [
                    {"id": s.id, "seat_no": s.seat_no, "guest_name": s.guest_name, "is_present": s.is_present}
                    for s in t.seats
                ],
            })
        return cls(records)

    @classmethod
    def with_empty_tables(cls, count: int) -> "InMemorySeatStore":
        records = []
        for i in range(1, count + 1):
            records.append({
                "id": f"t{i}",
                "label": f"Table {i}",
                "seats": [
                    {"id": f"t{i}-s{n}", "seat_no": str(n), "guest_name": None, "is_present": False}
                    for n in range(1, TABLE_CAPACITY + 1)
                ],
            })
        return cls(records)

    def fetch_tables(self) -> List[Dict[str, Any]]:
        return sorted(copy.deepcopy(self._tables), key=lambda r: r["label"])

    def update_seat(self, seat_id: str, values: Dict[str, Any]) -> None:
        for table in self._tables:
            for seat in table["seats"]:
                if seat["id"] == seat_id:
                    seat.update(values)
                    return
        raise KeyError(f"Unknown seat: {seat_id}")

    def count_sessions(self) -> int:
        return len(self._sessions)

    def insert_session(self, session_id: str) -> None:
        self._sessions.append(session_id)


def build_store(settings: Settings) -> SeatStore:
    """Pick the hosted store when configured, else an in-memory demo store."""
    if settings.uses_supabase:
        logger.info("Using Supabase store at {}", settings.SUPABASE_URL)
        return SupabaseSeatStore.from_settings(settings)
    if settings.SEATING_CSV:
        from .csv_loader import load_seating

        logger.info("Using in-memory store seeded from {}", settings.SEATING_CSV)
        return InMemorySeatStore.from_tables(load_seating(settings.SEATING_CSV))
    logger.info("Using in-memory store with {} empty tables", settings.DEMO_TABLE_COUNT)
    return InMemorySeatStore.with_empty_tables(settings.DEMO_TABLE_COUNT)
