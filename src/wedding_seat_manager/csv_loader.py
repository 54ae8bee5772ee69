"""CSV import and export of the seating chart."""
from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, List

import pandas as pd

from .models import (
    TABLE_CAPACITY,
    Seat,
    Table,
    fill_percentage,
    occupancy,
    parse_bool,
    parse_guest_name,
    present_count,
    seat_sort_key,
    status_label,
)

SEAT_COLUMNS = ["table_id", "table_label", "seat_id", "seat_no", "guest_name", "is_present"]


def _text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def load_seating(path: Path | str | IO[Any]) -> List[Table]:
    """Load tables and seats from a seating CSV.

    Required columns are ``table_label`` and ``seat_no``. ``table_id``,
    ``seat_id``, ``guest_name`` and ``is_present`` are optional; missing ids
    are derived from the label and seat number. Tables with fewer than eight
    rows are padded with empty seats.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    missing = [c for c in ("table_label", "seat_no") if c not in df.columns]
    if missing:
        raise ValueError(f"Seating CSV is missing columns: {', '.join(missing)}")

    tables: Dict[str, Table] = {}
    for _, row in df.iterrows():
        label = _text(row.get("table_label"))
        if not label:
            raise ValueError("Seating CSV has a row without table_label")
        table_id = _text(row.get("table_id")) or label.lower().replace(" ", "-")
        table = tables.setdefault(label, Table(id=table_id, label=label))
        seat_no = _text(row.get("seat_no"))
        seat_id = _text(row.get("seat_id")) or f"{table.id}-{seat_no}"
        if table.find_seat(seat_id) is not None:
            raise ValueError(f"Duplicate seat {seat_no} at {label}")
        table.seats.append(
            Seat(
                id=seat_id,
                seat_no=seat_no,
                guest_name=parse_guest_name(row.get("guest_name")),
                is_present=parse_bool(row.get("is_present", "false")),
            )
        )

    for table in tables.values():
        if len(table.seats) > TABLE_CAPACITY:
            raise ValueError(f"{table.label} has {len(table.seats)} seats, limit is {TABLE_CAPACITY}")
        taken = {s.seat_no for s in table.seats}
        n = 1
        while len(table.seats) < TABLE_CAPACITY:
            if str(n) not in taken:
                table.seats.append(Seat(id=f"{table.id}-{n}", seat_no=str(n)))
            n += 1
        table.seats.sort(key=lambda s: seat_sort_key(s.seat_no))

    return sorted(tables.values(), key=lambda t: t.label)


def tables_to_frame(tables: List[Table]) -> pd.DataFrame:
    """One row per seat, in the same column layout ``load_seating`` reads."""
    rows = []
    for table in tables:
        for seat in table.seats:
            rows.append({
                "table_id": table.id,
                "table_label": table.label,
                "seat_id": seat.id,
                "seat_no": seat.seat_no,
                "guest_name": seat.guest_name,
                "is_present": seat.status == "present",
            })
    return pd.DataFrame(rows, columns=SEAT_COLUMNS)


def table_summary_frame(tables: List[Table]) -> pd.DataFrame:
    """One row per table for the list view."""
    rows = [
        {
            "table": t.label,
            "filled": occupancy(t),
            "capacity": TABLE_CAPACITY,
            "fill_percentage": fill_percentage(t),
            "status": status_label(t).value,
            "present": present_count(t),
        }
        for t in tables
    ]
    return pd.DataFrame(rows, columns=["table", "filled", "capacity", "fill_percentage", "status", "present"])


def export_seating(tables: List[Table], path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tables_to_frame(tables).to_csv(path, index=False)
