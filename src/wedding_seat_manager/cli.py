"""Command line interface for the wedding seat manager."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from loguru import logger

from .config import get_settings
from .csv_loader import export_seating
from .exceptions import FetchError
from .logging_config import configure_logging
from .models import TABLE_CAPACITY, FilterType, occupancy, status_label
from .repository import TableRepository
from .store import SeatStore, build_store
from .view_state import ViewState, find_guests


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wedding seat manager")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List tables with occupancy.")
    p_list.add_argument("--filter", choices=[f.value for f in FilterType], default="all")
    p_list.add_argument("--search", default="", help="Only tables with a matching guest.")
    p_list.add_argument("--page", type=int, default=1)

    p_find = sub.add_parser("find", help="Find guests by name across all tables.")
    p_find.add_argument("query")

    p_assign = sub.add_parser("assign", help="Assign or rename the guest on a seat.")
    p_assign.add_argument("seat_id")
    p_assign.add_argument("name")

    p_clear = sub.add_parser("clear", help="Remove the guest from a seat.")
    p_clear.add_argument("seat_id")

    p_presence = sub.add_parser("presence", help="Mark a seated guest present or absent.")
    p_presence.add_argument("seat_id")
    p_presence.add_argument("status", choices=["present", "absent"])

    p_export = sub.add_parser("export", help="Write the seating chart to CSV.")
    p_export.add_argument("path", type=Path)
    return parser


def main(argv: Sequence[str] | None = None, store: SeatStore | None = None) -> int:
    """Entry point used by ``python -m wedding_seat_manager.cli``."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    repo = TableRepository(store if store is not None else build_store(settings))

    try:
        if args.command == "list":
            state = ViewState(page_size=settings.PAGE_SIZE)
            state.set_tables(repo.load_all())
            state.set_filter(FilterType(args.filter))
            state.set_search(args.search)
            state.go_to_page(args.page)
            for t in state.visible_tables:
                print(f"{t.id}\t{t.label}\t{occupancy(t)}/{TABLE_CAPACITY}\t{status_label(t).value}")
            print(f"[PAGE] {state.page}/{state.page_count} tables={len(state.filtered_tables)} "
                  f"guests={state.guest_count}")
        elif args.command == "find":
            for table, seat in find_guests(repo.load_all(), args.query):
                print(f"{seat.guest_name}\t{table.label}\tseat {seat.seat_no}\t{seat.status}\t{seat.id}")
        elif args.command == "assign":
            tables = repo.load_all()
            seat = next((s for t in tables for s in t.seats if s.id == args.seat_id), None)
            if seat is None:
                print(f"Unknown seat: {args.seat_id}")
                return 1
            repo.set_guest_name(seat.id, args.name, editing=seat.is_assigned)
        elif args.command == "clear":
            repo.clear_guest(args.seat_id)
        elif args.command == "presence":
            repo.set_presence(args.seat_id, args.status == "present")
        elif args.command == "export":
            export_seating(repo.load_all(), args.path)
            print(f"Wrote {args.path}")
    except FetchError as exc:
        logger.error("Command {} failed: {}", args.command, exc)
        print(f"Error: {exc}")
        return 1
    except ValueError as exc:
        print(f"Input validation error: {exc}")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
