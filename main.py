"""
Command-line entry point for the scheduling engine over the demo catalog.

Usage:
    python main.py slots --service service-1 --date 2026-10-20
    python main.py dates --service service-2 --days 7
    python main.py book --service service-1 --staff staff-1 --date 2026-10-20 \
        --time 09:00 --name "Ada Lovelace" --email ada@example.com \
        --phone "(555) 010-2030" --address "1 Main St"
    python main.py dashboard
"""

import argparse
import logging
import sys
import uuid
from datetime import date
from itertools import groupby

from pydantic import ValidationError

from sparkclean.admin.dashboard import DashboardCalculator
from sparkclean.config import settings
from sparkclean.demo_data import build_demo_store
from sparkclean.engine import SchedulingEngine
from sparkclean.exceptions import SchedulingError
from sparkclean.logging_context import set_request_id

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"{settings.business.name} booking engine (demo catalog)."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="List free slots for a service on a date.")
    slots.add_argument("--service", required=True, help="Service id, e.g. service-1.")
    slots.add_argument("--date", required=True, type=_parse_date, help="YYYY-MM-DD.")

    dates = sub.add_parser("dates", help="List upcoming dates that have free slots.")
    dates.add_argument("--service", required=True)
    dates.add_argument("--start", type=_parse_date, default=None)
    dates.add_argument("--days", type=int, default=None)

    book = sub.add_parser("book", help="Book a slot and print the confirmation.")
    book.add_argument("--service", required=True)
    book.add_argument("--staff", required=True)
    book.add_argument("--date", required=True, type=_parse_date)
    book.add_argument("--time", required=True, help="HH:MM start time.")
    book.add_argument("--name", required=True)
    book.add_argument("--email", required=True)
    book.add_argument("--phone", required=True)
    book.add_argument("--address", required=True)
    book.add_argument("--notes", default="")

    sub.add_parser("dashboard", help="Show the admin overview.")
    return parser


def _show_slots(engine: SchedulingEngine, args: argparse.Namespace) -> None:
    slots = engine.get_available_slots(args.service, args.date)
    if not slots:
        sys.stdout.write("No available slots for this date. Please try another date.\n")
        return
    for time, group in groupby(slots, key=lambda slot: slot.time):
        names = ", ".join(f"{slot.staff_name} ({slot.staff_id})" for slot in group)
        sys.stdout.write(f"{time}  {names}\n")


def _show_dates(engine: SchedulingEngine, args: argparse.Namespace) -> None:
    for entry in engine.get_available_dates(args.service, args.start, args.days):
        sys.stdout.write(f"{entry['date']} {entry['day_name']:<9} {entry['slot_count']} slot(s)\n")


def _book(engine: SchedulingEngine, args: argparse.Namespace) -> None:
    booking = engine.add_booking(
        {
            "service_id": args.service,
            "staff_id": args.staff,
            "date": args.date,
            "time": args.time,
            "customer_name": args.name,
            "customer_email": args.email,
            "customer_phone": args.phone,
            "address": args.address,
            "notes": args.notes,
        }
    )
    service = engine.get_service_by_id(booking.service_id)
    sys.stdout.write(
        f"Booking {booking.id} [{booking.status.value}]: "
        f"{service.name if service else booking.service_id} on "
        f"{booking.date.isoformat()} at {booking.time}, "
        f"{booking.total_price:.2f} {settings.business.currency}\n"
    )


def main() -> None:
    args = _build_parser().parse_args()
    set_request_id(f"CLI-{uuid.uuid4().hex[:8]}")
    engine = SchedulingEngine(build_demo_store())

    try:
        if args.command == "slots":
            _show_slots(engine, args)
        elif args.command == "dates":
            _show_dates(engine, args)
        elif args.command == "book":
            _book(engine, args)
        else:
            calculator = DashboardCalculator(engine)
            sys.stdout.write(calculator.format_report(calculator.report(today=date.today())) + "\n")
    except (SchedulingError, ValidationError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
