"""Shared test fixtures and helpers."""

from dataclasses import replace
from datetime import date
from typing import Any, Optional

import pytest

from sparkclean.config import SchedulingConfig
from sparkclean.engine import SchedulingEngine
from sparkclean.schemas.service_schema import Service
from sparkclean.schemas.staff_schema import DayAvailability, Staff, TimeWindow
from sparkclean.store.memory_store import InMemoryStore

# Reference week: 2026-10-18 is a Sunday.
SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
WEDNESDAY = date(2026, 10, 21)
SATURDAY = date(2026, 10, 24)


def make_service(service_id: str, duration: int, price: float = 100.0, name: Optional[str] = None) -> Service:
    """Helper to create a Service."""
    return Service(
        id=service_id,
        name=name or f"Service {service_id}",
        duration_minutes=duration,
        price=price,
    )


def make_staff(
    staff_id: str,
    name: str,
    services: list[str],
    week: Optional[dict[int, list[tuple[str, str]]]] = None,
    off_days: tuple[int, ...] = (),
) -> Staff:
    """Helper to create a Staff member from ``{weekday: [(start, end), ...]}``.

    Defaults to 09:00-17:00 on Monday and Tuesday only.
    """
    if week is None:
        week = {1: [("09:00", "17:00")], 2: [("09:00", "17:00")]}
    availability = {
        day: DayAvailability(
            available=day not in off_days,
            slots=[TimeWindow(start=start, end=end) for start, end in windows],
        )
        for day, windows in week.items()
    }
    return Staff(id=staff_id, name=name, capable_services=services, availability=availability)


def make_draft(**overrides: Any) -> dict[str, Any]:
    """Helper to create booking draft fields with sensible defaults."""
    draft = {
        "service_id": "svc-60",
        "staff_id": "staff-a",
        "customer_name": "Emily Parker",
        "customer_email": "emily.parker@email.com",
        "customer_phone": "(555) 234-5678",
        "date": MONDAY,
        "time": "09:00",
        "address": "123 Oak Street, New York, NY 10001",
        "notes": "",
    }
    draft.update(overrides)
    return draft


@pytest.fixture
def store() -> InMemoryStore:
    """Two services (60 and 120 minutes) and two cleaners working Monday/Tuesday 9-5."""
    return InMemoryStore(
        services=[
            make_service("svc-60", 60, price=80, name="Quick Clean"),
            make_service("svc-120", 120, price=129, name="Standard Cleaning"),
        ],
        staff=[
            make_staff("staff-a", "Ana Lopez", ["svc-60", "svc-120"]),
            make_staff("staff-b", "Ben Carter", ["svc-60"]),
        ],
    )


@pytest.fixture
def scheduling_config() -> SchedulingConfig:
    return replace(SchedulingConfig(), slot_granularity_minutes=30, revalidate_bookings=True)


@pytest.fixture
def engine(store, scheduling_config) -> SchedulingEngine:
    return SchedulingEngine(store, scheduling_config)
