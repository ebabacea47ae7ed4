"""Demo catalog: three cleaning services, two cleaners and two sample bookings."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sparkclean.config import settings
from sparkclean.schemas.booking_schema import Booking, BookingStatus
from sparkclean.schemas.service_schema import Service
from sparkclean.schemas.staff_schema import DayAvailability, Staff, default_week
from sparkclean.store.memory_store import InMemoryStore

DEMO_SERVICES: list[Service] = [
    Service(
        id="service-1",
        name="Standard Cleaning",
        description=(
            "Thorough cleaning of all rooms including vacuuming, mopping, dusting, "
            "and bathroom sanitization."
        ),
        duration_minutes=120,
        price=129,
        icon="home",
        category="Regular",
    ),
    Service(
        id="service-2",
        name="Deep Cleaning",
        description=(
            "Intensive cleaning of hard-to-reach areas, inside appliances, "
            "window tracks, and detailed sanitization."
        ),
        duration_minutes=240,
        price=249,
        icon="sparkles",
        category="Premium",
    ),
    Service(
        id="service-3",
        name="Move-In/Move-Out",
        description=(
            "Top-to-bottom cleaning for properties in transition, including cabinet "
            "interiors and wall spot cleaning."
        ),
        duration_minutes=300,
        price=349,
        icon="truck",
        category="Specialty",
    ),
]


def _demo_staff() -> list[Staff]:
    michael_week = default_week()
    michael_week[3] = DayAvailability(available=False)  # Wednesdays off
    return [
        Staff(
            id="staff-1",
            name="Sarah Johnson",
            email="sarah@sparkclean.com",
            phone="(555) 123-4567",
            capable_services=["service-1", "service-2", "service-3"],
            availability=default_week(),
        ),
        Staff(
            id="staff-2",
            name="Michael Chen",
            email="michael@sparkclean.com",
            phone="(555) 987-6543",
            capable_services=["service-1", "service-2"],
            availability=michael_week,
        ),
    ]


def _demo_bookings(today: date) -> list[Booking]:
    created = datetime.combine(today, time(8, 0), tzinfo=timezone.utc)
    return [
        Booking(
            id="booking-1",
            service_id="service-1",
            staff_id="staff-1",
            customer_id="customer-1",
            customer_name="Emily Parker",
            customer_email="emily.parker@email.com",
            customer_phone="(555) 234-5678",
            date=today + timedelta(days=1),
            time="10:00",
            status=BookingStatus.CONFIRMED,
            total_price=129,
            created_at=created,
            address="123 Oak Street, Apt 4B, New York, NY 10001",
        ),
        Booking(
            id="booking-2",
            service_id="service-2",
            staff_id="staff-2",
            customer_id="customer-2",
            customer_name="James Wilson",
            customer_email="james.wilson@email.com",
            customer_phone="(555) 345-6789",
            date=today + timedelta(days=7),
            time="14:00",
            status=BookingStatus.PENDING,
            total_price=249,
            notes="Please use eco-friendly products",
            created_at=created,
            address="456 Maple Avenue, Suite 201, New York, NY 10002",
        ),
    ]


def build_demo_store(today: Optional[date] = None) -> InMemoryStore:
    """Create a store seeded with the demo catalog, bookings dated relative to ``today``."""
    today = today or date.today()
    return InMemoryStore(
        services=[s.model_copy(deep=True) for s in DEMO_SERVICES],
        staff=_demo_staff(),
        bookings=_demo_bookings(today),
        default_status=BookingStatus(settings.scheduling.default_booking_status),
    )
