"""
Admin dashboard figures and booking list filtering.

Cancelled bookings are kept on record but excluded from booking counts,
revenue and the upcoming list.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sparkclean.config import settings
from sparkclean.engine import SchedulingEngine
from sparkclean.schemas.booking_schema import Booking, BookingStatus
from sparkclean.utils import normalize_phone

logger = logging.getLogger(__name__)

# Queries made only of digits and phone punctuation also match phone numbers.
_PHONE_QUERY = re.compile(r"^\+?[\d\s().-]+$")


@dataclass
class DashboardStats:
    """Headline figures for the admin overview."""

    total_bookings: int = 0
    pending_bookings: int = 0
    total_revenue: float = 0.0
    active_staff: int = 0


@dataclass
class DashboardReport:
    stats: DashboardStats
    upcoming: list[Booking] = field(default_factory=list)


class DashboardCalculator:
    """Calculates the admin overview from the engine's current records."""

    def __init__(self, engine: SchedulingEngine) -> None:
        self._engine = engine

    def calculate(self) -> DashboardStats:
        bookings = self._engine.list_bookings()
        active = [b for b in bookings if b.is_active]
        return DashboardStats(
            total_bookings=len(active),
            pending_bookings=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
            total_revenue=sum(b.total_price for b in active),
            active_staff=len(self._engine.list_staff()),
        )

    def upcoming(self, limit: Optional[int] = None, today: Optional[date] = None) -> list[Booking]:
        """Active bookings ordered by date and time, from ``today`` onwards when given."""
        limit = limit or settings.scheduling.upcoming_bookings_limit
        bookings = [b for b in self._engine.list_bookings() if b.is_active]
        if today is not None:
            bookings = [b for b in bookings if b.date >= today]
        bookings.sort(key=lambda b: (b.date, b.start_minutes))
        return bookings[:limit]

    def report(self, today: Optional[date] = None) -> DashboardReport:
        return DashboardReport(stats=self.calculate(), upcoming=self.upcoming(today=today))

    def format_report(self, report: DashboardReport) -> str:
        """Render a plain-text overview for the console."""
        stats = report.stats
        currency = settings.business.currency
        lines = [
            f"{settings.business.name} dashboard",
            "=" * 40,
            f"Total bookings:   {stats.total_bookings}",
            f"Pending bookings: {stats.pending_bookings}",
            f"Total revenue:    {stats.total_revenue:.2f} {currency}",
            f"Active staff:     {stats.active_staff}",
            "",
            "Upcoming bookings:",
        ]
        if not report.upcoming:
            lines.append("  (none)")
        for booking in report.upcoming:
            service = self._engine.get_service_by_id(booking.service_id)
            member = self._engine.get_staff_by_id(booking.staff_id)
            lines.append(
                f"  {booking.date.isoformat()} {booking.time}  "
                f"{service.name if service else booking.service_id:<20} "
                f"{member.name if member else booking.staff_id:<16} "
                f"{booking.customer_name} [{booking.status.value}]"
            )
        return "\n".join(lines)


def filter_bookings(
    bookings: list[Booking], query: str = "", status: Optional[BookingStatus] = None
) -> list[Booking]:
    """Search bookings by customer name, email or phone, newest first."""
    needle = query.strip().lower()
    digits = normalize_phone(needle) if _PHONE_QUERY.match(needle) else ""

    def matches(booking: Booking) -> bool:
        if status is not None and booking.status != status:
            return False
        if not needle:
            return True
        if needle in booking.customer_name.lower() or needle in booking.customer_email.lower():
            return True
        return bool(digits) and digits in normalize_phone(booking.customer_phone)

    results = [b for b in bookings if matches(b)]
    results.sort(key=lambda b: b.created_at, reverse=True)
    return results
