"""
Interval-overlap conflict detection against existing bookings.

Intervals are half-open ``[start, end)`` in minutes since midnight. Two
intervals conflict when ``a_start < b_end and a_end > b_start``, which
covers containment, partial overlap from either side and exact
coincidence. Back-to-back intervals do not conflict.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sparkclean.logging_context import get_request_logger
from sparkclean.schemas.booking_schema import Booking
from sparkclean.schemas.service_schema import Service

logger = get_request_logger(__name__)

ServiceLookup = Callable[[str], Optional[Service]]


@dataclass(frozen=True)
class BookedInterval:
    """Time span held by one existing booking."""

    booking_id: str
    start: int
    end: int


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Return True if the half-open intervals ``[a_start, a_end)`` and ``[b_start, b_end)`` intersect."""
    return a_start < b_end and a_end > b_start


def booking_duration(booking: Booking, lookup_service: ServiceLookup) -> Optional[int]:
    """Duration a booking occupies.

    Uses the duration captured when the booking was made; records without a
    snapshot fall back to their own service as it is defined now.
    """
    if booking.duration_minutes is not None:
        return booking.duration_minutes
    service = lookup_service(booking.service_id)
    if service is None:
        return None
    return service.duration_minutes


def occupied_intervals(
    bookings: Iterable[Booking],
    staff_id: str,
    on_date: date,
    lookup_service: ServiceLookup,
    ignore_booking_id: Optional[str] = None,
) -> list[BookedInterval]:
    """Collect the intervals held by one staff member's active bookings on one date."""
    intervals: list[BookedInterval] = []
    for booking in bookings:
        if booking.staff_id != staff_id or booking.date != on_date:
            continue
        if not booking.is_active or booking.id == ignore_booking_id:
            continue
        duration = booking_duration(booking, lookup_service)
        if duration is None:
            logger.warning(
                "Booking %s references unknown service %s; ignoring for conflicts",
                booking.id, booking.service_id,
            )
            continue
        start = booking.start_minutes
        intervals.append(BookedInterval(booking.id, start, start + duration))
    return intervals


def find_conflict(
    slot_start: int, duration_minutes: int, intervals: Iterable[BookedInterval]
) -> Optional[BookedInterval]:
    """Return the first booked interval a candidate slot would overlap, if any."""
    slot_end = slot_start + duration_minutes
    for interval in intervals:
        if intervals_overlap(slot_start, slot_end, interval.start, interval.end):
            return interval
    return None


def has_conflict(slot_start: int, duration_minutes: int, intervals: Iterable[BookedInterval]) -> bool:
    """Check whether a candidate slot overlaps any booked interval."""
    return find_conflict(slot_start, duration_minutes, intervals) is not None
