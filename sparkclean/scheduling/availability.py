"""
Availability query: which staff are free for a service on a date.

For every staff member qualified for the service and working that
weekday, each working window is expanded into candidate starts and every
candidate that overlaps one of the member's active bookings is dropped.
Survivors from all staff are sorted by start time and deduplicated per
(time, staff). Two staff free at the same time stay as two entries.

All reads for one query come from a single store snapshot.
"""

from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional, TypedDict, Union

from sparkclean.clock import coerce_date, format_minutes, to_minutes, weekday_index
from sparkclean.config import settings
from sparkclean.logging_context import get_request_logger
from sparkclean.scheduling.conflict_detector import has_conflict, occupied_intervals
from sparkclean.scheduling.slot_generator import expand_day
from sparkclean.schemas.booking_schema import AvailableSlot
from sparkclean.schemas.service_schema import Service
from sparkclean.schemas.staff_schema import Staff

if TYPE_CHECKING:
    from sparkclean.store.memory_store import InMemoryStore, StoreSnapshot

logger = get_request_logger(__name__)

DateLike = Union[date, str]


class DateAvailability(TypedDict):
    """Summary of availability for a single date."""

    date: str
    day_name: str
    slot_count: int


class AvailabilityQuery:
    """Computes bookable slots from a store. Results are never cached."""

    def __init__(self, store: "InMemoryStore", granularity_minutes: Optional[int] = None) -> None:
        self._store = store
        self._granularity = granularity_minutes or settings.scheduling.slot_granularity_minutes

    @property
    def granularity_minutes(self) -> int:
        return self._granularity

    def get_available_slots(self, service_id: str, on_date: DateLike) -> list[AvailableSlot]:
        """Return free (time, staff) pairs for a service on a date, ordered by time.

        An unknown service has no availability and yields an empty list.
        """
        on_date = coerce_date(on_date)
        snapshot = self._store.snapshot()
        service = snapshot.get_service(service_id)
        if service is None:
            logger.debug("No availability for unknown service %s", service_id)
            return []

        candidates: list[tuple[int, Staff]] = []
        for member in snapshot.staff:
            if not member.can_perform(service_id):
                continue
            for start in self._free_starts(snapshot, service, member, on_date):
                candidates.append((start, member))

        candidates.sort(key=lambda candidate: candidate[0])

        seen: set[tuple[int, str]] = set()
        slots: list[AvailableSlot] = []
        for start, member in candidates:
            key = (start, member.id)
            if key in seen:
                continue
            seen.add(key)
            slots.append(
                AvailableSlot(time=format_minutes(start), staff_id=member.id, staff_name=member.name)
            )

        logger.debug(
            "%d slot(s) for service %s on %s", len(slots), service_id, on_date.isoformat()
        )
        return slots

    def is_slot_available(
        self,
        service_id: str,
        staff_id: str,
        on_date: DateLike,
        time: str,
        ignore_booking_id: Optional[str] = None,
    ) -> bool:
        """Check one (staff, date, time) candidate the same way the full query would.

        ``ignore_booking_id`` leaves one booking out of the conflict check,
        so a booking being moved does not block its own new slot.
        """
        on_date = coerce_date(on_date)
        snapshot = self._store.snapshot()
        service = snapshot.get_service(service_id)
        member = snapshot.get_staff(staff_id)
        if service is None or member is None or not member.can_perform(service_id):
            return False
        start = to_minutes(time)
        return start in self._free_starts(snapshot, service, member, on_date, ignore_booking_id)

    def get_available_dates(
        self,
        service_id: str,
        start: Optional[DateLike] = None,
        days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[DateAvailability]:
        """Get the dates with at least one free slot, scanning forward from ``start``."""
        first = coerce_date(start) if start is not None else date.today()
        if days is None:
            days = settings.scheduling.available_dates_lookahead_days
        results: list[DateAvailability] = []
        for offset in range(days):
            if limit is not None and len(results) >= limit:
                break
            day = first + timedelta(days=offset)
            slots = self.get_available_slots(service_id, day)
            if slots:
                results.append(
                    {
                        "date": day.isoformat(),
                        "day_name": day.strftime("%A"),
                        "slot_count": len(slots),
                    }
                )
        return results

    def _free_starts(
        self,
        snapshot: "StoreSnapshot",
        service: Service,
        member: Staff,
        on_date: date,
        ignore_booking_id: Optional[str] = None,
    ) -> list[int]:
        day = member.day(weekday_index(on_date))
        if day is None or not day.available:
            return []
        intervals = occupied_intervals(
            snapshot.bookings_for(member.id, on_date),
            member.id,
            on_date,
            snapshot.get_service,
            ignore_booking_id=ignore_booking_id,
        )
        return [
            start
            for start in expand_day(day, self._granularity)
            if not has_conflict(start, service.duration_minutes, intervals)
        ]
