"""
Scheduling engine facade.

The single in-process entry point the booking widget and the admin screens
call: availability queries, booking commit/update/cancel, and lookups.

Committing a booking re-checks the chosen slot under a lock scoped to
(staff_id, date), so two customers racing for the same slot cannot both
succeed. The loser gets ``SlotConflictError``. Set
``REVALIDATE_BOOKINGS=false`` to append bookings without the check.

Usage:
    engine = SchedulingEngine(store)
    slots = engine.get_available_slots("service-1", date(2026, 10, 20))
    booking = engine.add_booking({...slot fields, customer fields...})
"""

from typing import Any, Optional, Union

from sparkclean.config import SchedulingConfig, settings
from sparkclean.exceptions import NotFoundError, SlotConflictError
from sparkclean.logging_context import get_request_logger
from sparkclean.scheduling.availability import AvailabilityQuery, DateAvailability, DateLike
from sparkclean.schemas.booking_schema import (
    AvailableSlot,
    Booking,
    BookingDraft,
    BookingStatus,
    BookingUpdate,
)
from sparkclean.schemas.service_schema import Service, ServiceDraft, ServiceUpdate
from sparkclean.schemas.staff_schema import Staff, StaffDraft, StaffUpdate
from sparkclean.store.memory_store import InMemoryStore

logger = get_request_logger(__name__)


class SchedulingEngine:
    """Availability and booking operations over an injected store."""

    def __init__(
        self,
        store: Optional[InMemoryStore] = None,
        config: Optional[SchedulingConfig] = None,
    ) -> None:
        self._config = config or settings.scheduling
        self.store = store or InMemoryStore(
            default_status=BookingStatus(self._config.default_booking_status)
        )
        self.availability = AvailabilityQuery(self.store, self._config.slot_granularity_minutes)

    # --- Queries ---

    def get_available_slots(self, service_id: str, on_date: DateLike) -> list[AvailableSlot]:
        return self.availability.get_available_slots(service_id, on_date)

    def get_available_dates(
        self,
        service_id: str,
        start: Optional[DateLike] = None,
        days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[DateAvailability]:
        return self.availability.get_available_dates(service_id, start, days, limit)

    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        return self.store.get_service_by_id(service_id)

    def get_staff_by_id(self, staff_id: str) -> Optional[Staff]:
        return self.store.get_staff_by_id(staff_id)

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        return self.store.get_booking_by_id(booking_id)

    def list_bookings(self, status: Optional[BookingStatus] = None) -> list[Booking]:
        return self.store.list_bookings(status)

    # --- Booking mutations ---

    def add_booking(self, draft: Union[BookingDraft, dict[str, Any]]) -> Booking:
        """Commit a booking for a slot previously offered by ``get_available_slots``.

        Raises:
            NotFoundError: If the service or staff member does not exist.
            SlotConflictError: If the slot was taken since it was offered.
        """
        draft = BookingDraft.model_validate(draft)
        if not self._config.revalidate_bookings:
            return self.store.add_booking(draft)

        if self.store.get_service_by_id(draft.service_id) is None:
            raise NotFoundError("Service", draft.service_id)
        if self.store.get_staff_by_id(draft.staff_id) is None:
            raise NotFoundError("Staff", draft.staff_id)

        with self.store.slot_lock(draft.staff_id, draft.date):
            if not self.availability.is_slot_available(
                draft.service_id, draft.staff_id, draft.date, draft.time
            ):
                logger.warning(
                    "Rejected booking: %s on %s for %s is no longer free",
                    draft.time, draft.date, draft.staff_id,
                )
                raise SlotConflictError(draft.staff_id, draft.date.isoformat(), draft.time)
            return self.store.add_booking(draft)

    def update_booking(self, booking_id: str, updates: Union[BookingUpdate, dict[str, Any]]) -> Booking:
        """Merge fields into a booking. Moves to another slot are re-checked.

        Raises:
            NotFoundError: If the booking does not exist.
            SlotConflictError: If the booking is moved onto a taken slot.
            InvalidStatusTransitionError: If the status change is not allowed.
        """
        updates = BookingUpdate.model_validate(updates)
        if not self._config.revalidate_bookings or not updates.reschedules():
            return self.store.update_booking(booking_id, updates)

        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        with self.store.booking_lock(booking_id):
            current = self.store.get_booking_by_id(booking_id)
            if current is None:
                raise NotFoundError("Booking", booking_id)
            target = current.model_copy(update=changes)
            if target.status == BookingStatus.CANCELLED:
                return self.store.update_booking(booking_id, updates)

            with self.store.slot_lock(target.staff_id, target.date):
                if not self.availability.is_slot_available(
                    target.service_id,
                    target.staff_id,
                    target.date,
                    target.time,
                    ignore_booking_id=booking_id,
                ):
                    logger.warning(
                        "Rejected reschedule of %s to %s on %s for %s",
                        booking_id, target.time, target.date, target.staff_id,
                    )
                    raise SlotConflictError(target.staff_id, target.date.isoformat(), target.time)
                return self.store.update_booking(booking_id, updates)

    def cancel_booking(self, booking_id: str) -> Booking:
        """Cancel a booking. Safe to call on an already cancelled booking."""
        return self.store.cancel_booking(booking_id)

    # --- Catalog administration ---

    def list_services(self) -> list[Service]:
        return self.store.list_services()

    def add_service(self, draft: Union[ServiceDraft, dict[str, Any]]) -> Service:
        return self.store.add_service(draft)

    def update_service(self, service_id: str, updates: Union[ServiceUpdate, dict[str, Any]]) -> Service:
        return self.store.update_service(service_id, updates)

    def delete_service(self, service_id: str) -> None:
        self.store.delete_service(service_id)

    def list_staff(self) -> list[Staff]:
        return self.store.list_staff()

    def add_staff(self, draft: Union[StaffDraft, dict[str, Any]]) -> Staff:
        return self.store.add_staff(draft)

    def update_staff(self, staff_id: str, updates: Union[StaffUpdate, dict[str, Any]]) -> Staff:
        return self.store.update_staff(staff_id, updates)

    def delete_staff(self, staff_id: str) -> None:
        self.store.delete_staff(staff_id)
