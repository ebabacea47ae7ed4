"""
In-memory store for services, staff and bookings.

Holds the three shared collections behind one re-entrant lock. Records are
never mutated in place: every edit stores a new validated model, so a
snapshot taken under the lock stays consistent after the lock is released.
Bookings are indexed by (staff_id, date) for conflict lookups.
"""

import threading
from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from sparkclean.exceptions import NotFoundError
from sparkclean.logging_context import get_request_logger
from sparkclean.scheduling.lifecycle import validate_status_change
from sparkclean.schemas.booking_schema import Booking, BookingDraft, BookingStatus, BookingUpdate
from sparkclean.schemas.service_schema import Service, ServiceDraft, ServiceUpdate
from sparkclean.schemas.staff_schema import Staff, StaffDraft, StaffUpdate
from sparkclean.utils import new_id

logger = get_request_logger(__name__)

SlotKey = tuple[str, date]
LockKey = tuple[Any, ...]


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


@dataclass(frozen=True)
class StoreSnapshot:
    """Consistent read-only view of the store at one instant."""

    services: dict[str, Service] = field(default_factory=dict)
    staff: list[Staff] = field(default_factory=list)
    bookings_by_slot: dict[SlotKey, list[Booking]] = field(default_factory=dict)

    def get_service(self, service_id: str) -> Optional[Service]:
        return self.services.get(service_id)

    def get_staff(self, staff_id: str) -> Optional[Staff]:
        for member in self.staff:
            if member.id == staff_id:
                return member
        return None

    def bookings_for(self, staff_id: str, on_date: date) -> list[Booking]:
        return self.bookings_by_slot.get((staff_id, on_date), [])


class InMemoryStore:
    """Thread-safe repository over the services, staff and bookings collections."""

    def __init__(
        self,
        services: Iterable[Service] = (),
        staff: Iterable[Staff] = (),
        bookings: Iterable[Booking] = (),
        default_status: BookingStatus = BookingStatus.PENDING,
    ) -> None:
        self._lock = threading.RLock()
        self._key_locks: dict[LockKey, _KeyLock] = {}
        self._services: dict[str, Service] = {s.id: s for s in services}
        self._staff: dict[str, Staff] = {s.id: s for s in staff}
        self._bookings: dict[str, Booking] = {}
        self._by_slot: dict[SlotKey, list[str]] = defaultdict(list)
        self._default_status = default_status
        for booking in bookings:
            self._insert(booking)

    # --- Snapshots and locking ---

    def snapshot(self) -> StoreSnapshot:
        """Copy the collections under the lock for a consistent read."""
        with self._lock:
            return StoreSnapshot(
                services=dict(self._services),
                staff=list(self._staff.values()),
                bookings_by_slot={
                    key: [self._bookings[bid] for bid in ids]
                    for key, ids in self._by_slot.items()
                    if ids
                },
            )

    @contextmanager
    def slot_lock(self, staff_id: str, on_date: date) -> Iterator[None]:
        """Serialize check-and-commit for one staff member's day."""
        with self._hold(("slot", staff_id, on_date)):
            yield

    @contextmanager
    def booking_lock(self, booking_id: str) -> Iterator[None]:
        """Serialize concurrent edits of one booking."""
        with self._hold(("booking", booking_id)):
            yield

    @contextmanager
    def _hold(self, key: LockKey) -> Iterator[None]:
        # Entries live only while someone holds or waits on them.
        with self._lock:
            entry = self._key_locks.get(key)
            if entry is None:
                entry = self._key_locks[key] = _KeyLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._key_locks[key]

    # --- Services ---

    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        with self._lock:
            return self._services.get(service_id)

    def list_services(self) -> list[Service]:
        with self._lock:
            return list(self._services.values())

    def add_service(self, draft: Union[ServiceDraft, dict[str, Any]]) -> Service:
        draft = ServiceDraft.model_validate(draft)
        service = Service(id=new_id("service"), **draft.model_dump())
        with self._lock:
            self._services[service.id] = service
        logger.info("Service added: %s (%s)", service.id, service.name)
        return service

    def update_service(self, service_id: str, updates: Union[ServiceUpdate, dict[str, Any]]) -> Service:
        updates = ServiceUpdate.model_validate(updates)
        with self._lock:
            current = self._services.get(service_id)
            if current is None:
                raise NotFoundError("Service", service_id)
            service = Service.model_validate(
                {**current.model_dump(), **updates.model_dump(exclude_unset=True, exclude_none=True)}
            )
            self._services[service_id] = service
        logger.info("Service updated: %s", service_id)
        return service

    def delete_service(self, service_id: str) -> None:
        with self._lock:
            if self._services.pop(service_id, None) is None:
                raise NotFoundError("Service", service_id)
        logger.info("Service deleted: %s", service_id)

    # --- Staff ---

    def get_staff_by_id(self, staff_id: str) -> Optional[Staff]:
        with self._lock:
            return self._staff.get(staff_id)

    def list_staff(self) -> list[Staff]:
        with self._lock:
            return list(self._staff.values())

    def add_staff(self, draft: Union[StaffDraft, dict[str, Any]]) -> Staff:
        draft = StaffDraft.model_validate(draft)
        member = Staff(id=new_id("staff"), **draft.model_dump())
        with self._lock:
            self._staff[member.id] = member
        logger.info("Staff added: %s (%s)", member.id, member.name)
        return member

    def update_staff(self, staff_id: str, updates: Union[StaffUpdate, dict[str, Any]]) -> Staff:
        updates = StaffUpdate.model_validate(updates)
        with self._lock:
            current = self._staff.get(staff_id)
            if current is None:
                raise NotFoundError("Staff", staff_id)
            member = Staff.model_validate(
                {**current.model_dump(), **updates.model_dump(exclude_unset=True, exclude_none=True)}
            )
            self._staff[staff_id] = member
        logger.info("Staff updated: %s", staff_id)
        return member

    def delete_staff(self, staff_id: str) -> None:
        with self._lock:
            if self._staff.pop(staff_id, None) is None:
                raise NotFoundError("Staff", staff_id)
        logger.info("Staff deleted: %s", staff_id)

    # --- Bookings ---

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_bookings(self, status: Optional[BookingStatus] = None) -> list[Booking]:
        with self._lock:
            bookings = list(self._bookings.values())
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        return bookings

    def bookings_for(self, staff_id: str, on_date: date) -> list[Booking]:
        with self._lock:
            return [self._bookings[bid] for bid in self._by_slot.get((staff_id, on_date), [])]

    def add_booking(self, draft: Union[BookingDraft, dict[str, Any]]) -> Booking:
        """Store a new booking with a fresh id, creation time and default status.

        The booked service's duration is captured on the record, and its
        price is used when the draft carries no total.
        """
        draft = BookingDraft.model_validate(draft)
        with self._lock:
            service = self._services.get(draft.service_id)
            fields = draft.model_dump()
            fields.update(
                id=new_id("booking"),
                customer_id=draft.customer_id or new_id("customer"),
                status=draft.status or self._default_status,
                total_price=_resolve_price(draft, service),
                created_at=datetime.now(timezone.utc),
                duration_minutes=service.duration_minutes if service else None,
            )
            booking = Booking.model_validate(fields)
            self._insert(booking)
        logger.info(
            "Booking created: %s for %s on %s at %s with %s",
            booking.id, booking.customer_name, booking.date, booking.time, booking.staff_id,
        )
        return booking

    def update_booking(self, booking_id: str, updates: Union[BookingUpdate, dict[str, Any]]) -> Booking:
        """Merge fields into an existing booking.

        Raises:
            NotFoundError: If the booking does not exist.
            InvalidStatusTransitionError: If the status change is not allowed.
        """
        updates = BookingUpdate.model_validate(updates)
        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise NotFoundError("Booking", booking_id)
            if changes.get("status") is not None:
                validate_status_change(current.status, changes["status"])
            if "service_id" in changes and changes["service_id"] != current.service_id:
                service = self._services.get(changes["service_id"])
                changes["duration_minutes"] = service.duration_minutes if service else None
            booking = Booking.model_validate({**current.model_dump(), **changes})
            self._replace(current, booking)
        logger.info("Booking updated: %s (%s)", booking_id, ", ".join(sorted(changes)))
        return booking

    def cancel_booking(self, booking_id: str) -> Booking:
        """Mark a booking cancelled regardless of its status. The record is kept.

        Raises:
            NotFoundError: If the booking does not exist.
        """
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise NotFoundError("Booking", booking_id)
            booking = current.model_copy(update={"status": BookingStatus.CANCELLED})
            self._replace(current, booking)
        logger.info("Booking cancelled: %s", booking_id)
        return booking

    def _insert(self, booking: Booking) -> None:
        self._bookings[booking.id] = booking
        self._by_slot[(booking.staff_id, booking.date)].append(booking.id)

    def _replace(self, current: Booking, booking: Booking) -> None:
        old_key = (current.staff_id, current.date)
        new_key = (booking.staff_id, booking.date)
        if old_key != new_key:
            self._by_slot[old_key].remove(current.id)
            self._by_slot[new_key].append(booking.id)
        self._bookings[booking.id] = booking


def _resolve_price(draft: BookingDraft, service: Optional[Service]) -> float:
    if draft.total_price is not None:
        return draft.total_price
    return service.price if service else 0.0
