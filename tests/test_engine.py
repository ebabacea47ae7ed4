"""Tests for the scheduling engine facade and commit-time re-validation."""

import threading
from dataclasses import replace

import pytest

from sparkclean.engine import SchedulingEngine
from sparkclean.exceptions import NotFoundError, SlotConflictError
from sparkclean.schemas.booking_schema import BookingStatus
from tests.conftest import MONDAY, TUESDAY, make_draft


class TestQueries:
    def test_get_service_by_id(self, engine):
        assert engine.get_service_by_id("svc-60").name == "Quick Clean"
        assert engine.get_service_by_id("svc-missing") is None

    def test_get_staff_by_id(self, engine):
        assert engine.get_staff_by_id("staff-b").name == "Ben Carter"
        assert engine.get_staff_by_id("staff-missing") is None

    def test_get_booking_by_id_absent(self, engine):
        assert engine.get_booking_by_id("booking-missing") is None

    def test_available_slots(self, engine):
        assert len(engine.get_available_slots("svc-60", MONDAY)) == 32

    def test_available_dates(self, engine):
        dates = engine.get_available_dates("svc-120", start=MONDAY, days=2)
        assert [d["date"] for d in dates] == ["2026-10-19", "2026-10-20"]


class TestAddBooking:
    def test_books_offered_slot(self, engine):
        slot = engine.get_available_slots("svc-60", MONDAY)[0]
        booking = engine.add_booking(make_draft(time=slot.time, staff_id=slot.staff_id))
        assert engine.get_booking_by_id(booking.id) == booking
        assert booking.status == BookingStatus.PENDING

    def test_booked_slot_disappears(self, engine):
        engine.add_booking(make_draft(time="10:00"))
        remaining = [(s.time, s.staff_id) for s in engine.get_available_slots("svc-60", MONDAY)]
        assert ("10:00", "staff-a") not in remaining
        assert ("10:00", "staff-b") in remaining

    def test_taken_slot_rejected(self, engine):
        engine.add_booking(make_draft(service_id="svc-120", time="10:00"))
        with pytest.raises(SlotConflictError, match="no longer available"):
            engine.add_booking(make_draft(time="11:00"))

    def test_slot_freed_by_cancellation_can_be_rebooked(self, engine):
        first = engine.add_booking(make_draft(time="10:00"))
        engine.cancel_booking(first.id)
        second = engine.add_booking(make_draft(time="10:00"))
        assert second.id != first.id

    def test_unknown_service(self, engine):
        with pytest.raises(NotFoundError, match="Service"):
            engine.add_booking(make_draft(service_id="svc-missing"))

    def test_unknown_staff(self, engine):
        with pytest.raises(NotFoundError, match="Staff"):
            engine.add_booking(make_draft(staff_id="staff-missing"))

    def test_staff_not_qualified(self, engine):
        with pytest.raises(SlotConflictError):
            engine.add_booking(make_draft(service_id="svc-120", staff_id="staff-b"))

    def test_outside_working_hours(self, engine):
        with pytest.raises(SlotConflictError):
            engine.add_booking(make_draft(time="07:00"))

    def test_revalidation_disabled_appends_anyway(self, store, scheduling_config):
        engine = SchedulingEngine(store, replace(scheduling_config, revalidate_bookings=False))
        engine.add_booking(make_draft(time="10:00"))
        engine.add_booking(make_draft(time="10:00"))
        assert len(engine.list_bookings()) == 2

    def test_concurrent_commits_for_same_slot(self, engine):
        results: list[str] = []
        barrier = threading.Barrier(8)

        def attempt() -> None:
            barrier.wait()
            try:
                engine.add_booking(make_draft(time="14:00"))
                results.append("booked")
            except SlotConflictError:
                results.append("conflict")

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("booked") == 1
        assert results.count("conflict") == 7
        assert len(engine.store.bookings_for("staff-a", MONDAY)) == 1


class TestUpdateBooking:
    def test_reschedule_to_free_slot(self, engine):
        booking = engine.add_booking(make_draft(time="10:00"))
        moved = engine.update_booking(booking.id, {"time": "15:00"})
        assert moved.time == "15:00"

    def test_reschedule_within_own_interval(self, engine):
        booking = engine.add_booking(make_draft(service_id="svc-120", time="10:00"))
        assert engine.update_booking(booking.id, {"time": "10:30"}).time == "10:30"

    def test_reschedule_onto_taken_slot_rejected(self, engine):
        engine.add_booking(make_draft(staff_id="staff-b", time="10:00"))
        booking = engine.add_booking(make_draft(time="10:00"))
        with pytest.raises(SlotConflictError):
            engine.update_booking(booking.id, {"staff_id": "staff-b"})
        assert engine.get_booking_by_id(booking.id).staff_id == "staff-a"

    def test_reschedule_to_other_day(self, engine):
        booking = engine.add_booking(make_draft(time="10:00"))
        assert engine.update_booking(booking.id, {"date": TUESDAY}).date == TUESDAY

    def test_non_slot_update_skips_check(self, engine):
        booking = engine.add_booking(make_draft(time="10:00"))
        assert engine.update_booking(booking.id, {"status": "confirmed"}).status == BookingStatus.CONFIRMED

    def test_unknown_booking(self, engine):
        with pytest.raises(NotFoundError):
            engine.update_booking("booking-missing", {"notes": "x"})

    def test_cancel_unknown_booking(self, engine):
        with pytest.raises(NotFoundError):
            engine.cancel_booking("booking-missing")

    def test_concurrent_edits_of_one_booking_never_overlap(self, engine, monkeypatch):
        moving = engine.add_booking(make_draft(time="10:00"))
        engine.add_booking(make_draft(time="12:00", customer_name="Grace Hopper"))
        read_booking = engine.store.get_booking_by_id
        mover_has_read = threading.Event()
        other_done = threading.Event()

        def get_booking_then_pause(booking_id):
            booking = read_booking(booking_id)
            if threading.current_thread().name == "mover":
                mover_has_read.set()
                other_done.wait(timeout=0.2)
            return booking

        monkeypatch.setattr(engine.store, "get_booking_by_id", get_booking_then_pause)
        conflicts = []

        def move():
            try:
                engine.update_booking(moving.id, {"time": "11:00"})
            except SlotConflictError as exc:
                conflicts.append(exc)

        mover = threading.Thread(target=move, name="mover")
        mover.start()
        mover_has_read.wait(timeout=1)
        try:
            engine.update_booking(moving.id, {"service_id": "svc-120"})
        except SlotConflictError as exc:
            conflicts.append(exc)
        other_done.set()
        mover.join()

        assert len(conflicts) == 1
        active = sorted(
            (b.start_minutes, b.start_minutes + b.duration_minutes)
            for b in engine.store.bookings_for("staff-a", MONDAY)
            if b.is_active
        )
        for (_, end), (start, _) in zip(active, active[1:]):
            assert end <= start

    def test_commits_leave_no_lock_entries(self, engine):
        booking = engine.add_booking(make_draft(time="10:00"))
        engine.update_booking(booking.id, {"time": "14:00"})
        assert engine.store._key_locks == {}


class TestCatalogAdmin:
    def test_new_staff_offered_immediately(self, engine):
        member = engine.add_staff({"name": "Cleo Diaz", "capable_services": ["svc-120"]})
        slots = engine.get_available_slots("svc-120", MONDAY)
        assert member.id in {s.staff_id for s in slots}

    def test_deleted_service_has_no_availability(self, engine):
        engine.delete_service("svc-60")
        assert engine.get_available_slots("svc-60", MONDAY) == []

    def test_deleted_staff_not_offered(self, engine):
        engine.delete_staff("staff-b")
        assert {s.staff_id for s in engine.get_available_slots("svc-60", MONDAY)} == {"staff-a"}

    def test_service_edit_changes_requested_duration(self, engine):
        engine.update_service("svc-60", {"duration_minutes": 480})
        slots = engine.get_available_slots("svc-60", MONDAY)
        assert len(slots) == 32
        engine.add_booking(make_draft(time="09:00"))
        assert [s for s in engine.get_available_slots("svc-60", MONDAY) if s.staff_id == "staff-a"] == []

    def test_list_services_and_staff(self, engine):
        assert [s.id for s in engine.list_services()] == ["svc-60", "svc-120"]
        assert [m.id for m in engine.list_staff()] == ["staff-a", "staff-b"]
