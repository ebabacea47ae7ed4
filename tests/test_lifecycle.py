"""Tests for the booking status lifecycle."""

import pytest

from sparkclean.exceptions import InvalidStatusTransitionError
from sparkclean.schemas.booking_schema import BookingStatus
from sparkclean.scheduling.lifecycle import (
    can_transition,
    get_valid_targets,
    is_terminal,
    validate_status_change,
)

PENDING = BookingStatus.PENDING
CONFIRMED = BookingStatus.CONFIRMED
COMPLETED = BookingStatus.COMPLETED
CANCELLED = BookingStatus.CANCELLED


class TestValidTransitions:
    def test_pending_to_confirmed(self):
        validate_status_change(PENDING, CONFIRMED)

    def test_confirmed_to_completed(self):
        validate_status_change(CONFIRMED, COMPLETED)

    def test_pending_to_cancelled(self):
        validate_status_change(PENDING, CANCELLED)

    def test_confirmed_to_cancelled(self):
        validate_status_change(CONFIRMED, CANCELLED)

    def test_same_status_is_allowed(self):
        for status in BookingStatus:
            assert can_transition(status, status)


class TestInvalidTransitions:
    def test_pending_cannot_skip_to_completed(self):
        with pytest.raises(InvalidStatusTransitionError):
            validate_status_change(PENDING, COMPLETED)

    def test_confirmed_cannot_go_back_to_pending(self):
        with pytest.raises(InvalidStatusTransitionError):
            validate_status_change(CONFIRMED, PENDING)

    def test_cancelled_is_final(self):
        for target in (PENDING, CONFIRMED, COMPLETED):
            with pytest.raises(InvalidStatusTransitionError):
                validate_status_change(CANCELLED, target)

    def test_completed_is_final(self):
        with pytest.raises(InvalidStatusTransitionError, match="Valid targets: \\[\\]"):
            validate_status_change(COMPLETED, CANCELLED)

    def test_error_lists_valid_targets(self):
        with pytest.raises(InvalidStatusTransitionError, match="completed"):
            validate_status_change(CONFIRMED, PENDING)


class TestTerminal:
    def test_terminal_statuses(self):
        assert is_terminal(COMPLETED)
        assert is_terminal(CANCELLED)
        assert not is_terminal(PENDING)
        assert not is_terminal(CONFIRMED)

    def test_terminal_statuses_have_no_targets(self):
        assert get_valid_targets(COMPLETED) == []
        assert get_valid_targets(CANCELLED) == []
