"""
Booking status lifecycle.

    pending -> confirmed -> completed
    pending | confirmed -> cancelled

``completed`` and ``cancelled`` are terminal for status edits. Setting a
status to its current value is always allowed. Cancellation through
``cancel_booking`` is unconditional and does not go through this check.

Usage:
    validate_status_change(BookingStatus.PENDING, BookingStatus.CONFIRMED)
"""

import logging
from dataclasses import dataclass

from sparkclean.exceptions import InvalidStatusTransitionError
from sparkclean.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusTransition:
    """A single valid status change."""

    from_status: BookingStatus
    to_status: BookingStatus


TRANSITIONS: list[StatusTransition] = [
    StatusTransition(BookingStatus.PENDING, BookingStatus.CONFIRMED),
    StatusTransition(BookingStatus.PENDING, BookingStatus.CANCELLED),
    StatusTransition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
    StatusTransition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
]

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def get_valid_targets(current: BookingStatus) -> list[BookingStatus]:
    """Return the statuses reachable from the current one."""
    return [t.to_status for t in TRANSITIONS if t.from_status == current]


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return current == new or new in get_valid_targets(current)


def validate_status_change(current: BookingStatus, new: BookingStatus) -> None:
    """Check a status edit against the lifecycle.

    Raises:
        InvalidStatusTransitionError: If the change is not allowed.
    """
    if can_transition(current, new):
        logger.debug("Status change allowed: %s -> %s", current.value, new.value)
        return
    valid = [s.value for s in get_valid_targets(current)]
    raise InvalidStatusTransitionError(
        f"No valid transition from '{current.value}' to '{new.value}'. "
        f"Valid targets: {valid}"
    )


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL_STATUSES
