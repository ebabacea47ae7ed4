"""Errors raised by the scheduling engine and its store."""


class SchedulingError(Exception):
    """Base class for all scheduling engine errors."""


class NotFoundError(SchedulingError, LookupError):
    """Raised when a mutation references a booking, service or staff id that does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} '{entity_id}' not found")


class InvalidIntervalError(SchedulingError, ValueError):
    """Raised for malformed HH:MM values or windows whose start is not before their end."""


class SlotConflictError(SchedulingError):
    """Raised when a slot is no longer free at commit time."""

    def __init__(self, staff_id: str, date: str, time: str) -> None:
        self.staff_id = staff_id
        self.date = date
        self.time = time
        super().__init__(
            f"Slot no longer available: {time} on {date} for staff '{staff_id}'"
        )


class InvalidStatusTransitionError(SchedulingError):
    """Raised when a booking status change is not allowed by the lifecycle."""
