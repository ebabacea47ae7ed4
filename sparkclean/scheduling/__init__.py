from sparkclean.scheduling.availability import AvailabilityQuery, DateAvailability
from sparkclean.scheduling.conflict_detector import (
    BookedInterval,
    has_conflict,
    intervals_overlap,
    occupied_intervals,
)
from sparkclean.scheduling.lifecycle import validate_status_change
from sparkclean.scheduling.slot_generator import expand_day, generate_slot_starts

__all__ = [
    "AvailabilityQuery",
    "DateAvailability",
    "BookedInterval",
    "intervals_overlap",
    "occupied_intervals",
    "has_conflict",
    "generate_slot_starts",
    "expand_day",
    "validate_status_change",
]
