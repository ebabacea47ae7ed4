"""
Candidate start-time generation from working-hour windows.

Each window is expanded on its own into start times spaced a fixed
granularity apart. Windows are never merged or gap-filled, so overlapping
windows in one day can produce the same start twice; the availability
query deduplicates those.
"""

from collections.abc import Iterator

from sparkclean.logging_context import get_request_logger
from sparkclean.schemas.staff_schema import DayAvailability, TimeWindow

logger = get_request_logger(__name__)


def generate_slot_starts(start_minutes: int, end_minutes: int, granularity_minutes: int) -> Iterator[int]:
    """Yield start offsets ``t`` with ``start <= t < end`` stepping by granularity.

    A span shorter than one granularity step yields nothing, and so does
    an empty or inverted one. The result depends only on
    the arguments, so the generator can be recreated at will.

    Raises:
        ValueError: If granularity is not a positive number of minutes.
    """
    if granularity_minutes <= 0:
        raise ValueError(f"Granularity must be positive, got {granularity_minutes}")
    if start_minutes > end_minutes:
        logger.warning(
            "Skipping inverted window %d-%d", start_minutes, end_minutes
        )
        return
    if end_minutes - start_minutes < granularity_minutes:
        return
    yield from range(start_minutes, end_minutes, granularity_minutes)


def window_slot_starts(window: TimeWindow, granularity_minutes: int) -> list[int]:
    """Expand one working window into candidate start offsets."""
    return list(
        generate_slot_starts(window.start_minutes, window.end_minutes, granularity_minutes)
    )


def expand_day(day: DayAvailability, granularity_minutes: int) -> list[int]:
    """Concatenate the candidates of every window in a working day, in window order."""
    if not day.available:
        return []
    starts: list[int] = []
    for window in day.slots:
        starts.extend(window_slot_starts(window, granularity_minutes))
    return starts
