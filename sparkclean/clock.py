"""Wall-clock helpers.

All interval arithmetic in the engine runs on integer minutes since
midnight. ``HH:MM`` strings only appear at the model and output
boundaries.
"""

import re
from datetime import date, datetime
from typing import Union

from sparkclean.exceptions import InvalidIntervalError

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def to_minutes(value: str) -> int:
    """Convert a zero-padded ``HH:MM`` string to minutes since midnight.

    Raises:
        InvalidIntervalError: If the value is not a valid 24-hour time.
    """
    match = _HHMM.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidIntervalError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    """Convert minutes since midnight back to ``HH:MM``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidIntervalError(f"Minute offset out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def weekday_index(day: date) -> int:
    """Return the weekday index with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def coerce_date(value: Union[date, str]) -> date:
    """Accept a ``date``, a ``datetime`` or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())
