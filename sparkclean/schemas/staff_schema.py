"""Staff member and weekly working-hours data models.

Working hours are validated when a staff record is built or edited, so a
malformed window is reported to the admin layer instead of surfacing at
query time.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sparkclean.clock import format_minutes, to_minutes
from sparkclean.exceptions import InvalidIntervalError


class TimeWindow(BaseModel):
    """A contiguous span of working hours within one day."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return format_minutes(to_minutes(value))

    @model_validator(mode="after")
    def check_order(self) -> "TimeWindow":
        if self.start_minutes >= self.end_minutes:
            raise InvalidIntervalError(
                f"Window start {self.start} must be before end {self.end}"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)


class DayAvailability(BaseModel):
    """Whether a staff member works on a weekday, and during which windows."""

    available: bool = False
    slots: list[TimeWindow] = Field(default_factory=list)


def default_week() -> dict[int, DayAvailability]:
    """Working week given to new staff: Sunday off, weekdays 9-5, Saturday 10-3."""
    weekday = DayAvailability(available=True, slots=[TimeWindow(start="09:00", end="17:00")])
    week = {day: weekday.model_copy(deep=True) for day in range(1, 6)}
    week[0] = DayAvailability(available=False)
    week[6] = DayAvailability(available=True, slots=[TimeWindow(start="10:00", end="15:00")])
    return dict(sorted(week.items()))


def _check_weekdays(value: Optional[dict[int, DayAvailability]]) -> Optional[dict[int, DayAvailability]]:
    if value is None:
        return value
    bad = [day for day in value if not 0 <= day <= 6]
    if bad:
        raise ValueError(f"Weekday keys must be 0 (Sunday) to 6 (Saturday), got {bad}")
    return value


class StaffDraft(BaseModel):
    """Staff fields supplied by the admin form before an id is assigned."""

    name: str = Field(min_length=1)
    email: str = ""
    phone: str = ""
    avatar: str = ""
    capable_services: list[str] = Field(default_factory=list)
    availability: dict[int, DayAvailability] = Field(default_factory=default_week)

    @field_validator("availability")
    @classmethod
    def weekdays_in_range(cls, value):
        return _check_weekdays(value)


class Staff(StaffDraft):
    """A cleaner who can be booked for the services they are qualified for."""

    model_config = ConfigDict(frozen=True)

    id: str

    def can_perform(self, service_id: str) -> bool:
        return service_id in self.capable_services

    def day(self, weekday: int) -> Optional[DayAvailability]:
        """Return the availability for a weekday index, or None when unset."""
        return self.availability.get(weekday)


class StaffUpdate(BaseModel):
    """Partial admin edit of a staff member. Unset fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    capable_services: Optional[list[str]] = None
    availability: Optional[dict[int, DayAvailability]] = None

    @field_validator("availability")
    @classmethod
    def weekdays_in_range(cls, value):
        return _check_weekdays(value)
