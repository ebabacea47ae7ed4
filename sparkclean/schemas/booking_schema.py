"""Booking and availability data models."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sparkclean.clock import format_minutes, to_minutes


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _normalize_time(value: str) -> str:
    return format_minutes(to_minutes(value))


class BookingDraft(BaseModel):
    """Booking data collected by the widget before it is committed."""

    service_id: str
    staff_id: str
    customer_name: str = Field(min_length=1)
    customer_email: str
    customer_phone: str
    date: dt.date
    time: str
    address: str = ""
    notes: str = ""
    total_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[BookingStatus] = None
    customer_id: Optional[str] = None

    @field_validator("time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return _normalize_time(value)

    @field_validator("status")
    @classmethod
    def initial_status(cls, value: Optional[BookingStatus]) -> Optional[BookingStatus]:
        if value not in (None, BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ValueError(f"New bookings must be pending or confirmed, got '{value.value}'")
        return value


class Booking(BaseModel):
    """Full booking record stored in the system."""

    model_config = ConfigDict(frozen=True)

    id: str
    service_id: str
    staff_id: str
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    date: dt.date
    time: str
    status: BookingStatus
    total_price: float = Field(ge=0)
    notes: str = ""
    address: str = ""
    created_at: dt.datetime
    duration_minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator("time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return _normalize_time(value)

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.time)

    @property
    def is_active(self) -> bool:
        """Cancelled bookings stay on record but no longer hold their slot."""
        return self.status != BookingStatus.CANCELLED


class BookingUpdate(BaseModel):
    """Partial update of a booking. Unset fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    service_id: Optional[str] = None
    staff_id: Optional[str] = None
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    status: Optional[BookingStatus] = None
    total_price: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    address: Optional[str] = None

    @field_validator("time")
    @classmethod
    def normalize_time(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _normalize_time(value)

    def reschedules(self) -> bool:
        """True when the update moves the booking to another slot or service."""
        fields = self.model_dump(exclude_unset=True, exclude_none=True)
        return any(key in fields for key in ("service_id", "staff_id", "date", "time"))


class AvailableSlot(BaseModel):
    """Single bookable start time for one staff member."""

    model_config = ConfigDict(frozen=True)

    time: str
    staff_id: str
    staff_name: str
