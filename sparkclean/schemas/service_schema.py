"""Service catalog data models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceDraft(BaseModel):
    """Service fields supplied by the admin form before an id is assigned."""

    name: str = Field(min_length=1)
    description: str = ""
    duration_minutes: int = Field(default=60, gt=0)
    price: float = Field(default=0.0, ge=0)
    category: str = "Regular"
    icon: str = "sparkles"


class Service(ServiceDraft):
    """A bookable cleaning service."""

    model_config = ConfigDict(frozen=True)

    id: str


class ServiceUpdate(BaseModel):
    """Partial admin edit of a service. Unset fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    icon: Optional[str] = None
