"""Pydantic v2 request/response schemas for reservation endpoints."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ema_api.schemas.residence import ResidenceSummary

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    """Schema for booking a residence.

    Status and price are not accepted from the client: every reservation
    starts as ``pending`` and its total is derived from the residence price.
    """

    residence_id: uuid.UUID
    start_date: date | None = None
    end_date: date | None = None
    guests: int = Field(1, ge=1)
    notes: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationCreate":
        """Dates come as a pair and end_date must be strictly after start_date."""
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be provided together")
        if self.start_date is not None and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self

    @property
    def nights(self) -> int:
        if self.start_date is None or self.end_date is None:
            return 1
        return (self.end_date - self.start_date).days


class ReservationStatusUpdate(BaseModel):
    """Requested status for a reservation transition; checked by the service."""

    status: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ClientSummary(BaseModel):
    """Booking user fields embedded in reservation responses."""

    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReservationResponse(BaseModel):
    """A reservation with its resolved residence and booking user.

    ``residence`` and ``client`` are ``None`` when the referenced record no
    longer exists.
    """

    id: uuid.UUID
    residence_id: uuid.UUID
    user_id: uuid.UUID
    status: str
    total_price: int
    start_date: date | None = None
    end_date: date | None = None
    guests: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    residence: ResidenceSummary | None = None
    client: ClientSummary | None = None


class OwnerStatsResponse(BaseModel):
    """Reservation counts and confirmed revenue across an owner's residences."""

    total: int
    confirmed: int
    pending: int
    cancelled: int
    total_revenue: int
