"""Pydantic v2 request/response schemas for residence endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ema_api.models.enums import PRICE_MAX, PRICE_MIN, MediaKind, ResidenceStatus, ResidenceType

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class MediaItem(BaseModel):
    """A stored image or video attached to a residence."""

    id: str | None = None
    url: str = Field(..., min_length=1)
    kind: MediaKind = MediaKind.IMAGE


class ResidenceCreate(BaseModel):
    """Schema for creating a residence. Built from multipart form fields."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    type: ResidenceType
    price: int = Field(..., ge=PRICE_MIN, le=PRICE_MAX)
    location: str = Field(..., min_length=1, max_length=255)
    address: str | None = None
    reference: str | None = Field(None, max_length=100)
    amenities: list[str] = Field(default_factory=list)
    existing_media: list[MediaItem] = Field(default_factory=list)
    status: ResidenceStatus = ResidenceStatus.AVAILABLE

    @field_validator("title", "location", "description", "address", "reference", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("description", "address", "reference")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None


class ResidenceUpdate(BaseModel):
    """Schema for partially updating a residence. All fields optional.

    ``amenities`` replaces the stored list wholesale when provided.
    ``media_to_delete`` lists ids of existing media entries to drop.
    """

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    type: ResidenceType | None = None
    price: int | None = Field(None, ge=PRICE_MIN, le=PRICE_MAX)
    location: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = None
    reference: str | None = Field(None, max_length=100)
    amenities: list[str] | None = None
    status: ResidenceStatus | None = None
    media_to_delete: list[str] = Field(default_factory=list)

    @field_validator("title", "location", "description", "address", "reference", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ResidenceResponse(BaseModel):
    """Public residence information returned from the API."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str | None = None
    type: str
    price: int
    location: str
    address: str | None = None
    reference: str | None = None
    media: list[MediaItem] = []
    amenities: list[str] = []
    status: str
    rating: float
    reviews_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResidenceSummary(BaseModel):
    """Residence fields embedded in reservation responses."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    location: str
    price: int
    media: list[MediaItem] = []

    model_config = ConfigDict(from_attributes=True)


class ResidenceMutationResponse(BaseModel):
    """Message plus the created or updated residence."""

    message: str
    residence: ResidenceResponse
