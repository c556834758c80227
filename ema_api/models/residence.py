"""Residence model — listed properties with media and an owner."""

import uuid

from sqlalchemy import JSON, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ema_api.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from ema_api.models.enums import PRICE_MAX, PRICE_MIN, ResidenceStatus


class Residence(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A hotel, apartment, villa, studio, suite or room listed by an owner."""

    __tablename__ = "residences"

    # Opaque identity reference; immutable after creation.
    owner_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), default=None)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, default=None)
    # NULLs never collide, so unset references stay unconstrained.
    reference: Mapped[str | None] = mapped_column(String(100), unique=True, default=None)
    media: Mapped[list] = mapped_column(JSON, default=list)  # [{id, url, kind}]
    amenities: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(50), default=ResidenceStatus.AVAILABLE.value, nullable=False)
    rating: Mapped[float] = mapped_column(default=0.0, nullable=False)
    reviews_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint(f"price >= {PRICE_MIN} AND price <= {PRICE_MAX}", name="ck_residences_price_range"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_residences_rating_range"),
        CheckConstraint("reviews_count >= 0", name="ck_residences_reviews_count"),
        Index("ix_residences_location_type_price", "location", "type", "price"),
        Index("ix_residences_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Residence(id={self.id}, title={self.title!r}, type={self.type!r})>"
