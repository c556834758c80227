"""Reservation model — a client's booking of a residence."""

import uuid
from datetime import date

from sqlalchemy import CheckConstraint, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ema_api.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from ema_api.models.enums import ReservationStatus


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A booking request with a pending/confirmed/cancelled lifecycle.

    ``residence_id`` and ``user_id`` are plain references without database
    cascades: deleting a residence leaves its reservations in place, and the
    lifecycle service reports them as pointing at a missing residence.
    """

    __tablename__ = "reservations"

    residence_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default=ReservationStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (CheckConstraint("total_price >= 0", name="ck_reservations_total_price"),)

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, residence_id={self.residence_id}, "
            f"user_id={self.user_id}, status={self.status})>"
        )
