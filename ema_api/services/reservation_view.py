"""Explicit resolution of a reservation's residence and booking user.

Reservations store plain ids. These helpers look the referenced rows up and
return a composed ``ReservationView`` instead of relying on lazy ORM
relationships, so callers always know whether a reference resolved.
"""

import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.models.reservation import Reservation
from ema_api.models.residence import Residence
from ema_api.models.user import User
from ema_api.schemas.reservation import ClientSummary, ReservationResponse
from ema_api.schemas.residence import ResidenceSummary


@dataclass
class ReservationView:
    """A reservation with its residence and client resolved (``None`` if missing)."""

    reservation: Reservation
    residence: Residence | None
    client: User | None

    def to_response(self) -> ReservationResponse:
        r = self.reservation
        return ReservationResponse(
            id=r.id,
            residence_id=r.residence_id,
            user_id=r.user_id,
            status=r.status,
            total_price=r.total_price,
            start_date=r.start_date,
            end_date=r.end_date,
            guests=r.guests,
            notes=r.notes,
            created_at=r.created_at,
            updated_at=r.updated_at,
            residence=ResidenceSummary.model_validate(self.residence) if self.residence else None,
            client=ClientSummary.model_validate(self.client) if self.client else None,
        )


async def load_reservation_view(db: AsyncSession, reservation_id: uuid.UUID) -> ReservationView | None:
    """Load one reservation with its references, or ``None`` if it does not exist."""
    result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()
    if reservation is None:
        return None
    return await resolve_reservation(db, reservation)


async def resolve_reservation(db: AsyncSession, reservation: Reservation) -> ReservationView:
    """Resolve the references of an already-loaded reservation."""
    residence = await db.get(Residence, reservation.residence_id)
    client = await db.get(User, reservation.user_id)
    return ReservationView(reservation=reservation, residence=residence, client=client)


async def resolve_reservations(db: AsyncSession, reservations: Sequence[Reservation]) -> list[ReservationView]:
    """Resolve references for many reservations with one query per table."""
    if not reservations:
        return []

    residence_ids = {r.residence_id for r in reservations}
    user_ids = {r.user_id for r in reservations}

    residences_result = await db.execute(select(Residence).where(Residence.id.in_(residence_ids)))
    residences = {res.id: res for res in residences_result.scalars().all()}
    users_result = await db.execute(select(User).where(User.id.in_(user_ids)))
    users = {user.id: user for user in users_result.scalars().all()}

    return [
        ReservationView(
            reservation=r,
            residence=residences.get(r.residence_id),
            client=users.get(r.user_id),
        )
        for r in reservations
    ]
