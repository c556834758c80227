"""Reservation lifecycle: create, read, transition, delete and list."""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.config import settings
from ema_api.errors import Conflict, InvalidInput, NotFound
from ema_api.models.enums import ReservationStatus
from ema_api.models.reservation import Reservation
from ema_api.models.residence import Residence
from ema_api.schemas.reservation import ReservationCreate
from ema_api.services.authorization import Action, Actor, require
from ema_api.services.ownership import owned_residence_ids_query
from ema_api.services.reservation_view import (
    ReservationView,
    load_reservation_view,
    resolve_reservation,
    resolve_reservations,
)

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset(s.value for s in ReservationStatus)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _check_date_conflict(
    db: AsyncSession,
    residence_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> None:
    """Raise Conflict if a non-cancelled dated reservation overlaps the range."""
    query = select(Reservation.id).where(
        Reservation.residence_id == residence_id,
        Reservation.status != ReservationStatus.CANCELLED.value,
        Reservation.start_date.is_not(None),
        Reservation.start_date < end_date,
        Reservation.end_date > start_date,
    )
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise Conflict("Dates conflict with an existing reservation")


async def _load_resolved(db: AsyncSession, reservation_id: uuid.UUID) -> ReservationView:
    """Load a reservation whose residence still exists, else raise NotFound."""
    view = await load_reservation_view(db, reservation_id)
    if view is None:
        raise NotFound("Reservation not found")
    if view.residence is None:
        raise NotFound("Residence not found")
    return view


def _validate_status(new_status: str) -> str:
    if new_status not in VALID_STATUSES:
        raise InvalidInput(
            "Invalid status",
            details=[
                {
                    "field": "status",
                    "message": f"Status must be one of: {', '.join(sorted(VALID_STATUSES))}",
                }
            ],
        )
    return new_status


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def create_reservation(db: AsyncSession, actor: Actor, payload: ReservationCreate) -> ReservationView:
    """Book a residence for ``actor``. The reservation always starts pending."""
    residence = await db.get(Residence, payload.residence_id)
    if residence is None:
        raise NotFound("Residence not found")

    require(actor, Action.CREATE_RESERVATION, residence)

    if payload.start_date is not None and payload.end_date is not None and settings.reservation_overlap_check:
        await _check_date_conflict(db, residence.id, payload.start_date, payload.end_date)

    reservation = Reservation(
        residence_id=residence.id,
        user_id=actor.identity,
        status=ReservationStatus.PENDING.value,
        total_price=residence.price * payload.nights,
        start_date=payload.start_date,
        end_date=payload.end_date,
        guests=payload.guests,
        notes=payload.notes,
    )
    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)

    logger.info(
        "Reservation %s created on residence %s by %s (total %s)",
        reservation.id,
        residence.id,
        actor.identity,
        reservation.total_price,
    )
    return await resolve_reservation(db, reservation)


async def get_reservation(db: AsyncSession, actor: Actor, reservation_id: uuid.UUID) -> ReservationView:
    """Return a reservation to its residence owner or its original booker."""
    view = await _load_resolved(db, reservation_id)
    require(actor, Action.VIEW_RESERVATION, view)
    return view


async def transition_reservation(
    db: AsyncSession,
    actor: Actor,
    reservation_id: uuid.UUID,
    new_status: str,
) -> ReservationView:
    """Move a reservation to ``new_status``. Only the residence owner may do this.

    Any status of the enum is an accepted target; the total price is never
    touched.
    """
    view = await _load_resolved(db, reservation_id)
    require(actor, Action.TRANSITION_RESERVATION, view)
    _validate_status(new_status)

    reservation = view.reservation
    previous = reservation.status
    reservation.status = new_status
    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)

    logger.info("Reservation %s transitioned %s -> %s by %s", reservation.id, previous, new_status, actor.identity)
    return await resolve_reservation(db, reservation)


async def delete_reservation(db: AsyncSession, actor: Actor, reservation_id: uuid.UUID) -> None:
    """Hard-delete a reservation. Residence owner or original booker only.

    A reservation whose residence was deleted can still be removed by the
    user who booked it.
    """
    view = await load_reservation_view(db, reservation_id)
    if view is None:
        raise NotFound("Reservation not found")
    if view.residence is None and view.reservation.user_id != actor.identity:
        raise NotFound("Residence not found")

    require(actor, Action.DELETE_RESERVATION, view)

    await db.delete(view.reservation)
    await db.flush()
    logger.info("Reservation %s deleted by %s", reservation_id, actor.identity)


async def list_for_owner(db: AsyncSession, actor: Actor) -> list[ReservationView]:
    """Reservations on every residence owned by ``actor``, newest first."""
    result = await db.execute(
        select(Reservation)
        .where(Reservation.residence_id.in_(owned_residence_ids_query(actor.identity)))
        .order_by(Reservation.created_at.desc(), Reservation.id)
    )
    return await resolve_reservations(db, list(result.scalars().all()))


async def list_for_client(db: AsyncSession, actor: Actor) -> list[ReservationView]:
    """Reservations booked by ``actor``, newest first."""
    result = await db.execute(
        select(Reservation)
        .where(Reservation.user_id == actor.identity)
        .order_by(Reservation.created_at.desc(), Reservation.id)
    )
    return await resolve_reservations(db, list(result.scalars().all()))
