"""Reservations API router.

Access rule: a reservation is visible to, and deletable by, both the owner
of its residence and the user who booked it. Only the residence owner may
change its status.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.api.deps import get_current_actor, get_db
from ema_api.schemas.auth import MessageResponse
from ema_api.schemas.reservation import (
    OwnerStatsResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationStatusUpdate,
)
from ema_api.services import reservation_service
from ema_api.services.authorization import Actor
from ema_api.services.stats_service import stats_for_owner

router = APIRouter(prefix="/api/v1/reservations", tags=["reservations"])


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a residence",
)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ReservationResponse:
    """Create a pending reservation for the caller on an existing residence."""
    view = await reservation_service.create_reservation(db, actor, body)
    return view.to_response()


@router.get(
    "/owner",
    response_model=list[ReservationResponse],
    summary="Reservations on the caller's residences",
)
async def list_owner_reservations(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ReservationResponse]:
    views = await reservation_service.list_for_owner(db, actor)
    return [v.to_response() for v in views]


@router.get(
    "/client",
    response_model=list[ReservationResponse],
    summary="Reservations booked by the caller",
)
async def list_client_reservations(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ReservationResponse]:
    views = await reservation_service.list_for_client(db, actor)
    return [v.to_response() for v in views]


@router.get(
    "/stats/owner",
    response_model=OwnerStatsResponse,
    summary="Reservation statistics for the caller's residences",
)
async def owner_stats(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> OwnerStatsResponse:
    """Counts per status and confirmed revenue; all zeros without residences."""
    stats = await stats_for_owner(db, actor)
    return OwnerStatsResponse(
        total=stats.total,
        confirmed=stats.confirmed,
        pending=stats.pending,
        cancelled=stats.cancelled,
        total_revenue=stats.total_revenue,
    )


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    summary="Get a reservation",
)
async def get_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ReservationResponse:
    view = await reservation_service.get_reservation(db, actor, reservation_id)
    return view.to_response()


@router.patch(
    "/{reservation_id}/status",
    response_model=ReservationResponse,
    summary="Change a reservation's status",
)
async def update_reservation_status(
    reservation_id: uuid.UUID,
    body: ReservationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ReservationResponse:
    view = await reservation_service.transition_reservation(db, actor, reservation_id, body.status)
    return view.to_response()


@router.delete(
    "/{reservation_id}",
    response_model=MessageResponse,
    summary="Delete a reservation",
)
async def delete_reservation(
    reservation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> MessageResponse:
    await reservation_service.delete_reservation(db, actor, reservation_id)
    return MessageResponse(message="Reservation deleted")
