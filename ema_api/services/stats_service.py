"""Owner statistics aggregated over reservations of owned residences."""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.models.enums import ReservationStatus
from ema_api.models.reservation import Reservation
from ema_api.services.authorization import Action, Actor, require
from ema_api.services.ownership import owned_residence_ids_query


@dataclass(frozen=True)
class OwnerStats:
    total: int = 0
    confirmed: int = 0
    pending: int = 0
    cancelled: int = 0
    total_revenue: int = 0


async def stats_for_owner(db: AsyncSession, actor: Actor) -> OwnerStats:
    """Count reservations per status and sum confirmed revenue for ``actor``.

    Uses a single grouped query; an owner without residences gets all zeros.
    """
    require(actor, Action.VIEW_OWNER_STATS)

    result = await db.execute(
        select(
            Reservation.status,
            func.count(Reservation.id),
            func.coalesce(func.sum(Reservation.total_price), 0),
        )
        .where(Reservation.residence_id.in_(owned_residence_ids_query(actor.identity)))
        .group_by(Reservation.status)
    )

    counts: dict[str, int] = {}
    sums: dict[str, int] = {}
    for status_value, count, total in result.all():
        counts[status_value] = int(count)
        sums[status_value] = int(total)

    return OwnerStats(
        total=sum(counts.values()),
        confirmed=counts.get(ReservationStatus.CONFIRMED.value, 0),
        pending=counts.get(ReservationStatus.PENDING.value, 0),
        cancelled=counts.get(ReservationStatus.CANCELLED.value, 0),
        total_revenue=sums.get(ReservationStatus.CONFIRMED.value, 0),
    )
