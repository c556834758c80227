"""Residence ownership index: which residences an owner controls."""

import uuid

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.models.residence import Residence


def owned_residence_ids_query(owner_id: uuid.UUID) -> Select:
    """SELECT of the residence ids owned by ``owner_id``, usable as an IN subquery."""
    return select(Residence.id).where(Residence.owner_id == owner_id)


async def owned_residence_ids(db: AsyncSession, owner_id: uuid.UUID) -> list[uuid.UUID]:
    """Return the ids of every residence owned by ``owner_id``."""
    result = await db.execute(owned_residence_ids_query(owner_id))
    return list(result.scalars().all())
