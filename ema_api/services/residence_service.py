"""Residence catalog: listing, lookup and owner-scoped mutations."""

import logging
import uuid

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.errors import Conflict, NotFound
from ema_api.models.residence import Residence
from ema_api.schemas.residence import ResidenceCreate, ResidenceUpdate
from ema_api.services.authorization import Action, Actor, require
from ema_api.services.media import (
    delete_media_files,
    delete_media_files_on_commit,
    new_media_entry,
    store_uploads,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clean_amenities(amenities: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for item in amenities:
        item = item.strip()
        if item:
            seen.setdefault(item, None)
    return list(seen)


async def _ensure_reference_free(
    db: AsyncSession,
    reference: str | None,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Reject a reference already used by another residence.

    Only a fast path for a clear error message: the unique constraint on
    ``residences.reference`` is what actually guards concurrent inserts.
    """
    if not reference:
        return
    query = select(Residence.id).where(Residence.reference == reference)
    if exclude_id is not None:
        query = query.where(Residence.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise Conflict("Reference already in use")


async def _flush_or_conflict(db: AsyncSession, stored_media: list[dict]) -> None:
    """Flush pending changes, turning a reference collision into Conflict."""
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        delete_media_files(stored_media)
        if "reference" in str(exc.orig).lower():
            raise Conflict("Reference already in use") from None
        raise


async def _get_or_404(db: AsyncSession, residence_id: uuid.UUID) -> Residence:
    residence = await db.get(Residence, residence_id)
    if residence is None:
        raise NotFound("Residence not found")
    return residence


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def list_residences(
    db: AsyncSession,
    city: str | None = None,
    title: str | None = None,
    max_price: int | None = None,
) -> list[Residence]:
    """Public listing, newest first. Text filters are case-insensitive substrings."""
    query = select(Residence)
    if city:
        query = query.where(Residence.location.ilike(f"%{city}%"))
    if title:
        query = query.where(Residence.title.ilike(f"%{title}%"))
    if max_price is not None:
        query = query.where(Residence.price <= max_price)

    result = await db.execute(query.order_by(Residence.created_at.desc(), Residence.id))
    return list(result.scalars().all())


async def list_owner_residences(db: AsyncSession, owner_id: uuid.UUID) -> list[Residence]:
    result = await db.execute(
        select(Residence)
        .where(Residence.owner_id == owner_id)
        .order_by(Residence.created_at.desc(), Residence.id)
    )
    return list(result.scalars().all())


async def get_residence(db: AsyncSession, residence_id: uuid.UUID) -> Residence:
    return await _get_or_404(db, residence_id)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def create_residence(
    db: AsyncSession,
    actor: Actor,
    payload: ResidenceCreate,
    files: list[UploadFile] | None = None,
    owner_id: uuid.UUID | None = None,
) -> Residence:
    """Create a residence owned by ``actor`` (admins may name another owner).

    Media order is the caller's pre-hosted ``existing_media`` followed by the
    uploaded files.
    """
    require(actor, Action.CREATE_RESIDENCE)
    owner = owner_id if owner_id is not None and actor.is_admin else actor.identity

    await _ensure_reference_free(db, payload.reference)

    existing = [new_media_entry(item.url, item.kind) for item in payload.existing_media]
    uploaded = await store_uploads(files or [])

    residence = Residence(
        owner_id=owner,
        title=payload.title,
        description=payload.description,
        type=payload.type.value,
        price=payload.price,
        location=payload.location,
        address=payload.address,
        reference=payload.reference,
        media=existing + uploaded,
        amenities=_clean_amenities(payload.amenities),
        status=payload.status.value,
    )
    db.add(residence)
    await _flush_or_conflict(db, uploaded)
    await db.refresh(residence)

    logger.info("Residence %s created by %s for owner %s", residence.id, actor.identity, owner)
    return residence


async def update_residence(
    db: AsyncSession,
    actor: Actor,
    residence_id: uuid.UUID,
    payload: ResidenceUpdate,
    files: list[UploadFile] | None = None,
) -> Residence:
    """Partially update a residence. The owner never changes.

    Media becomes the kept existing entries (minus ``media_to_delete``)
    followed by the newly uploaded ones; amenities are replaced when given.
    """
    residence = await _get_or_404(db, residence_id)
    require(actor, Action.UPDATE_RESIDENCE, residence)

    update_data = payload.model_dump(exclude_unset=True, exclude={"media_to_delete", "amenities"})
    if "reference" in update_data:
        update_data["reference"] = update_data["reference"] or None
        await _ensure_reference_free(db, update_data["reference"], exclude_id=residence.id)

    for field in ("title", "type", "price", "location", "status"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for field, value in update_data.items():
        if hasattr(value, "value"):
            value = value.value
        setattr(residence, field, value)

    if payload.amenities is not None:
        residence.amenities = _clean_amenities(payload.amenities)

    to_delete = set(payload.media_to_delete)
    current = list(residence.media or [])
    kept = [m for m in current if m.get("id") not in to_delete]
    dropped = [m for m in current if m.get("id") in to_delete]
    uploaded = await store_uploads(files or [])
    residence.media = kept + uploaded

    db.add(residence)
    await _flush_or_conflict(db, uploaded)
    await db.refresh(residence)

    if dropped:
        delete_media_files_on_commit(db, dropped)

    logger.info("Residence %s updated by %s", residence.id, actor.identity)
    return residence


async def delete_residence(db: AsyncSession, actor: Actor, residence_id: uuid.UUID) -> None:
    """Delete a residence. Its stored media files go, best effort, on commit.

    Reservations referencing the residence are left in place.
    """
    residence = await _get_or_404(db, residence_id)
    require(actor, Action.DELETE_RESIDENCE, residence)

    media = list(residence.media or [])
    await db.delete(residence)
    await db.flush()

    delete_media_files_on_commit(db, media)
    logger.info("Residence %s deleted by %s (%d media files queued)", residence_id, actor.identity, len(media))
