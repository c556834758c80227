"""Residences API routes — public catalog plus owner-scoped mutations.

Create and update take multipart form data so media files can travel with
the listing fields; list-valued fields (``amenities``, ``existing_media``,
``media_to_delete``) are JSON-encoded strings.
"""

import json
import uuid
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ema_api.api.deps import get_current_actor, get_db
from ema_api.errors import InvalidInput, violations_from_pydantic
from ema_api.schemas.auth import MessageResponse
from ema_api.schemas.residence import (
    ResidenceCreate,
    ResidenceMutationResponse,
    ResidenceResponse,
    ResidenceUpdate,
)
from ema_api.services import residence_service
from ema_api.services.authorization import Actor

router = APIRouter(prefix="/api/v1/residences", tags=["residences"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_json_field(name: str, raw: str | None) -> Any:
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidInput(
            "Validation error",
            details=[{"field": name, "message": "Must be a JSON-encoded list"}],
        ) from None


def _validate_form(schema: type[BaseModel], fields: dict[str, Any]) -> Any:
    """Validate collected form fields, reporting every violated field at once."""
    data = {key: value for key, value in fields.items() if value is not None}
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise InvalidInput("Validation error", details=violations_from_pydantic(exc.errors())) from None


# ---------------------------------------------------------------------------
# Public catalog
# ---------------------------------------------------------------------------


@router.get("", response_model=list[ResidenceResponse], summary="List residences")
async def list_residences(
    city: str | None = Query(None, description="Case-insensitive substring of the location"),
    title: str | None = Query(None, description="Case-insensitive substring of the title"),
    max_price: int | None = Query(None, ge=0, description="Upper bound on price"),
    db: AsyncSession = Depends(get_db),
) -> list[ResidenceResponse]:
    """Return every residence matching the optional filters, newest first."""
    residences = await residence_service.list_residences(db, city=city, title=title, max_price=max_price)
    return [ResidenceResponse.model_validate(r) for r in residences]


@router.get("/mine", response_model=list[ResidenceResponse], summary="List my residences")
async def list_my_residences(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> list[ResidenceResponse]:
    residences = await residence_service.list_owner_residences(db, actor.identity)
    return [ResidenceResponse.model_validate(r) for r in residences]


@router.get("/owner/{owner_id}", response_model=list[ResidenceResponse], summary="List an owner's residences")
async def list_residences_by_owner(
    owner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> list[ResidenceResponse]:
    residences = await residence_service.list_owner_residences(db, owner_id)
    return [ResidenceResponse.model_validate(r) for r in residences]


@router.get("/{residence_id}", response_model=ResidenceResponse, summary="Get a residence by ID")
async def get_residence(
    residence_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ResidenceResponse:
    residence = await residence_service.get_residence(db, residence_id)
    return ResidenceResponse.model_validate(residence)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ResidenceMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a residence",
)
async def create_residence(
    title: str | None = Form(None),
    description: str | None = Form(None),
    residence_type: str | None = Form(None, alias="type"),
    price: str | None = Form(None),
    location: str | None = Form(None),
    address: str | None = Form(None),
    reference: str | None = Form(None),
    status_: str | None = Form(None, alias="status"),
    amenities: str | None = Form(None),
    existing_media: str | None = Form(None),
    owner_id: uuid.UUID | None = Form(None),
    media: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ResidenceMutationResponse:
    """Create a residence owned by the caller. Admins may pass ``owner_id``."""
    payload = _validate_form(
        ResidenceCreate,
        {
            "title": title,
            "description": description,
            "type": residence_type,
            "price": price,
            "location": location,
            "address": address,
            "reference": reference,
            "status": status_,
            "amenities": _parse_json_field("amenities", amenities),
            "existing_media": _parse_json_field("existing_media", existing_media),
        },
    )
    residence = await residence_service.create_residence(db, actor, payload, files=media, owner_id=owner_id)
    return ResidenceMutationResponse(
        message="Residence created",
        residence=ResidenceResponse.model_validate(residence),
    )


@router.put("/{residence_id}", response_model=ResidenceMutationResponse, summary="Update a residence")
async def update_residence(
    residence_id: uuid.UUID,
    title: str | None = Form(None),
    description: str | None = Form(None),
    residence_type: str | None = Form(None, alias="type"),
    price: str | None = Form(None),
    location: str | None = Form(None),
    address: str | None = Form(None),
    reference: str | None = Form(None),
    status_: str | None = Form(None, alias="status"),
    amenities: str | None = Form(None),
    media_to_delete: str | None = Form(None),
    media: list[UploadFile] | None = File(None),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> ResidenceMutationResponse:
    """Partially update a residence. Only the owner or an admin may do this."""
    payload = _validate_form(
        ResidenceUpdate,
        {
            "title": title,
            "description": description,
            "type": residence_type,
            "price": price,
            "location": location,
            "address": address,
            "reference": reference,
            "status": status_,
            "amenities": _parse_json_field("amenities", amenities),
            "media_to_delete": _parse_json_field("media_to_delete", media_to_delete),
        },
    )
    residence = await residence_service.update_residence(db, actor, residence_id, payload, files=media)
    return ResidenceMutationResponse(
        message="Residence updated",
        residence=ResidenceResponse.model_validate(residence),
    )


@router.delete("/{residence_id}", response_model=MessageResponse, summary="Delete a residence")
async def delete_residence(
    residence_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> MessageResponse:
    """Delete a residence and its stored media. Owner or admin only."""
    await residence_service.delete_residence(db, actor, residence_id)
    return MessageResponse(message="Residence deleted")
