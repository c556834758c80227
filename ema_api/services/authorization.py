"""Authorization rules for residences and reservations.

Pure decisions over already-loaded entities: nothing here touches the
database. Reservation checks take a ``ReservationView`` so that the
residence owner and the booking user are both explicit inputs; a view whose
residence could not be resolved never grants owner rights.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ema_api.errors import Forbidden
from ema_api.models.enums import UserRole
from ema_api.models.residence import Residence

if TYPE_CHECKING:
    from ema_api.services.reservation_view import ReservationView


@dataclass(frozen=True)
class Actor:
    """An authenticated identity and its role."""

    identity: uuid.UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class Action(str, Enum):
    CREATE_RESIDENCE = "create-residence"
    UPDATE_RESIDENCE = "update-residence"
    DELETE_RESIDENCE = "delete-residence"
    CREATE_RESERVATION = "create-reservation"
    VIEW_RESERVATION = "view-reservation"
    TRANSITION_RESERVATION = "transition-reservation"
    DELETE_RESERVATION = "delete-reservation"
    VIEW_OWNER_STATS = "view-owner-stats"


_RESIDENCE_CREATOR_ROLES = frozenset(role.value for role in UserRole)


def _owns(actor: Actor, residence: Residence | None) -> bool:
    return residence is not None and residence.owner_id == actor.identity


def can_act(actor: Actor, action: Action, target: Residence | ReservationView | None = None) -> bool:
    """Decide whether ``actor`` may perform ``action`` on ``target``."""
    if action in (Action.UPDATE_RESIDENCE, Action.DELETE_RESIDENCE):
        return isinstance(target, Residence) and (_owns(actor, target) or actor.is_admin)

    if action is Action.CREATE_RESIDENCE:
        return actor.role in _RESIDENCE_CREATOR_ROLES

    if action is Action.CREATE_RESERVATION:
        # Only clients book, and never a residence they own.
        return (
            actor.role == UserRole.CLIENT.value
            and isinstance(target, Residence)
            and not _owns(actor, target)
        )

    if action is Action.VIEW_OWNER_STATS:
        return True

    if target is None or isinstance(target, Residence):
        return False

    if action is Action.TRANSITION_RESERVATION:
        return _owns(actor, target.residence)

    if action in (Action.VIEW_RESERVATION, Action.DELETE_RESERVATION):
        return _owns(actor, target.residence) or target.reservation.user_id == actor.identity

    return False


def require(actor: Actor, action: Action, target: Residence | ReservationView | None = None) -> None:
    """Raise ``Forbidden`` unless ``can_act`` allows the action."""
    if not can_act(actor, action, target):
        raise Forbidden("Not authorized to perform this action")
