"""SQLAlchemy models for the EMA residences API.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from ema_api.models.reservation import Reservation
from ema_api.models.residence import Residence
from ema_api.models.user import User

__all__ = [
    "Reservation",
    "Residence",
    "User",
]
