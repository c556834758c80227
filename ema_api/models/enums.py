"""String enums shared by models, schemas and services."""

from enum import Enum


class UserRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    CLIENT = "client"


class ResidenceType(str, Enum):
    HOTEL = "Hotel"
    APARTMENT = "Apartment"
    VILLA = "Villa"
    STUDIO = "Studio"
    SUITE = "Suite"
    ROOM = "Room"


class ResidenceStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


PRICE_MIN = 1000
PRICE_MAX = 1_000_000
