"""User model — authentication and profile."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ema_api.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from ema_api.models.enums import UserRole


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An account that can own residences and book them."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    role: Mapped[str] = mapped_column(String(50), default=UserRole.CLIENT.value, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
