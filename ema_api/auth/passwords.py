"""Password hashing and verification using bcrypt directly."""

import bcrypt

from ema_api.config import settings

# bcrypt only looks at the first 72 bytes; longer inputs are rejected upfront.
MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt.

    Raises:
        ValueError: If the password is longer than bcrypt can hash.
    """
    if not password_fits(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if ``plain_password`` matches the bcrypt hash."""
    if not password_fits(plain_password):
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
