"""JWT token creation and verification for access and refresh tokens."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from ema_api.config import settings

ACCESS = "access"
REFRESH = "refresh"


def _encode(data: dict, token_type: str, lifetime: timedelta) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"exp": now + lifetime, "iat": now, "type": token_type})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived access token.

    Args:
        data: Payload data. Must include ``sub`` (user UUID as string).
        expires_delta: Custom expiration duration. Defaults to
            ``settings.jwt_access_token_expire_minutes`` minutes.
    """
    return _encode(data, ACCESS, expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))


def create_refresh_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a long-lived refresh token (``settings.jwt_refresh_token_expire_days``)."""
    return _encode(data, REFRESH, expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days))


def decode_token(token: str, expected_type: str | None = None) -> dict:
    """Decode and verify a JWT token.

    Args:
        token: Encoded JWT string.
        expected_type: When given, the ``type`` claim must match it.

    Raises:
        jose.JWTError: If the token is invalid, expired, malformed or of the
            wrong type.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if expected_type is not None and payload.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")
    return payload


def create_token_pair(user_id: str, role: str | None = None) -> dict[str, str]:
    """Create both access and refresh tokens for a user.

    The role is informational for clients; the API always re-reads it from
    the user record.
    """
    payload = {"sub": user_id}
    if role is not None:
        payload["role"] = role
    return {
        "access_token": create_access_token(payload),
        "refresh_token": create_refresh_token(payload),
        "token_type": "bearer",
    }
