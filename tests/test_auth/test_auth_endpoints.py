"""Tests for authentication endpoints — register, login, me, refresh."""

import uuid

import pytest
from httpx import AsyncClient

from ema_api.models.user import User

pytestmark = pytest.mark.asyncio


def _register_payload(**overrides) -> dict:
    unique = uuid.uuid4().hex[:8]
    payload = {
        "email": f"newuser-{unique}@test.com",
        "password": "securepass123",
        "name": "New User",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# POST /api/v1/auth/register
# ---------------------------------------------------------------------------


class TestRegister:
    """Tests for user registration."""

    async def test_register_defaults_to_client(self, client: AsyncClient) -> None:
        payload = _register_payload()
        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == payload["email"]
        assert data["user"]["role"] == "client"
        assert data["user"]["is_active"] is True
        assert data["tokens"]["access_token"]
        assert data["tokens"]["refresh_token"]
        assert data["tokens"]["token_type"] == "bearer"

    async def test_register_owner(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_register_payload(role="owner", phone="+221"))
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "owner"
        assert response.json()["user"]["phone"] == "+221"

    async def test_register_admin_not_allowed(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_register_payload(role="admin"))
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        payload = _register_payload()
        resp1 = await client.post("/api/v1/auth/register", json=payload)
        assert resp1.status_code == 201

        resp2 = await client.post("/api/v1/auth/register", json=payload)
        assert resp2.status_code == 409
        assert resp2.json()["error"] == "conflict"

    async def test_register_short_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_register_payload(password="short"))
        assert response.status_code == 400
        fields = [d["field"] for d in response.json()["details"]]
        assert "password" in fields

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/register", json=_register_payload(email="not-an-email"))
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# POST /api/v1/auth/login
# ---------------------------------------------------------------------------


class TestLogin:
    """Tests for email/password login."""

    async def test_login_success(self, client: AsyncClient) -> None:
        payload = _register_payload()
        await client.post("/api/v1/auth/register", json=payload)

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": payload["email"], "password": payload["password"]},
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == payload["email"]

    async def test_login_wrong_password(self, client: AsyncClient) -> None:
        payload = _register_payload()
        await client.post("/api/v1/auth/register", json=payload)

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": payload["email"], "password": "wrongpassword"},
        )
        assert response.status_code == 401

    async def test_login_nonexistent_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody-here@test.com", "password": "whatever123"},
        )
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# GET /api/v1/auth/me, POST /api/v1/auth/refresh
# ---------------------------------------------------------------------------


class TestMeAndRefresh:
    """Tests for the profile and token refresh endpoints."""

    async def test_me_authenticated(self, client: AsyncClient, owner: User, owner_headers: dict) -> None:
        response = await client.get("/api/v1/auth/me", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["id"] == str(owner.id)
        assert response.json()["role"] == "owner"

    async def test_me_unauthenticated(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    async def test_refresh_success(self, client: AsyncClient) -> None:
        reg = await client.post("/api/v1/auth/register", json=_register_payload())
        refresh_token = reg.json()["tokens"]["refresh_token"]

        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_refresh_invalid_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
        assert response.status_code == 401

    async def test_refresh_with_access_token_fails(self, client: AsyncClient) -> None:
        reg = await client.post("/api/v1/auth/register", json=_register_payload())
        access_token = reg.json()["tokens"]["access_token"]

        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401
