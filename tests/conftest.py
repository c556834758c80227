"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool so
all sessions share the one connection); the FastAPI ``get_db`` dependency is
overridden to hand out that same session, so data created by fixtures is
visible to the API and vice versa.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")

import uuid  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import ema_api.models  # noqa: E402,F401
from ema_api.auth.jwt import create_token_pair  # noqa: E402
from ema_api.auth.passwords import hash_password  # noqa: E402
from ema_api.config import settings  # noqa: E402
from ema_api.database import Base, get_db  # noqa: E402
from ema_api.main import app  # noqa: E402
from ema_api.models.enums import ReservationStatus  # noqa: E402
from ema_api.models.reservation import Reservation  # noqa: E402
from ema_api.models.residence import Residence  # noqa: E402
from ema_api.models.user import User  # noqa: E402
from ema_api.services.authorization import Actor  # noqa: E402

# ---------------------------------------------------------------------------
# Settings overrides
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _test_settings(tmp_path, monkeypatch):
    """Keep uploads inside the test's tmp dir and make bcrypt cheap."""
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    monkeypatch.setattr(settings, "reservation_overlap_check", True)


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session bound to a freshly created in-memory schema."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        # Commit like get_db on success; failed requests leave the session as is
        # so objects loaded by fixtures stay usable.
        yield db_session
        await db_session.commit()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users and auth headers
# ---------------------------------------------------------------------------


async def make_user(db: AsyncSession, role: str = "client", name: str = "Test User", **extra) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        phone="+221770000000",
        role=role,
        is_active=True,
        **extra,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def actor_for(user: User) -> Actor:
    return Actor(identity=user.id, role=user.role)


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await make_user(db_session, role="owner", name="Owner")


@pytest_asyncio.fixture
async def guest(db_session: AsyncSession) -> User:
    """A client-role user who books residences."""
    return await make_user(db_session, role="client", name="Client")


@pytest_asyncio.fixture
async def stranger(db_session: AsyncSession) -> User:
    """A user with no relation to the residences or reservations under test."""
    return await make_user(db_session, role="client", name="Stranger")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, role="admin", name="Admin")


@pytest.fixture
def owner_headers(owner: User) -> dict[str, str]:
    return headers_for(owner)


@pytest.fixture
def guest_headers(guest: User) -> dict[str, str]:
    return headers_for(guest)


@pytest.fixture
def stranger_headers(stranger: User) -> dict[str, str]:
    return headers_for(stranger)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return headers_for(admin)


# ---------------------------------------------------------------------------
# Residence and reservation helpers
# ---------------------------------------------------------------------------


async def make_residence(db: AsyncSession, owner: User, **overrides) -> Residence:
    fields = {
        "owner_id": owner.id,
        "title": "Villa Almadies",
        "type": "Villa",
        "price": 5000,
        "location": "Dakar, Almadies",
        "media": [],
        "amenities": ["wifi"],
    }
    fields.update(overrides)
    residence = Residence(**fields)
    db.add(residence)
    await db.flush()
    await db.refresh(residence)
    return residence


async def make_reservation(
    db: AsyncSession,
    residence: Residence,
    user: User,
    status: str = ReservationStatus.PENDING.value,
    total_price: int | None = None,
    created_at: datetime | None = None,
) -> Reservation:
    reservation = Reservation(
        residence_id=residence.id,
        user_id=user.id,
        status=status,
        total_price=residence.price if total_price is None else total_price,
    )
    if created_at is not None:
        reservation.created_at = created_at
    db.add(reservation)
    await db.flush()
    await db.refresh(reservation)
    return reservation


@pytest_asyncio.fixture
async def residence(db_session: AsyncSession, owner: User) -> Residence:
    return await make_residence(db_session, owner)


@pytest_asyncio.fixture
async def residence_factory(db_session: AsyncSession):
    """Return ``create(owner, **fields)`` for extra residences."""

    async def create(owner: User, **overrides) -> Residence:
        return await make_residence(db_session, owner, **overrides)

    return create


@pytest_asyncio.fixture
async def reservation_factory(db_session: AsyncSession):
    """Return ``create(residence, user, status=..., ...)`` inserting rows directly."""

    async def create(residence: Residence, user: User, **kwargs) -> Reservation:
        return await make_reservation(db_session, residence, user, **kwargs)

    return create


@pytest.fixture
def actor_of():
    return actor_for
