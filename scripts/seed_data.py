"""Seed the database with sample Senegalese residences and reservations.

Creates one demo owner, two demo clients, a handful of residences across
Dakar and the Petite Côte, and reservations in every status so the owner
dashboard and stats endpoint have something to show.

Run from the project root:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from ema_api.auth.passwords import hash_password
from ema_api.database import async_session_factory
from ema_api.models.reservation import Reservation
from ema_api.models.residence import Residence
from ema_api.models.user import User

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_OWNER = {
    "email": "owner@ema-residences.sn",
    "password": "demo1234",
    "name": "Awa Ndiaye",
    "phone": "+221 77 123 45 67",
    "role": "owner",
}

DEMO_CLIENTS = [
    {
        "email": "moussa@ema-residences.sn",
        "password": "demo1234",
        "name": "Moussa Diop",
        "phone": "+221 76 555 01 02",
        "role": "client",
    },
    {
        "email": "claire@ema-residences.sn",
        "password": "demo1234",
        "name": "Claire Martin",
        "phone": "+33 6 12 34 56 78",
        "role": "client",
    },
]

# Prices are per night in FCFA
RESIDENCES = [
    {
        "title": "Villa Almadies Océan",
        "description": (
            "Four-bedroom villa facing the ocean at the western tip of Dakar. "
            "Private pool, garden and a rooftop terrace for sunsets over Ngor island."
        ),
        "type": "Villa",
        "price": 150000,
        "location": "Dakar, Almadies",
        "address": "Route des Almadies",
        "reference": "EMA-VIL-001",
        "amenities": ["pool", "wifi", "ac", "parking", "garden", "sea_view"],
        "rating": 4.8,
        "reviews_count": 32,
    },
    {
        "title": "Appartement Plateau",
        "description": "Bright two-bedroom flat close to the Place de l'Indépendance.",
        "type": "Apartment",
        "price": 45000,
        "location": "Dakar, Plateau",
        "address": "Avenue Léopold Sédar Senghor",
        "reference": "EMA-APT-002",
        "amenities": ["wifi", "ac", "elevator", "kitchen"],
        "rating": 4.4,
        "reviews_count": 18,
    },
    {
        "title": "Studio Mermoz",
        "description": "Compact studio for business stays, fibre internet and workspace.",
        "type": "Studio",
        "price": 25000,
        "location": "Dakar, Mermoz",
        "reference": "EMA-STU-003",
        "amenities": ["wifi", "ac", "desk"],
        "rating": 4.1,
        "reviews_count": 9,
    },
    {
        "title": "Suite Saly Lagune",
        "description": "Beachfront suite in a gated residence on the Petite Côte.",
        "type": "Suite",
        "price": 80000,
        "location": "Saly, Mbour",
        "reference": "EMA-SUI-004",
        "amenities": ["pool", "beach_access", "wifi", "ac", "breakfast"],
        "rating": 4.6,
        "reviews_count": 21,
        "status": "maintenance",
    },
    {
        "title": "Chambre Hôtel Teranga",
        "description": "Double room in a family-run hotel near the Gorée ferry.",
        "type": "Room",
        "price": 18000,
        "location": "Dakar, Médina",
        "reference": "EMA-ROO-005",
        "amenities": ["wifi", "breakfast"],
        "rating": 3.9,
        "reviews_count": 44,
    },
]


def _build_reservations(
    residences: list[Residence],
    clients: list[User],
    today: date,
) -> list[dict]:
    """Build reservation dicts spread across statuses and dates."""
    villa, flat, studio, suite, room = residences
    moussa, claire = clients

    return [
        {"residence": villa, "client": claire, "offset": -20, "nights": 5, "guests": 4, "status": "confirmed"},
        {"residence": villa, "client": moussa, "offset": 10, "nights": 3, "guests": 2, "status": "pending"},
        {"residence": flat, "client": moussa, "offset": -5, "nights": 2, "guests": 1, "status": "confirmed"},
        {"residence": flat, "client": claire, "offset": 25, "nights": 7, "guests": 2, "status": "cancelled"},
        {"residence": studio, "client": claire, "offset": 3, "nights": 4, "guests": 1, "status": "pending"},
        {"residence": suite, "client": moussa, "offset": 40, "nights": 6, "guests": 3, "status": "confirmed"},
        {"residence": room, "client": claire, "offset": None, "nights": 1, "guests": 2, "status": "pending"},
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def _reset_demo_accounts(session) -> None:
    """Remove demo users, their residences and every reservation touching them."""
    emails = [DEMO_OWNER["email"], *(c["email"] for c in DEMO_CLIENTS)]
    result = await session.execute(select(User.id).where(User.email.in_(emails)))
    user_ids = list(result.scalars().all())
    if not user_ids:
        return

    print("⚠️  Demo accounts already exist. Deleting and re-seeding...")
    result = await session.execute(select(Residence.id).where(Residence.owner_id.in_(user_ids)))
    residence_ids = list(result.scalars().all())

    await session.execute(
        delete(Reservation).where(
            Reservation.residence_id.in_(residence_ids) | Reservation.user_id.in_(user_ids)
        )
    )
    await session.execute(delete(Residence).where(Residence.id.in_(residence_ids)))
    await session.execute(delete(User).where(User.id.in_(user_ids)))
    await session.flush()


def _make_user(data: dict) -> User:
    return User(
        email=data["email"],
        hashed_password=hash_password(data["password"]),
        name=data["name"],
        phone=data["phone"],
        role=data["role"],
        is_active=True,
    )


async def seed() -> None:
    """Populate the database with sample residences and reservations.

    Idempotent: existing demo accounts and their data are deleted first.
    """
    async with async_session_factory() as session:
        await _reset_demo_accounts(session)

        # ------------------------------------------------------------------
        # 1. Create demo accounts
        # ------------------------------------------------------------------
        owner = _make_user(DEMO_OWNER)
        clients = [_make_user(data) for data in DEMO_CLIENTS]
        session.add_all([owner, *clients])
        await session.flush()

        print(f"✅ Created demo owner: {owner.email} (id={owner.id})")
        print(f"✅ Created {len(clients)} demo clients")

        # ------------------------------------------------------------------
        # 2. Create residences
        # ------------------------------------------------------------------
        created_residences: list[Residence] = []
        for data in RESIDENCES:
            residence = Residence(owner_id=owner.id, media=[], **data)
            session.add(residence)
            await session.flush()
            created_residences.append(residence)
            print(f"   🏠 {residence.title} — {residence.location} ({residence.price} FCFA/night)")

        # ------------------------------------------------------------------
        # 3. Create reservations
        # ------------------------------------------------------------------
        today = date.today()
        reservation_count = 0

        for rdata in _build_reservations(created_residences, clients, today):
            residence: Residence = rdata["residence"]
            start_date = end_date = None
            if rdata["offset"] is not None:
                start_date = today + timedelta(days=rdata["offset"])
                end_date = start_date + timedelta(days=rdata["nights"])

            session.add(
                Reservation(
                    residence_id=residence.id,
                    user_id=rdata["client"].id,
                    status=rdata["status"],
                    total_price=residence.price * rdata["nights"],
                    start_date=start_date,
                    end_date=end_date,
                    guests=rdata["guests"],
                )
            )
            reservation_count += 1

        await session.flush()
        await session.commit()

        print(f"✅ Created {reservation_count} reservations")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Owner:        1 ({DEMO_OWNER['email']} / {DEMO_OWNER['password']})")
        print(f"   Clients:      {len(clients)}")
        print(f"   Residences:   {len(created_residences)}")
        print(f"   Reservations: {reservation_count}")
        print("=" * 60)
        print("🎉 Done! You can now log in at /api/v1/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
