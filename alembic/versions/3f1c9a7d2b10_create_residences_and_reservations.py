"""create_users_residences_reservations

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # owner_id is an opaque identity reference with no foreign key
    op.create_table(
        "residences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("reference", sa.String(100), nullable=True, unique=True),
        sa.Column("media", sa.JSON(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("reviews_count", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price >= 1000 AND price <= 1000000", name="ck_residences_price_range"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_residences_rating_range"),
        sa.CheckConstraint("reviews_count >= 0", name="ck_residences_reviews_count"),
    )
    op.create_index("ix_residences_owner_id", "residences", ["owner_id"])
    op.create_index("ix_residences_location_type_price", "residences", ["location", "type", "price"])
    op.create_index("ix_residences_owner_created", "residences", ["owner_id", "created_at"])

    # No cascade: reservations outlive a deleted residence
    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("residence_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("total_price", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("guests", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("total_price >= 0", name="ck_reservations_total_price"),
    )
    op.create_index("ix_reservations_residence_id", "reservations", ["residence_id"])
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_status", "reservations", ["status"])


def downgrade() -> None:
    op.drop_index("ix_reservations_status", table_name="reservations")
    op.drop_index("ix_reservations_user_id", table_name="reservations")
    op.drop_index("ix_reservations_residence_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_residences_owner_created", table_name="residences")
    op.drop_index("ix_residences_location_type_price", table_name="residences")
    op.drop_index("ix_residences_owner_id", table_name="residences")
    op.drop_table("residences")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
