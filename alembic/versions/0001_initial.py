"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "cars",
        sa.Column("key", sa.String(length=36), primary_key=True),
        sa.Column("legacy_num", sa.Integer(), nullable=True, unique=True),
        sa.Column("legacy_id", sa.String(length=64), nullable=True, unique=True),
        sa.Column("make", sa.String(length=80), nullable=False),
        sa.Column("model", sa.String(length=80), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("body_type", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("seats", sa.Integer(), nullable=False, server_default="4"),
        sa.Column("transmission", sa.String(length=30), nullable=False, server_default="automatic"),
        sa.Column("fuel_type", sa.String(length=30), nullable=False, server_default=""),
        sa.Column("price_per_day", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("key", sa.String(length=36), primary_key=True),
        sa.Column("legacy_num", sa.Integer(), nullable=True, unique=True),
        sa.Column("legacy_id", sa.String(length=64), nullable=True, unique=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=80), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("role", sa.String(length=10), nullable=False, server_default="user"),
        sa.Column("password_hash", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "rentals",
        sa.Column("key", sa.String(length=36), primary_key=True),
        sa.Column("legacy_num", sa.Integer(), nullable=True, unique=True),
        sa.Column("legacy_id", sa.String(length=64), nullable=True, unique=True),
        sa.Column("car_ref_kind", sa.String(length=10), nullable=False),
        sa.Column("car_ref", sa.String(length=64), nullable=False),
        sa.Column("user_ref_kind", sa.String(length=10), nullable=False),
        sa.Column("user_ref", sa.String(length=64), nullable=False),
        sa.Column("user_email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=80), nullable=False, server_default=""),
        sa.Column("start_date", sa.String(length=10), nullable=False),
        sa.Column("end_date", sa.String(length=10), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False),
        sa.Column("price_per_day", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("pickup_location", sa.String(length=200), nullable=False, server_default="Default Location"),
        sa.Column("dropoff_location", sa.String(length=200), nullable=False, server_default="Default Location"),
        sa.Column("special_requests", sa.Text(), nullable=False, server_default=""),
        sa.Column("payment_info", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(length=12), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_rentals_car_ref", "rentals", ["car_ref"])
    op.create_index("ix_rentals_user_ref", "rentals", ["user_ref"])
    op.create_index("ix_rentals_user_email", "rentals", ["user_email"])
    op.create_index("ix_rentals_status", "rentals", ["status"])


def downgrade() -> None:
    op.drop_table("rentals")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("cars")
