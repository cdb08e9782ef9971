"""Initial schema: users, organizer/doctor profiles, events, ticket tiers.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'user'")),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('user', 'organizer', 'admin', 'doctor', 'property-owner')",
            name="check_user_role",
        ),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Companies behind organizer accounts
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("registration_number", sa.String(100), nullable=True),
        sa.Column("business_type", sa.String(30), nullable=True),
        sa.Column("street", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(30), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("logo", sa.String(500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint(
            "business_type IS NULL OR business_type IN "
            "('sole_proprietorship', 'partnership', 'private_limited', 'public_limited')",
            name="check_company_business_type",
        ),
    )
    op.create_index("ix_companies_id", "companies", ["id"])

    op.create_table(
        "organizer_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_picture", sa.String(500), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_organizer_profile_user"),
    )
    op.create_index("ix_organizer_profiles_id", "organizer_profiles", ["id"])

    op.create_table(
        "doctor_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("registration_number", sa.String(50), nullable=False),
        sa.Column("specialization", sa.String(150), nullable=True),
        sa.Column("qualification", sa.String(150), nullable=True),
        sa.Column("hospital", sa.String(255), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_doctor_profile_user"),
    )
    op.create_index("ix_doctor_profiles_id", "doctor_profiles", ["id"])
    op.create_index(
        "ix_doctor_profiles_registration_number", "doctor_profiles", ["registration_number"], unique=True
    )

    # Events table
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("admin_feedback", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("organizer_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('cultural', 'music', 'sports', 'culinary', 'adventure', 'business', 'other')",
            name="check_event_category",
        ),
        sa.CheckConstraint(
            "approval_status IN ('pending', 'approved', 'rejected')",
            name="check_event_approval_status",
        ),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])
    # Catalog listing is ordered by date
    op.create_index("ix_events_date", "events", ["date"])
    # The admin queue: WHERE approval_status = 'pending' ORDER BY created_at
    op.create_index("ix_events_approval_created", "events", ["approval_status", "created_at"])

    # Ticket tiers
    op.create_table(
        "ticket_tiers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("sold", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        sa.CheckConstraint("quantity >= 1", name="check_ticket_quantity_positive"),
        sa.CheckConstraint("sold >= 0", name="check_ticket_sold_non_negative"),
        sa.CheckConstraint("sold <= quantity", name="check_ticket_sold_lte_quantity"),
    )
    op.create_index("ix_ticket_tiers_id", "ticket_tiers", ["id"])
    op.create_index("ix_ticket_tiers_event_id", "ticket_tiers", ["event_id"])


def downgrade() -> None:
    op.drop_table("ticket_tiers")
    op.drop_table("events")
    op.drop_table("doctor_profiles")
    op.drop_table("organizer_profiles")
    op.drop_table("companies")
    op.drop_table("users")
