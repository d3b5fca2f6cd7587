# backend/alembic/versions/001_booking_core.py
"""Booking core - services, staff, working hours, holds, bookings

Revision ID: 001_booking_core
Revises:
Create Date: 2025-06-01 00:00:00.000000

Creates the calendar tables for slot availability and booking holds.

Mutual exclusion lives in the schema:
- booking_holds has UNIQUE(staff_id, slot_datetime); expired rows for a key
  are deleted in the same transaction before a new hold is inserted.
- bookings has a partial unique index on (staff_id, slot_datetime) for
  confirmed rows.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_booking_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create booking core tables."""
    print("Creating booking core tables...")

    op.create_table(
        "services",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        sa.CheckConstraint("base_price >= 0", name="ck_services_price_non_negative"),
    )
    op.create_index("ix_services_id", "services", ["id"])

    op.create_table(
        "staff",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staff_id", "staff", ["id"])

    op.create_table(
        "staff_services",
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("staff_id", "service_id"),
    )

    op.create_table(
        "staff_availability",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("override_date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("end_time > start_time", name="ck_staff_availability_time_order"),
        sa.CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_staff_availability_day_of_week",
        ),
        sa.CheckConstraint(
            "day_of_week IS NOT NULL OR override_date IS NOT NULL",
            name="ck_staff_availability_weekly_or_dated",
        ),
    )
    op.create_index(
        "ix_staff_availability_staff_day", "staff_availability", ["staff_id", "day_of_week"]
    )
    op.create_index(
        "ix_staff_availability_staff_override", "staff_availability", ["staff_id", "override_date"]
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("marketing_consent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_bookings", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_booking_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("phone", name="uq_customers_phone"),
    )
    op.create_index("ix_customers_id", "customers", ["id"])

    op.create_table(
        "booking_holds",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.Column("session_id", sa.String(255), nullable=False),
        sa.Column("slot_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("staff_id", "slot_datetime", name="uq_booking_holds_staff_slot"),
    )
    op.create_index("ix_booking_holds_id", "booking_holds", ["id"])
    op.create_index("ix_booking_holds_session", "booking_holds", ["session_id"])
    op.create_index("ix_booking_holds_expires_at", "booking_holds", ["expires_at"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.Column("customer_id", sa.String(26), nullable=True),
        sa.Column("slot_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(100), nullable=False),
        sa.Column("customer_phone", sa.String(32), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("final_price", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"]),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'no_show')", name="ck_bookings_status"
        ),
        sa.CheckConstraint("duration_minutes > 0", name="ck_bookings_duration_positive"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_staff_slot", "bookings", ["staff_id", "slot_datetime"])
    op.create_index(
        "uq_bookings_staff_slot_confirmed",
        "bookings",
        ["staff_id", "slot_datetime"],
        unique=True,
        postgresql_where=sa.text("status = 'confirmed'"),
        sqlite_where=sa.text("status = 'confirmed'"),
    )

    op.create_table(
        "hold_analytics",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("hold_id", sa.String(26), nullable=False),
        sa.Column("session_id", sa.String(255), nullable=False),
        sa.Column("staff_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.Column("slot_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("held_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("converted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expired_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_hold_analytics_hold_id", "hold_analytics", ["hold_id"])

    print("Booking core tables created")


def downgrade() -> None:
    """Drop booking core tables."""
    for table in (
        "hold_analytics",
        "bookings",
        "booking_holds",
        "customers",
        "staff_availability",
        "staff_services",
        "staff",
        "services",
    ):
        op.drop_table(table)
