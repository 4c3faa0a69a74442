"""create_booking_pipeline_tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-02-03 10:12:44.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", sa.String(32), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profiles_id"), "profiles", ["id"], unique=False)
    op.create_index(op.f("ix_profiles_email"), "profiles", ["email"], unique=True)

    # Catalog
    op.create_table(
        "golf_courses",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_golf_courses_vendor_id"), "golf_courses", ["vendor_id"])

    op.create_table(
        "tee_times",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(36), sa.ForeignKey("golf_courses.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("available_slots", sa.Integer(), nullable=True),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tee_times_course_id"), "tee_times", ["course_id"])

    op.create_table(
        "hotels",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("star_rating", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_hotels_vendor_id"), "hotels", ["vendor_id"])

    op.create_table(
        "hotel_rooms",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("hotel_id", sa.String(36), sa.ForeignKey("hotels.id"), nullable=False),
        sa.Column("room_type", sa.String(100), nullable=False),
        sa.Column("price_per_night", sa.Numeric(14, 2), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("available_count", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_hotel_rooms_hotel_id"), "hotel_rooms", ["hotel_id"])

    op.create_table(
        "travel_packages",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("package_type", sa.String(32), nullable=True),
        sa.Column("price", sa.Numeric(14, 2), nullable=False),
        sa.Column("duration_hours", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_travel_packages_vendor_id"), "travel_packages", ["vendor_id"])

    # Booking pipeline
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("booking_type", sa.String(32), nullable=False),
        sa.Column("booking_details", sa.JSON(), nullable=False),
        sa.Column("vendor_approvals", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bookings_user_id"), "bookings", ["user_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("booking_id", sa.String(36), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("xendit_invoice_id", sa.String(100), nullable=True),
        sa.Column("xendit_external_id", sa.String(100), nullable=True),
        sa.Column("invoice_url", sa.String(500), nullable=True),
        sa.Column("expiry_date", sa.String(64), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("payment_channel", sa.String(64), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_booking_id"), "payments", ["booking_id"])
    op.create_index(op.f("ix_payments_xendit_invoice_id"), "payments", ["xendit_invoice_id"])
    op.create_index(
        op.f("ix_payments_xendit_external_id"), "payments", ["xendit_external_id"], unique=True
    )
    # At most one live invoice per booking; backstop for double "pay now" clicks
    op.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS uq_payments_one_pending_per_booking
        ON payments (booking_id)
        WHERE status = 'pending';
        """
    )

    op.create_table(
        "split_settlements",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), sa.ForeignKey("payments.id"), nullable=False),
        sa.Column("vendor_id", sa.String(36), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("settled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("payment_id", "vendor_id", name="uq_settlement_payment_vendor"),
    )
    op.create_index(op.f("ix_split_settlements_payment_id"), "split_settlements", ["payment_id"])
    op.create_index(op.f("ix_split_settlements_vendor_id"), "split_settlements", ["vendor_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("recipient_id", sa.String(36), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notifications_recipient_id"), "notifications", ["recipient_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("notifications")
    op.drop_table("split_settlements")
    op.execute("DROP INDEX IF EXISTS uq_payments_one_pending_per_booking;")
    op.drop_table("payments")
    op.drop_table("bookings")
    op.drop_table("travel_packages")
    op.drop_table("hotel_rooms")
    op.drop_table("hotels")
    op.drop_table("tee_times")
    op.drop_table("golf_courses")
    op.drop_table("profiles")
