"""
Initial migration - Create club, facility, booking, event and billing tables

Revision ID: 001_initial
Create Date: 2026-03-01 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create all tables"""

    # Create clubs table
    op.create_table(
        "clubs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(100), unique=True, nullable=False),
        sa.Column("logo_url", sa.String(500)),
        sa.Column("address", sa.Text()),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(255)),
        sa.Column("website", sa.String(255)),
        sa.Column("timezone", sa.String(64), nullable=False, server_default="America/New_York"),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_clubs_name", "clubs", ["name"])
    op.create_index("ix_clubs_slug", "clubs", ["slug"])

    # Create membership_tiers table
    op.create_table(
        "membership_tiers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("level", sa.Enum("standard", "premium", "vip", "honorary", name="tierlevel"), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("monthly_dues", sa.Float(), nullable=False, server_default="0"),
        sa.Column("annual_dues", sa.Float()),
        sa.Column("benefits", postgresql.JSON()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_membership_tiers_club_id", "membership_tiers", ["club_id"])

    # Create members table
    op.create_table(
        "members",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("membership_tier_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("membership_tiers.id")),
        sa.Column("member_number", sa.String(50)),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", sa.Enum("admin", "staff", "member", name="memberrole"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "inactive", "suspended", "pending", name="memberstatus"),
            nullable=False,
        ),
        sa.Column("stripe_customer_id", sa.String(255)),
        sa.Column("stripe_subscription_id", sa.String(255)),
        sa.Column("subscription_status", sa.String(50)),
        sa.Column("join_date", sa.Date()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.UniqueConstraint("club_id", "user_id", name="uq_members_club_user"),
    )
    op.create_index("ix_members_club_id", "members", ["club_id"])
    op.create_index("ix_members_user_id", "members", ["user_id"])
    op.create_index("ix_members_role", "members", ["role"])
    op.create_index("ix_members_stripe_customer_id", "members", ["stripe_customer_id"])

    # Create facilities table
    op.create_table(
        "facilities",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "type",
            sa.Enum("golf", "tennis", "dining", "pool", "fitness", "other", name="facilitytype"),
            nullable=False,
        ),
        sa.Column("description", sa.Text()),
        sa.Column("capacity", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_facilities_club_id", "facilities", ["club_id"])
    op.create_index("ix_facilities_type", "facilities", ["type"])

    # Create booking_slots table
    op.create_table(
        "booking_slots",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("facility_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("max_bookings", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_booking_slots_day_of_week"),
    )
    op.create_index("ix_booking_slots_facility_id", "booking_slots", ["facility_id"])

    # Create bookings table
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("facility_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("member_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("notes", sa.Text()),
        sa.Column(
            "status",
            sa.Enum("confirmed", "pending", "cancelled", "completed", "no_show", name="bookingstatus"),
            nullable=False,
        ),
        sa.Column("cancelled_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_bookings_party_size"),
    )
    op.create_index("ix_bookings_club_id", "bookings", ["club_id"])
    op.create_index("ix_bookings_facility_id", "bookings", ["facility_id"])
    op.create_index("ix_bookings_member_id", "bookings", ["member_id"])
    op.create_index("ix_bookings_date", "bookings", ["date"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    # One active booking per slot
    op.create_index(
        "uq_bookings_active_slot",
        "bookings",
        ["facility_id", "date", "start_time"],
        unique=True,
        postgresql_where=sa.text("status IN ('confirmed', 'pending')"),
    )

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("location", sa.String(255)),
        sa.Column("image_url", sa.String(500)),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime()),
        sa.Column("capacity", sa.Integer()),
        sa.Column("price", sa.Float()),
        sa.Column(
            "status",
            sa.Enum("draft", "published", "cancelled", "completed", name="eventstatus"),
            nullable=False,
        ),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("members.id")),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_events_club_id", "events", ["club_id"])
    op.create_index("ix_events_start_date", "events", ["start_date"])
    op.create_index("ix_events_status", "events", ["status"])

    # Create event_rsvps table
    op.create_table(
        "event_rsvps",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("event_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("member_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("attending", "declined", "maybe", "waitlisted", name="rsvpstatus"),
            nullable=False,
        ),
        sa.Column("guest_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.UniqueConstraint("event_id", "member_id", name="uq_event_rsvps_event_member"),
        sa.CheckConstraint("guest_count >= 0", name="ck_event_rsvps_guest_count"),
    )
    op.create_index("ix_event_rsvps_event_id", "event_rsvps", ["event_id"])
    op.create_index("ix_event_rsvps_member_id", "event_rsvps", ["member_id"])
    op.create_index("ix_event_rsvps_status", "event_rsvps", ["status"])

    # Create invoices table
    op.create_table(
        "invoices",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("member_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("stripe_invoice_id", sa.String(255), unique=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("draft", "sent", "paid", "overdue", "cancelled", "void", name="invoicestatus"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("paid_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_invoices_club_id", "invoices", ["club_id"])
    op.create_index("ix_invoices_member_id", "invoices", ["member_id"])

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("club_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("member_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("invoice_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("invoices.id")),
        sa.Column("stripe_payment_id", sa.String(255), unique=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("method", sa.Enum("card", "ach", "check", "cash", "other", name="paymentmethod"), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_payments_club_id", "payments", ["club_id"])
    op.create_index("ix_payments_member_id", "payments", ["member_id"])


def downgrade() -> None:
    """Drop all tables"""
    op.drop_table("payments")
    op.drop_table("invoices")
    op.drop_table("event_rsvps")
    op.drop_table("events")
    op.drop_table("bookings")
    op.drop_table("booking_slots")
    op.drop_table("facilities")
    op.drop_table("members")
    op.drop_table("membership_tiers")
    op.drop_table("clubs")

    # Drop enums
    op.execute("DROP TYPE IF EXISTS paymentmethod")
    op.execute("DROP TYPE IF EXISTS invoicestatus")
    op.execute("DROP TYPE IF EXISTS rsvpstatus")
    op.execute("DROP TYPE IF EXISTS eventstatus")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
    op.execute("DROP TYPE IF EXISTS facilitytype")
    op.execute("DROP TYPE IF EXISTS memberstatus")
    op.execute("DROP TYPE IF EXISTS memberrole")
    op.execute("DROP TYPE IF EXISTS tierlevel")
