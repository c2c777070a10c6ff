"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates the guest directory and RSVP tables:
guests, rsvps, rsvp_attendees.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- guests ---
    op.create_table(
        "guests",
        sa.Column("guest_id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False, unique=True),
        sa.Column("plus_ones_allowed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("kids_allowed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("plus_ones_allowed >= 0", name="ck_guests_plus_ones_nonneg"),
        sa.CheckConstraint("kids_allowed >= 0", name="ck_guests_kids_nonneg"),
    )

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("rsvp_id", sa.String(36), primary_key=True),
        sa.Column("guest_id", sa.String(36), sa.ForeignKey("guests.guest_id"), nullable=True),
        sa.Column("primary_guest_key", sa.String(255), nullable=False, unique=True),
        sa.Column("primary_guest_name", sa.String(200), nullable=False),
        sa.Column("guest_email", sa.String(320), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- rsvp_attendees ---
    op.create_table(
        "rsvp_attendees",
        sa.Column("attendee_id", sa.String(36), primary_key=True),
        sa.Column(
            "rsvp_id", sa.String(36),
            sa.ForeignKey("rsvps.rsvp_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("age", sa.String(10), nullable=False, server_default="adult"),
    )
    op.create_index("ix_rsvps_guest_id", "rsvps", ["guest_id"])
    op.create_index("ix_rsvp_attendees_rsvp_id", "rsvp_attendees", ["rsvp_id"])


def downgrade() -> None:
    op.drop_index("ix_rsvp_attendees_rsvp_id", table_name="rsvp_attendees")
    op.drop_table("rsvp_attendees")
    op.drop_index("ix_rsvps_guest_id", table_name="rsvps")
    op.drop_table("rsvps")
    op.drop_table("guests")
