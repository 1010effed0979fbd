"""create_events_and_rsvp_responses

Revision ID: 3f1c2a7e9b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7e9b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create events and rsvp_responses tables."""
    op.create_table(
        "events",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column("host_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("host_name", sa.String(255), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.Time, nullable=False),
        sa.Column("tz", sa.String(64), nullable=False),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("rsvp_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("include_maybe_in_counts", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("ask_email", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("color_primary", sa.String(32), nullable=True),
        sa.Column("color_secondary", sa.String(32), nullable=True),
        sa.Column("msg_thanks_going", sa.Text, nullable=True),
        sa.Column("msg_thanks_maybe", sa.Text, nullable=True),
        sa.Column("msg_thanks_not_going", sa.Text, nullable=True),
        sa.Column("msg_push_24h_going", sa.Text, nullable=True),
        sa.Column("msg_push_24h_maybe", sa.Text, nullable=True),
    )

    op.create_table(
        "rsvp_responses",
        sa.Column("uuid", sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "event_id",
            sqlalchemy_utils.UUIDType(binary=False),
            sa.ForeignKey("events.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("name_raw", sa.String(255), nullable=False),
        sa.Column("name_norm", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column(
            "status",
            sa.Enum("going", "maybe", "not_going", name="rsvp_status_enum"),
            nullable=False,
        ),
        sa.Column("total_people", sa.Integer, nullable=False),
        sa.Column("children", sa.Integer, nullable=False),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.UniqueConstraint("event_id", "name_norm", "phone", name="uq_rsvp_identity"),
        sa.CheckConstraint("total_people >= 1", name="ck_rsvp_total_people_positive"),
        sa.CheckConstraint(
            "children >= 0 AND children <= total_people", name="ck_rsvp_children_range"
        ),
    )


def downgrade() -> None:
    """Drop events and rsvp_responses tables."""
    op.drop_table("rsvp_responses")
    op.drop_table("events")

    sa.Enum(name="rsvp_status_enum").drop(op.get_bind(), checkfirst=True)
