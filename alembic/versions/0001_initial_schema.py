"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the event ticketing service:
users, communities, community_members, events, forms,
form_responses, check_ins.
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
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- communities ---
    op.create_table(
        "communities",
        sa.Column("community_id", sa.String(36), primary_key=True),
        sa.Column("handle", sa.String(100), nullable=False, unique=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- community_members ---
    op.create_table(
        "community_members",
        sa.Column("community_id", sa.String(36), sa.ForeignKey("communities.community_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("role", sa.Enum("admin", "member", name="communityrole"), nullable=False, server_default="member"),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("community_id", sa.String(36), sa.ForeignKey("communities.community_id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("location", sa.String(500), nullable=False, server_default=""),
        sa.Column("start_time_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_community_id", "events", ["community_id"])

    # --- forms ---
    op.create_table(
        "forms",
        sa.Column("form_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("fields", sa.JSON, nullable=False),
        sa.Column("ticket_subject", sa.String(255), nullable=True),
        sa.Column("ticket_message", sa.Text, nullable=False, server_default=""),
        sa.Column("include_qr", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_forms_event_id", "forms", ["event_id"])

    # --- form_responses ---
    op.create_table(
        "form_responses",
        sa.Column("response_id", sa.String(36), primary_key=True),
        sa.Column("form_id", sa.String(36), sa.ForeignKey("forms.form_id"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("participant_name", sa.String(200), nullable=False),
        sa.Column("participant_email", sa.String(255), nullable=False),
        sa.Column("values", sa.JSON, nullable=False),
        sa.Column("checked_in", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checked_in_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("check_in_code", sa.String(100), nullable=True),
        sa.Column("ticket_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_form_responses_form_id", "form_responses", ["form_id"])
    op.create_index("ix_form_responses_event_id", "form_responses", ["event_id"])

    # --- check_ins ---
    op.create_table(
        "check_ins",
        sa.Column("check_in_id", sa.String(36), primary_key=True),
        sa.Column("form_id", sa.String(36), sa.ForeignKey("forms.form_id"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("participant_id", sa.String(36), sa.ForeignKey("form_responses.response_id"), nullable=False),
        sa.Column("participant_name", sa.String(200), nullable=True),
        sa.Column("participant_email", sa.String(255), nullable=True),
        sa.Column("check_in_code", sa.String(100), nullable=False),
        sa.Column("checked_in_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("qr_data", sa.JSON, nullable=True),
        sa.UniqueConstraint("form_id", "event_id", "participant_id", name="uq_check_in_form_event_participant"),
    )


def downgrade() -> None:
    op.drop_table("check_ins")
    op.drop_table("form_responses")
    op.drop_table("forms")
    op.drop_table("events")
    op.drop_table("community_members")
    op.drop_table("communities")
    op.drop_table("users")
    sa.Enum(name="communityrole").drop(op.get_bind(), checkfirst=True)
