"""Initial schema for Alumni Connect

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

Creates the tables of the alumni network:
- profiles (one per user, keyed by user_id)
- mentorships, referral_requests, one_on_one_sessions
- alumni_events and their event_attendees
- job_opportunities

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create profiles table
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("current_company", sa.String(200), nullable=True),
        sa.Column("current_position", sa.String(200), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("major", sa.String(200), nullable=True),
        sa.Column("degree", sa.String(200), nullable=True),
        sa.Column("graduation_year", sa.Integer(), nullable=True),
        sa.Column("linkedin_url", sa.String(), nullable=True),
        sa.Column("github_url", sa.String(), nullable=True),
        sa.Column("twitter_url", sa.String(), nullable=True),
        sa.Column("is_mentor", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_available_for_mentorship", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_profiles_user_id", "user_id", unique=True),
        sa.Index("ix_profiles_is_mentor", "is_mentor"),
    )

    # Create mentorships table
    op.create_table(
        "mentorships",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("mentor_id", sa.String(64), nullable=False),
        sa.Column("mentee_id", sa.String(64), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["mentor_id"], ["profiles.user_id"]),
        sa.ForeignKeyConstraint(["mentee_id"], ["profiles.user_id"]),
        sa.Index("ix_mentorships_mentor_id", "mentor_id"),
        sa.Index("ix_mentorships_mentee_id", "mentee_id"),
        sa.Index("ix_mentorships_status", "status"),
    )

    # Create referral_requests table
    op.create_table(
        "referral_requests",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("requester_id", sa.String(64), nullable=False),
        sa.Column("referee_id", sa.String(64), nullable=True),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("position", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="open"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["requester_id"], ["profiles.user_id"]),
        sa.ForeignKeyConstraint(["referee_id"], ["profiles.user_id"]),
        sa.Index("ix_referral_requests_requester_id", "requester_id"),
        sa.Index("ix_referral_requests_referee_id", "referee_id"),
        sa.Index("ix_referral_requests_status", "status"),
    )

    # Create one_on_one_sessions table
    op.create_table(
        "one_on_one_sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("mentor_id", sa.String(64), nullable=False),
        sa.Column("mentee_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True, server_default="60"),
        sa.Column("meeting_link", sa.String(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="scheduled"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["mentor_id"], ["profiles.user_id"]),
        sa.ForeignKeyConstraint(["mentee_id"], ["profiles.user_id"]),
        sa.Index("ix_one_on_one_sessions_mentor_id", "mentor_id"),
        sa.Index("ix_one_on_one_sessions_mentee_id", "mentee_id"),
        sa.Index("ix_one_on_one_sessions_scheduled_at", "scheduled_at"),
        sa.Index("ix_one_on_one_sessions_status", "status"),
    )

    # Create alumni_events table
    op.create_table(
        "alumni_events",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("event_type", sa.String(32), nullable=False),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("registration_url", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.user_id"]),
        sa.Index("ix_alumni_events_created_by", "created_by"),
        sa.Index("ix_alumni_events_event_date", "event_date"),
        sa.Index("ix_alumni_events_event_type", "event_type"),
        sa.Index("ix_alumni_events_is_active", "is_active"),
    )

    # Create event_attendees table
    op.create_table(
        "event_attendees",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("event_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["event_id"], ["alumni_events.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.user_id"]),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_attendees_event_user"),
        sa.Index("ix_event_attendees_event_id", "event_id"),
        sa.Index("ix_event_attendees_user_id", "user_id"),
    )

    # Create job_opportunities table
    op.create_table(
        "job_opportunities",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("posted_by", sa.String(64), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("job_type", sa.String(32), nullable=False),
        sa.Column("salary_range", sa.String(100), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("application_url", sa.String(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["posted_by"], ["profiles.user_id"]),
        sa.Index("ix_job_opportunities_posted_by", "posted_by"),
        sa.Index("ix_job_opportunities_job_type", "job_type"),
        sa.Index("ix_job_opportunities_is_active", "is_active"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("job_opportunities")
    op.drop_table("event_attendees")
    op.drop_table("alumni_events")
    op.drop_table("one_on_one_sessions")
    op.drop_table("referral_requests")
    op.drop_table("mentorships")
    op.drop_table("profiles")
