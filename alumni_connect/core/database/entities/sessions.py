"""
One-on-one session entity models.

This module contains the database entity for scheduled mentoring sessions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class OneOnOneSessionBase(Base):
    """Base fields for one-on-one session entity."""

    mentor_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)
    mentee_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)

    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, sa_type=Text)
    duration_minutes: Optional[int] = Field(default=60)
    meeting_link: Optional[str] = Field(default=None)
    status: str = Field(default="scheduled", max_length=16, index=True)


class OneOnOneSession(OneOnOneSessionBase, table=True):
    """Entity for one-on-one sessions.

    Table: one_on_one_sessions
    """

    __tablename__ = "one_on_one_sessions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    scheduled_at: datetime = timestamp_field(index=True)

    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"OneOnOneSession(id={self.id}, scheduled_at={self.scheduled_at}, status={self.status})"
