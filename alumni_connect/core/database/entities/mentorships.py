"""
Mentorship entity models.

This module contains the database entity for mentorship requests sent by a
mentee to a mentor.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class MentorshipBase(Base):
    """Base fields for mentorship entity."""

    mentor_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)
    mentee_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)
    message: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="pending", max_length=16, index=True)


class Mentorship(MentorshipBase, table=True):
    """Entity for mentorship requests.

    Table: mentorships
    """

    __tablename__ = "mentorships"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Mentorship(id={self.id}, mentor_id={self.mentor_id}, status={self.status})"
