"""
Profile entity models.

This module contains the database entity for alumni profiles. Every other
table references a profile through its ``user_id``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class ProfileBase(Base):
    """Base fields for profile entity."""

    user_id: str = Field(max_length=64, unique=True, index=True)

    # Display attributes
    full_name: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=320)
    bio: Optional[str] = Field(default=None, sa_type=Text)
    avatar_url: Optional[str] = Field(default=None)

    # Professional attributes
    current_company: Optional[str] = Field(default=None, max_length=200)
    current_position: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    major: Optional[str] = Field(default=None, max_length=200)
    degree: Optional[str] = Field(default=None, max_length=200)
    graduation_year: Optional[int] = Field(default=None)
    linkedin_url: Optional[str] = Field(default=None)
    github_url: Optional[str] = Field(default=None)
    twitter_url: Optional[str] = Field(default=None)

    # Mentorship flags
    is_mentor: bool = Field(default=False, index=True)
    is_available_for_mentorship: bool = Field(default=True)


class Profile(ProfileBase, table=True):
    """Entity for alumni profiles.

    Table: profiles
    """

    __tablename__ = "profiles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Profile(user_id={self.user_id}, is_mentor={self.is_mentor})"
