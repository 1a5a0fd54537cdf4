"""
Form I/O models for the workflows that create rows.

Each form is validated locally before the record store is contacted. Required
text fields are stripped and must not be empty, matching the ``required``
inputs of the submitting views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from ..domain.enums import EventType, JobType


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid", use_enum_values=True)


class ProfileForm(_Form):
    """Schema for saving the viewer's own profile."""

    full_name: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = None
    current_company: Optional[str] = None
    current_position: Optional[str] = None
    location: Optional[str] = None
    major: Optional[str] = None
    degree: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, ge=1900, le=2100)
    linkedin_url: Optional[HttpUrl] = None
    github_url: Optional[HttpUrl] = None
    twitter_url: Optional[HttpUrl] = None
    is_mentor: bool = False
    is_available_for_mentorship: bool = True


class ReferralRequestForm(_Form):
    """Schema for posting a referral request."""

    company: str = Field(min_length=1, max_length=200, description="Company to be referred to")
    position: str = Field(min_length=1, max_length=200, description="Position applied for")
    message: str = Field(min_length=1, description="Background shared with alumni")


class SessionForm(_Form):
    """Schema for scheduling a one-on-one session; the viewer is the mentor."""

    mentee_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: Optional[int] = Field(default=None, gt=0, le=24 * 60)
    meeting_link: Optional[HttpUrl] = None


class EventForm(_Form):
    """Schema for creating an alumni event."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    event_date: datetime
    location: Optional[str] = None
    event_type: EventType = EventType.networking
    max_attendees: Optional[int] = Field(default=None, gt=0)
    registration_url: Optional[HttpUrl] = None


class JobForm(_Form):
    """Schema for posting a job opportunity."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    company: str = Field(min_length=1, max_length=200)
    location: Optional[str] = None
    job_type: JobType = JobType.full_time
    salary_range: Optional[str] = None
    requirements: Optional[str] = None
    application_url: Optional[HttpUrl] = None
    expires_at: Optional[datetime] = None

    @field_validator("salary_range", "requirements", "location")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None
