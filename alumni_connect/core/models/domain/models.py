"""Domain models for the alumni network entities.

These mirror the row shape returned by the record store; services convert
rows into these models before handing them back to callers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import Field

from ..base import BaseSchema
from .enums import MentorshipStatus, ReferralStatus, SessionStatus


def _utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class Profile(BaseSchema):
    """
    Public profile of an alumnus or student.

    ``is_available_for_mentorship`` only means something while ``is_mentor``
    is true; the store does not enforce that, the service does.
    """

    id: str = Field(default_factory=_new_id)
    user_id: str

    full_name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    current_company: Optional[str] = None
    current_position: Optional[str] = None
    location: Optional[str] = None
    major: Optional[str] = None
    degree: Optional[str] = None
    graduation_year: Optional[int] = None

    avatar_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    twitter_url: Optional[str] = None

    is_mentor: bool = False
    is_available_for_mentorship: bool = True

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Mentorship(BaseSchema):
    """A mentee's request addressed to a mentor."""

    id: str = Field(default_factory=_new_id)
    mentor_id: str
    mentee_id: str
    message: Optional[str] = None
    status: MentorshipStatus = MentorshipStatus.pending

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class ReferralRequest(BaseSchema):
    """
    A request for a referral at a company.

    ``referee_id`` stays empty until another user claims the request.
    """

    id: str = Field(default_factory=_new_id)
    requester_id: str
    referee_id: Optional[str] = None

    company: str
    position: str
    message: Optional[str] = None
    status: ReferralStatus = ReferralStatus.open

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class OneOnOneSession(BaseSchema):
    """A scheduled one-on-one between a mentor and a mentee."""

    id: str = Field(default_factory=_new_id)
    mentor_id: str
    mentee_id: str

    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: Optional[int] = 60
    meeting_link: Optional[str] = None
    status: SessionStatus = SessionStatus.scheduled

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class AlumniEvent(BaseSchema):
    """An event organised by an alumnus."""

    id: str = Field(default_factory=_new_id)
    created_by: str

    title: str
    description: str
    event_date: datetime
    location: Optional[str] = None
    event_type: str
    max_attendees: Optional[int] = None
    registration_url: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = True

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class EventAttendee(BaseSchema):
    """Registration of a user for an event."""

    id: str = Field(default_factory=_new_id)
    event_id: str
    user_id: str
    registered_at: datetime = Field(default_factory=_utc_now)


class JobOpportunity(BaseSchema):
    """A job posting shared with the network."""

    id: str = Field(default_factory=_new_id)
    posted_by: str

    title: str
    description: str
    company: str
    location: Optional[str] = None
    job_type: str
    salary_range: Optional[str] = None
    requirements: Optional[str] = None
    application_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = True

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
