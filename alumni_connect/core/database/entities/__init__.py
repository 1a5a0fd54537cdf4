"""
Database entity models.

This package contains all database entity models, one module per table or
per group of closely related tables:

- profiles: alumni profiles and mentor flags
- mentorships: mentorship requests
- referral_requests: referral requests and their claims
- sessions: one-on-one sessions
- events: alumni events and attendee registrations
- jobs: job opportunities

``TABLES`` maps every record store table name to its entity class.
"""

from typing import Dict, Type

from ...models.domain.enums import Table
from ..base import Base
from .events import AlumniEvent, EventAttendee
from .jobs import JobOpportunity
from .mentorships import Mentorship
from .profiles import Profile
from .referral_requests import ReferralRequest
from .sessions import OneOnOneSession

TABLES: Dict[str, Type[Base]] = {
    Table.profiles.value: Profile,
    Table.mentorships.value: Mentorship,
    Table.referral_requests.value: ReferralRequest,
    Table.one_on_one_sessions.value: OneOnOneSession,
    Table.alumni_events.value: AlumniEvent,
    Table.event_attendees.value: EventAttendee,
    Table.job_opportunities.value: JobOpportunity,
}

__all__ = [
    "AlumniEvent",
    "EventAttendee",
    "JobOpportunity",
    "Mentorship",
    "OneOnOneSession",
    "Profile",
    "ReferralRequest",
    "TABLES",
]
