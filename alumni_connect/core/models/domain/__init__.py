"""Domain models and enums for the alumni network.

These types are shared between:

- the record store (table names, change notifications),
- the lifecycle state machine and workflow service,
- the list projections and the live refresh coordinator.
"""

from .enums import (
    ChangeType,
    EntityKind,
    EventType,
    JobType,
    MentorshipStatus,
    ReferralStatus,
    RegistrationState,
    SessionStatus,
    Table,
    ViewState,
)
from .models import (
    AlumniEvent,
    EventAttendee,
    JobOpportunity,
    Mentorship,
    OneOnOneSession,
    Profile,
    ReferralRequest,
)

__all__ = [
    "AlumniEvent",
    "ChangeType",
    "EntityKind",
    "EventAttendee",
    "EventType",
    "JobOpportunity",
    "JobType",
    "Mentorship",
    "MentorshipStatus",
    "OneOnOneSession",
    "Profile",
    "ReferralRequest",
    "ReferralStatus",
    "RegistrationState",
    "SessionStatus",
    "Table",
    "ViewState",
]
