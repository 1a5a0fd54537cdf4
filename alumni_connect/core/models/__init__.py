"""Core models and schemas for the alumni network."""

from __future__ import annotations

from .base import BaseSchema
from .domain import (
    AlumniEvent,
    ChangeType,
    EntityKind,
    EventAttendee,
    JobOpportunity,
    Mentorship,
    MentorshipStatus,
    OneOnOneSession,
    Profile,
    ReferralRequest,
    ReferralStatus,
    RegistrationState,
    SessionStatus,
    Table,
    ViewState,
)

__all__ = [
    "BaseSchema",
    "AlumniEvent",
    "ChangeType",
    "EntityKind",
    "EventAttendee",
    "JobOpportunity",
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
