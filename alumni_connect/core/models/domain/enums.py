"""Domain enums for the alumni network models."""

from __future__ import annotations

from enum import Enum


class Table(str, Enum):
    """Names of the record store tables."""

    profiles = "profiles"
    mentorships = "mentorships"
    referral_requests = "referral_requests"
    one_on_one_sessions = "one_on_one_sessions"
    alumni_events = "alumni_events"
    event_attendees = "event_attendees"
    job_opportunities = "job_opportunities"


class EntityKind(str, Enum):
    """Entity kinds that carry a status lifecycle."""

    mentorship = "mentorship"
    referral_request = "referral_request"
    session = "session"
    event_attendee = "event_attendee"


class MentorshipStatus(str, Enum):
    """Lifecycle status of a mentorship request."""

    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class ReferralStatus(str, Enum):
    """Lifecycle status of a referral request."""

    open = "open"
    accepted = "accepted"
    declined = "declined"
    completed = "completed"


class SessionStatus(str, Enum):
    """Lifecycle status of a one-on-one session."""

    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class RegistrationState(str, Enum):
    """Whether an attendee row exists for an (event, user) pair."""

    absent = "absent"
    present = "present"


class EventType(str, Enum):
    networking = "networking"
    career_fair = "career_fair"
    social = "social"
    educational = "educational"
    reunion = "reunion"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    internship = "internship"


class ChangeType(str, Enum):
    """Kind of row change carried by a store notification."""

    insert = "INSERT"
    update = "UPDATE"
    delete = "DELETE"


class ViewState(str, Enum):
    """State of a live view maintained by the refresh coordinator."""

    idle = "idle"
    loading = "loading"
    ready = "ready"
    error = "error"
    closed = "closed"
