"""Per-kind projection settings.

Each list the application shows is a projection of one entity kind. A
``ProjectionSpec`` names the fields the engine needs for that kind: the
time field that splits upcoming from past, the predicate selecting the
"active" subset, the fields free-text search looks at and the sort order
of each bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..core.models.domain.enums import MentorshipStatus, ReferralStatus, SessionStatus

ActivePredicate = Callable[[Mapping[str, Any]], bool]


class ProjectionKind(str, Enum):
    sessions = "sessions"
    events = "events"
    jobs = "jobs"
    mentors = "mentors"
    referrals = "referrals"
    mentorships = "mentorships"


def _value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _status_is(status: str) -> ActivePredicate:
    return lambda row: _value(row.get("status")) == status


def _not_deactivated(row: Mapping[str, Any]) -> bool:
    return row.get("is_active") is not False


def _available_mentor(row: Mapping[str, Any]) -> bool:
    return bool(row.get("is_mentor")) and bool(row.get("is_available_for_mentorship"))


@dataclass(frozen=True)
class ProjectionSpec:
    """How one entity kind is bucketed, filtered and sorted."""

    kind: ProjectionKind
    is_active: ActivePredicate
    search_fields: Tuple[str, ...]
    order_field: str
    primary_ascending: bool
    secondary_ascending: bool
    # Rows are upcoming while this field is at or after ``now``.
    time_field: Optional[str] = None
    # A missing time value counts as "never passes" (job postings without expiry).
    open_ended: bool = False
    type_field: Optional[str] = None


SPECS: Dict[ProjectionKind, ProjectionSpec] = {
    ProjectionKind.sessions: ProjectionSpec(
        kind=ProjectionKind.sessions,
        is_active=_status_is(SessionStatus.scheduled.value),
        search_fields=("title", "description"),
        order_field="scheduled_at",
        primary_ascending=True,
        secondary_ascending=False,
        time_field="scheduled_at",
    ),
    ProjectionKind.events: ProjectionSpec(
        kind=ProjectionKind.events,
        is_active=_not_deactivated,
        search_fields=("title", "description", "location"),
        order_field="event_date",
        primary_ascending=True,
        secondary_ascending=False,
        time_field="event_date",
        type_field="event_type",
    ),
    ProjectionKind.jobs: ProjectionSpec(
        kind=ProjectionKind.jobs,
        is_active=_not_deactivated,
        search_fields=("title", "company", "description"),
        order_field="created_at",
        primary_ascending=False,
        secondary_ascending=False,
        time_field="expires_at",
        open_ended=True,
        type_field="job_type",
    ),
    ProjectionKind.mentors: ProjectionSpec(
        kind=ProjectionKind.mentors,
        is_active=_available_mentor,
        search_fields=("full_name", "current_company", "major"),
        order_field="full_name",
        primary_ascending=True,
        secondary_ascending=True,
    ),
    ProjectionKind.referrals: ProjectionSpec(
        kind=ProjectionKind.referrals,
        is_active=_status_is(ReferralStatus.open.value),
        search_fields=("company", "position"),
        order_field="created_at",
        primary_ascending=False,
        secondary_ascending=False,
    ),
    ProjectionKind.mentorships: ProjectionSpec(
        kind=ProjectionKind.mentorships,
        is_active=_status_is(MentorshipStatus.pending.value),
        search_fields=("message",),
        order_field="created_at",
        primary_ascending=False,
        secondary_ascending=False,
    ),
}


def get_spec(kind: Any) -> ProjectionSpec:
    """Look up the ProjectionSpec for ``kind`` (enum member or its value).

    Raises:
        ValueError: If the kind is unknown.
    """
    try:
        return SPECS[ProjectionKind(_value(kind))]
    except ValueError:
        raise ValueError(f"Unknown projection kind: {kind!r}") from None
