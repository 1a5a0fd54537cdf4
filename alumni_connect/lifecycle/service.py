"""Workflow service for request/offer lifecycles.

``LifecycleService`` is the single entry point for every write the alumni
network performs: requesting mentorship, posting and claiming referrals,
scheduling sessions, registering for events and posting jobs.

Every operation follows the same steps:

1. Require an explicit acting identity (``viewer_id``); ``None`` raises
   ``AuthRequiredError``.
2. Validate the submitted form locally; failures raise ``ValidationError``
   before the store is contacted.
3. Resolve the state machine edge (``TransitionRejected`` on an illegal one).
4. Ask the injected permission check (``PermissionDeniedError``).
5. Perform exactly one store write. Status changes are conditional writes
   filtered on the current status, so a concurrent change turns into
   ``TransitionRejected`` instead of a silent overwrite.

The whole operation runs inside the submission guard, keyed by action,
target and viewer, so a double click reaches the store only once.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import AnyUrl, BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.errors import (
    AlreadyClaimedError,
    AuthRequiredError,
    RecordNotFoundError,
    TransitionRejected,
    ValidationError,
)
from ..core.models.domain.enums import EntityKind, MentorshipStatus, RegistrationState, Table
from ..core.models.domain.models import (
    AlumniEvent,
    EventAttendee,
    JobOpportunity,
    Mentorship,
    OneOnOneSession,
    Profile,
    ReferralRequest,
)
from ..core.models.io.forms import EventForm, JobForm, ProfileForm, ReferralRequestForm, SessionForm
from ..store.interfaces import RecordStore, Row
from .guard import SubmissionGuard
from .permissions import PermissionCheck, RolePermissions, require_permission
from .transitions import TransitionTable, check_capacity, default_table

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=BaseModel)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, AnyUrl):
        return str(value)
    return value


def _row(model: BaseModel, *, exclude_unset: bool = False, **overrides: Any) -> Row:
    """Dump a model into the store's row shape."""
    values = {name: _plain(value) for name, value in model.model_dump(exclude_unset=exclude_unset).items()}
    values.update(overrides)
    return values


@dataclass(frozen=True)
class LifecycleDeps:
    """Dependency bundle for ``LifecycleService``.

    This allows applications and tests to inject:

    - the record store,
    - the permission check applied at each mutation boundary,
    - the transition table,
    - the duplicate-submission guard shared with the views,
    - the clock used for timestamps.
    """

    store: RecordStore
    permissions: PermissionCheck = field(default_factory=RolePermissions)
    transitions: TransitionTable = default_table
    guard: SubmissionGuard = field(default_factory=SubmissionGuard)
    clock: Callable[[], datetime] = _utc_now


class LifecycleService:
    """Create and advance mentorships, referrals, sessions and registrations."""

    def __init__(
        self,
        deps: LifecycleDeps,
        *,
        mentorship_message: Optional[str] = None,
        default_session_minutes: Optional[int] = None,
    ) -> None:
        self._deps = deps
        self._store = deps.store
        self._mentorship_message = mentorship_message or settings.mentorship_message
        self._default_session_minutes = default_session_minutes or settings.default_session_minutes

    @property
    def guard(self) -> SubmissionGuard:
        return self._deps.guard

    # ------------------------------------------------------------------
    # shared steps
    # ------------------------------------------------------------------

    @staticmethod
    def _require_viewer(viewer_id: Optional[str], action: str) -> str:
        if not viewer_id:
            logger.info(f"Anonymous attempt to {action}")
            raise AuthRequiredError(action)
        return viewer_id

    @staticmethod
    def _validate(form_cls: Type[FormT], data: Union[FormT, Mapping[str, Any]], name: str) -> FormT:
        if isinstance(data, form_cls):
            return data
        try:
            return form_cls.model_validate(data)
        except PydanticValidationError as exc:
            error = ValidationError.from_pydantic(exc, name)
            logger.info(f"Rejected {name}: {error.errors}")
            raise error from exc

    @asynccontextmanager
    async def _submission(self, key: str) -> AsyncIterator[None]:
        async with self._deps.guard.submitting(key):
            yield

    async def _load(self, table: Table, record_id: str) -> Row:
        row = await self._store.get(table.value, record_id)
        if row is None:
            raise RecordNotFoundError(table.value, record_id)
        return row

    def _permit(self, viewer_id: str, action: str, row: Mapping[str, Any]) -> None:
        require_permission(self._deps.permissions, viewer_id, action, row)

    async def _advance(self, viewer_id: str, kind: EntityKind, table: Table, record_id: str, action: str) -> Row:
        """Apply one status edge as a compare-and-set on the current status."""
        row = await self._load(table, record_id)
        try:
            transition = self._deps.transitions.resolve(kind, row["status"], action)
        except TransitionRejected as exc:
            logger.warning(f"{exc} on {table.value}/{record_id}")
            raise
        self._permit(viewer_id, f"{kind.value}.{action}", row)

        patch = transition.patch(viewer_id, self._deps.clock())
        updated = await self._store.update(table.value, transition.precondition(record_id), patch)
        if updated == 0:
            current = await self._store.get(table.value, record_id)
            if current is None:
                raise RecordNotFoundError(table.value, record_id)
            logger.warning(
                f"Conditional write lost on {table.value}/{record_id}: "
                f"expected {transition.source}, found {current['status']}"
            )
            if transition.assigns:
                raise AlreadyClaimedError(record_id, current["status"])
            raise TransitionRejected(kind.value, current["status"], transition.target, reason="changed concurrently")

        logger.info(f"{kind.value} {record_id}: {transition.source} -> {transition.target} by {viewer_id}")
        return await self._load(table, record_id)

    # ------------------------------------------------------------------
    # profiles
    # ------------------------------------------------------------------

    async def save_profile(self, viewer_id: Optional[str], form: Union[ProfileForm, Mapping[str, Any]]) -> Profile:
        """Create or update the viewer's own profile.

        Only the fields present in ``form`` are written; columns it leaves
        out keep their stored values. Availability for mentorship is stored
        as false unless the resulting profile is a mentor profile.
        """
        viewer = self._require_viewer(viewer_id, "update your profile")
        data = self._validate(ProfileForm, form, "profile")
        row = _row(data, exclude_unset=True, user_id=viewer, updated_at=self._deps.clock())
        self._permit(viewer, "profile.save", row)
        async with self._submission(f"profile.save:{viewer}"):
            current = await self._store.query(Table.profiles.value, {"user_id": viewer}, limit=1)
            merged = {**data.model_dump(), **(current[0] if current else {}), **row}
            row["is_available_for_mentorship"] = bool(merged["is_mentor"] and merged["is_available_for_mentorship"])
            stored = await self._store.upsert(Table.profiles.value, row, on="user_id")
        logger.info(f"Saved profile for {viewer} (mentor={stored.get('is_mentor')})")
        return Profile.model_validate(stored)

    # ------------------------------------------------------------------
    # mentorships
    # ------------------------------------------------------------------

    async def request_mentorship(
        self, viewer_id: Optional[str], mentor_id: str, message: Optional[str] = None
    ) -> Mentorship:
        """Send a mentorship request from the viewer to ``mentor_id``.

        Raises:
            ValidationError: Missing mentor or a request to oneself.
            TransitionRejected: Target is not an available mentor, or a
                pending request for the same pair already exists.
        """
        viewer = self._require_viewer(viewer_id, "request mentorship")
        if not mentor_id:
            raise ValidationError("A mentor is required", [{"field": "mentor_id", "message": "required"}])
        if mentor_id == viewer:
            raise ValidationError(
                "You cannot request mentorship from yourself", [{"field": "mentor_id", "message": "is the viewer"}]
            )

        async with self._submission(f"mentorship.request:{mentor_id}:{viewer}"):
            profiles = await self._store.query(Table.profiles.value, {"user_id": mentor_id}, limit=1)
            if not profiles or not (profiles[0].get("is_mentor") and profiles[0].get("is_available_for_mentorship")):
                logger.warning(f"{viewer} requested mentorship from unavailable mentor {mentor_id}")
                raise TransitionRejected(
                    EntityKind.mentorship.value, None, MentorshipStatus.pending.value, reason="not an available mentor"
                )
            pending = await self._store.count(
                Table.mentorships.value,
                {"mentor_id": mentor_id, "mentee_id": viewer, "status": MentorshipStatus.pending.value},
            )
            if pending:
                logger.warning(f"Duplicate mentorship request from {viewer} to {mentor_id}")
                raise TransitionRejected(
                    EntityKind.mentorship.value,
                    MentorshipStatus.pending.value,
                    MentorshipStatus.pending.value,
                    reason="a pending request already exists",
                )

            now = self._deps.clock()
            mentorship = Mentorship(
                mentor_id=mentor_id,
                mentee_id=viewer,
                message=message or self._mentorship_message,
                created_at=now,
                updated_at=now,
            )
            row = _row(mentorship)
            self._permit(viewer, "mentorship.request", row)
            stored = await self._store.insert(Table.mentorships.value, row)

        logger.info(f"Mentorship requested: {viewer} -> {mentor_id}")
        return Mentorship.model_validate(stored)

    async def accept_mentorship(self, viewer_id: Optional[str], mentorship_id: str) -> Mentorship:
        viewer = self._require_viewer(viewer_id, "answer mentorship requests")
        async with self._submission(f"mentorship.accept:{mentorship_id}:{viewer}"):
            row = await self._advance(viewer, EntityKind.mentorship, Table.mentorships, mentorship_id, "accept")
        return Mentorship.model_validate(row)

    async def decline_mentorship(self, viewer_id: Optional[str], mentorship_id: str) -> Mentorship:
        viewer = self._require_viewer(viewer_id, "answer mentorship requests")
        async with self._submission(f"mentorship.decline:{mentorship_id}:{viewer}"):
            row = await self._advance(viewer, EntityKind.mentorship, Table.mentorships, mentorship_id, "decline")
        return Mentorship.model_validate(row)

    # ------------------------------------------------------------------
    # referral requests
    # ------------------------------------------------------------------

    async def create_referral_request(
        self, viewer_id: Optional[str], form: Union[ReferralRequestForm, Mapping[str, Any]]
    ) -> ReferralRequest:
        """Post an open referral request on behalf of the viewer."""
        viewer = self._require_viewer(viewer_id, "request referrals")
        data = self._validate(ReferralRequestForm, form, "referral request")
        now = self._deps.clock()
        request = ReferralRequest(requester_id=viewer, created_at=now, updated_at=now, **data.model_dump())
        row = _row(request)
        self._permit(viewer, "referral_request.create", row)
        async with self._submission(f"referral_request.create:{viewer}"):
            stored = await self._store.insert(Table.referral_requests.value, row)
        logger.info(f"Referral request {stored['id']} posted by {viewer}")
        return ReferralRequest.model_validate(stored)

    async def claim_referral(self, viewer_id: Optional[str], request_id: str) -> ReferralRequest:
        """Offer a referral: assign the viewer as referee of an open request.

        Only one claimant can win. The write is filtered on ``status = open``
        and ``referee_id IS NULL``; a loser gets ``AlreadyClaimedError``.
        """
        viewer = self._require_viewer(viewer_id, "offer referrals")
        async with self._submission(f"referral_request.claim:{request_id}:{viewer}"):
            row = await self._advance(
                viewer, EntityKind.referral_request, Table.referral_requests, request_id, "claim"
            )
        return ReferralRequest.model_validate(row)

    async def decline_referral(self, viewer_id: Optional[str], request_id: str) -> ReferralRequest:
        """Close an open request without a referee (requester only)."""
        viewer = self._require_viewer(viewer_id, "manage referral requests")
        async with self._submission(f"referral_request.decline:{request_id}:{viewer}"):
            row = await self._advance(
                viewer, EntityKind.referral_request, Table.referral_requests, request_id, "decline"
            )
        return ReferralRequest.model_validate(row)

    async def complete_referral(self, viewer_id: Optional[str], request_id: str) -> ReferralRequest:
        viewer = self._require_viewer(viewer_id, "manage referral requests")
        async with self._submission(f"referral_request.complete:{request_id}:{viewer}"):
            row = await self._advance(
                viewer, EntityKind.referral_request, Table.referral_requests, request_id, "complete"
            )
        return ReferralRequest.model_validate(row)

    # ------------------------------------------------------------------
    # one-on-one sessions
    # ------------------------------------------------------------------

    async def schedule_session(
        self, viewer_id: Optional[str], form: Union[SessionForm, Mapping[str, Any]]
    ) -> OneOnOneSession:
        """Schedule a session with the viewer as mentor."""
        viewer = self._require_viewer(viewer_id, "schedule sessions")
        data = self._validate(SessionForm, form, "session")
        if data.mentee_id == viewer:
            raise ValidationError(
                "You cannot schedule a session with yourself", [{"field": "mentee_id", "message": "is the viewer"}]
            )
        now = self._deps.clock()
        session = OneOnOneSession(
            mentor_id=viewer,
            mentee_id=data.mentee_id,
            title=data.title,
            description=data.description,
            scheduled_at=_as_utc(data.scheduled_at),
            duration_minutes=data.duration_minutes or self._default_session_minutes,
            meeting_link=_plain(data.meeting_link),
            created_at=now,
            updated_at=now,
        )
        row = _row(session)
        self._permit(viewer, "session.schedule", row)
        async with self._submission(f"session.schedule:{viewer}"):
            stored = await self._store.insert(Table.one_on_one_sessions.value, row)
        logger.info(f"Session {stored['id']} scheduled by {viewer} with {data.mentee_id}")
        return OneOnOneSession.model_validate(stored)

    async def complete_session(self, viewer_id: Optional[str], session_id: str) -> OneOnOneSession:
        viewer = self._require_viewer(viewer_id, "update sessions")
        async with self._submission(f"session.complete:{session_id}:{viewer}"):
            row = await self._advance(viewer, EntityKind.session, Table.one_on_one_sessions, session_id, "complete")
        return OneOnOneSession.model_validate(row)

    async def cancel_session(self, viewer_id: Optional[str], session_id: str) -> OneOnOneSession:
        viewer = self._require_viewer(viewer_id, "update sessions")
        async with self._submission(f"session.cancel:{session_id}:{viewer}"):
            row = await self._advance(viewer, EntityKind.session, Table.one_on_one_sessions, session_id, "cancel")
        return OneOnOneSession.model_validate(row)

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------

    async def create_event(self, viewer_id: Optional[str], form: Union[EventForm, Mapping[str, Any]]) -> AlumniEvent:
        viewer = self._require_viewer(viewer_id, "create events")
        data = self._validate(EventForm, form, "event")
        now = self._deps.clock()
        event = AlumniEvent(
            created_by=viewer,
            created_at=now,
            updated_at=now,
            **{**_row(data), "event_date": _as_utc(data.event_date)},
        )
        row = _row(event)
        self._permit(viewer, "alumni_event.create", row)
        async with self._submission(f"alumni_event.create:{viewer}"):
            stored = await self._store.insert(Table.alumni_events.value, row)
        logger.info(f"Event {stored['id']} created by {viewer}")
        return AlumniEvent.model_validate(stored)

    async def _registration(self, event_id: str, user_id: str) -> Optional[Row]:
        rows = await self._store.query(Table.event_attendees.value, {"event_id": event_id, "user_id": user_id}, limit=1)
        return rows[0] if rows else None

    async def registration_state(self, viewer_id: str, event_id: str) -> RegistrationState:
        existing = await self._registration(event_id, viewer_id)
        return RegistrationState.present if existing else RegistrationState.absent

    async def register_for_event(self, viewer_id: Optional[str], event_id: str) -> EventAttendee:
        """Register the viewer for an event.

        Raises:
            RecordNotFoundError: Unknown event.
            TransitionRejected: Inactive event, already registered, or full.
        """
        viewer = self._require_viewer(viewer_id, "register for events")
        async with self._submission(f"event_attendee.register:{event_id}:{viewer}"):
            event = await self._load(Table.alumni_events, event_id)
            kind = EntityKind.event_attendee
            if event.get("is_active") is False:
                raise TransitionRejected(
                    kind.value, RegistrationState.absent.value, "register", reason="event is not active"
                )
            state = await self.registration_state(viewer, event_id)
            try:
                self._deps.transitions.resolve(kind, state, "register")
            except TransitionRejected as exc:
                logger.warning(f"{exc} for {viewer} on event {event_id}")
                raise

            attendee = EventAttendee(event_id=event_id, user_id=viewer, registered_at=self._deps.clock())
            row = _row(attendee)
            self._permit(viewer, f"{kind.value}.register", row)
            check_capacity(
                event.get("max_attendees"), await self._store.count(Table.event_attendees.value, {"event_id": event_id})
            )
            stored = await self._store.insert(Table.event_attendees.value, row)
        logger.info(f"{viewer} registered for event {event_id}")
        return EventAttendee.model_validate(stored)

    async def unregister_from_event(self, viewer_id: Optional[str], event_id: str) -> RegistrationState:
        """Remove the viewer's registration for an event.

        Raises:
            TransitionRejected: The viewer is not registered.
        """
        viewer = self._require_viewer(viewer_id, "unregister from events")
        kind = EntityKind.event_attendee
        async with self._submission(f"event_attendee.unregister:{event_id}:{viewer}"):
            existing = await self._registration(event_id, viewer)
            state = RegistrationState.present if existing else RegistrationState.absent
            try:
                transition = self._deps.transitions.resolve(kind, state, "unregister")
            except TransitionRejected as exc:
                logger.warning(f"{exc} for {viewer} on event {event_id}")
                raise
            self._permit(viewer, f"{kind.value}.unregister", existing)
            deleted = await self._store.delete(Table.event_attendees.value, {"event_id": event_id, "user_id": viewer})
            if deleted == 0:
                raise TransitionRejected(
                    kind.value, RegistrationState.absent.value, transition.target, reason="changed concurrently"
                )
        logger.info(f"{viewer} unregistered from event {event_id}")
        return RegistrationState(transition.target)

    # ------------------------------------------------------------------
    # jobs
    # ------------------------------------------------------------------

    async def post_job(self, viewer_id: Optional[str], form: Union[JobForm, Mapping[str, Any]]) -> JobOpportunity:
        viewer = self._require_viewer(viewer_id, "post job opportunities")
        data = self._validate(JobForm, form, "job opportunity")
        now = self._deps.clock()
        values: Dict[str, Any] = _row(data)
        if data.expires_at is not None:
            values["expires_at"] = _as_utc(data.expires_at)
        job = JobOpportunity(posted_by=viewer, created_at=now, updated_at=now, **values)
        row = _row(job)
        self._permit(viewer, "job_opportunity.post", row)
        async with self._submission(f"job_opportunity.post:{viewer}"):
            stored = await self._store.insert(Table.job_opportunities.value, row)
        logger.info(f"Job {stored['id']} posted by {viewer}")
        return JobOpportunity.model_validate(stored)
