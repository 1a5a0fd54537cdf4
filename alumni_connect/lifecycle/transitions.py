"""Entity state machine.

Every entity kind with a lifecycle is described by a set of ``Transition``
edges. The table answers two questions for a caller holding a row:

- which next statuses are legal from the current one, and
- which fields the chosen edge must write together with the status.

Edges
-----

============== ================================ ==========================
Kind           Edge (action)                    Side-effect fields
============== ================================ ==========================
mentorship     pending -> accepted (accept)     status
mentorship     pending -> declined (decline)    status
referral       open -> accepted (claim)         status, referee_id
referral       open -> declined (decline)       status
referral       accepted -> completed (complete) status
session        scheduled -> completed           status
session        scheduled -> cancelled           status
event_attendee absent -> present (register)     row insert
event_attendee present -> absent (unregister)   row delete
============== ================================ ==========================

A request that matches no edge raises ``TransitionRejected``. The table is
pure data; writing the change is the lifecycle service's job, which uses
``Transition.precondition`` as the filter of a conditional update.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from ..core.errors import TransitionRejected
from ..core.models.domain.enums import (
    EntityKind,
    MentorshipStatus,
    ReferralStatus,
    RegistrationState,
    SessionStatus,
)
from ..store.interfaces import RowFilter


@dataclass(frozen=True)
class Transition:
    """One legal edge of an entity lifecycle."""

    kind: EntityKind
    action: str
    source: str
    target: str
    # Field set to the acting user in the same write as the status.
    assigns: Optional[str] = None
    # Fields that must still be NULL for the edge to apply.
    requires_null: Tuple[str, ...] = ()

    @property
    def side_effect_fields(self) -> Tuple[str, ...]:
        if self.kind == EntityKind.event_attendee:
            return ()
        return ("status",) + ((self.assigns,) if self.assigns else ())

    def precondition(self, record_id: str) -> RowFilter:
        """Filter under which the write may apply: same row, unchanged source state."""
        expected: Dict[str, Any] = {"id": record_id, "status": self.source}
        expected.update({name: None for name in self.requires_null})
        return RowFilter(all_of=expected)

    def patch(self, actor_id: str, now: datetime) -> Dict[str, Any]:
        """Fields written by this edge."""
        values: Dict[str, Any] = {"status": self.target, "updated_at": now}
        if self.assigns:
            values[self.assigns] = actor_id
        return values


_STATES: Dict[EntityKind, FrozenSet[str]] = {
    EntityKind.mentorship: frozenset(s.value for s in MentorshipStatus),
    EntityKind.referral_request: frozenset(s.value for s in ReferralStatus),
    EntityKind.session: frozenset(s.value for s in SessionStatus),
    EntityKind.event_attendee: frozenset(s.value for s in RegistrationState),
}


DEFAULT_TRANSITIONS: Tuple[Transition, ...] = (
    Transition(EntityKind.mentorship, "accept", MentorshipStatus.pending.value, MentorshipStatus.accepted.value),
    Transition(EntityKind.mentorship, "decline", MentorshipStatus.pending.value, MentorshipStatus.declined.value),
    Transition(
        EntityKind.referral_request,
        "claim",
        ReferralStatus.open.value,
        ReferralStatus.accepted.value,
        assigns="referee_id",
        requires_null=("referee_id",),
    ),
    Transition(EntityKind.referral_request, "decline", ReferralStatus.open.value, ReferralStatus.declined.value),
    Transition(
        EntityKind.referral_request, "complete", ReferralStatus.accepted.value, ReferralStatus.completed.value
    ),
    Transition(EntityKind.session, "complete", SessionStatus.scheduled.value, SessionStatus.completed.value),
    Transition(EntityKind.session, "cancel", SessionStatus.scheduled.value, SessionStatus.cancelled.value),
    Transition(
        EntityKind.event_attendee, "register", RegistrationState.absent.value, RegistrationState.present.value
    ),
    Transition(
        EntityKind.event_attendee, "unregister", RegistrationState.present.value, RegistrationState.absent.value
    ),
)


class TransitionTable:
    """Lookup structure over a set of transitions."""

    def __init__(self, transitions: Iterable[Transition] = DEFAULT_TRANSITIONS) -> None:
        self._edges: Dict[Tuple[EntityKind, str, str], Transition] = {}
        for transition in transitions:
            self._edges[(transition.kind, transition.source, transition.action)] = transition

    @staticmethod
    def _status(value: Any) -> str:
        return value.value if hasattr(value, "value") else str(value)

    def _outgoing(self, kind: EntityKind, current: str) -> Tuple[Transition, ...]:
        return tuple(t for (k, source, _), t in self._edges.items() if k == kind and source == current)

    def legal_targets(self, kind: EntityKind, current: Any) -> FrozenSet[str]:
        """Statuses reachable in one step from ``current``."""
        return frozenset(t.target for t in self._outgoing(kind, self._status(current)))

    def legal_actions(self, kind: EntityKind, current: Any) -> FrozenSet[str]:
        return frozenset(t.action for t in self._outgoing(kind, self._status(current)))

    def is_terminal(self, kind: EntityKind, current: Any) -> bool:
        return not self._outgoing(kind, self._status(current))

    def resolve(self, kind: EntityKind, current: Any, action: str) -> Transition:
        """Return the edge for ``action`` from ``current``.

        Raises:
            TransitionRejected: If ``current`` is not a known state or no edge matches.
        """
        status = self._status(current)
        if status not in _STATES[kind]:
            raise TransitionRejected(kind.value, status, action, reason="unknown state")
        transition = self._edges.get((kind, status, action))
        if transition is None:
            reason = "terminal state" if self.is_terminal(kind, status) else None
            raise TransitionRejected(kind.value, status, action, reason=reason)
        return transition

    def resolve_target(self, kind: EntityKind, current: Any, target: Any) -> Transition:
        """Return the edge from ``current`` to ``target``.

        Raises:
            TransitionRejected: If no edge connects the two states.
        """
        status, wanted = self._status(current), self._status(target)
        for transition in self._outgoing(kind, status):
            if transition.target == wanted:
                return transition
        raise TransitionRejected(kind.value, status, wanted)


def check_capacity(max_attendees: Optional[int], attendee_count: int) -> None:
    """Reject a registration that would exceed ``max_attendees``.

    Raises:
        TransitionRejected: If the event is already full.
    """
    if max_attendees is not None and attendee_count >= max_attendees:
        raise TransitionRejected(
            EntityKind.event_attendee.value,
            RegistrationState.absent.value,
            RegistrationState.present.value,
            reason=f"event is full ({attendee_count}/{max_attendees})",
        )


default_table = TransitionTable()
