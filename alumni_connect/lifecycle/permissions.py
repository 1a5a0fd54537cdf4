"""Permission checks at mutation boundaries.

The lifecycle service asks a ``PermissionCheck`` before every write, passing
the acting identity, an action name (``"<kind>.<action>"``) and the row the
action applies to (for creations, the row about to be inserted).

``RolePermissions`` is the default implementation. It derives rights from
the actor fields of the row: a mentorship is answered by its mentor, a
referral is claimed by anyone but its requester, a session is closed by
either participant. Deployments with their own policy layer inject a
different callable.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from ..core.errors import PermissionDeniedError

logger = logging.getLogger(__name__)

Rule = Callable[[str, Mapping[str, Any]], bool]


class PermissionCheck(Protocol):
    """Decide whether ``viewer_id`` may perform ``action`` on ``row``."""

    def __call__(self, viewer_id: str, action: str, row: Mapping[str, Any]) -> bool: ...


def _is(field: str) -> Rule:
    return lambda viewer_id, row: row.get(field) == viewer_id


def _is_not(field: str) -> Rule:
    return lambda viewer_id, row: row.get(field) != viewer_id


def _is_any(*fields: str) -> Rule:
    return lambda viewer_id, row: any(row.get(field) == viewer_id for field in fields)


DEFAULT_RULES: Dict[str, Rule] = {
    "profile.save": _is("user_id"),
    "mentorship.request": _is("mentee_id"),
    "mentorship.accept": _is("mentor_id"),
    "mentorship.decline": _is("mentor_id"),
    "referral_request.create": _is("requester_id"),
    "referral_request.claim": _is_not("requester_id"),
    "referral_request.decline": _is("requester_id"),
    "referral_request.complete": _is_any("requester_id", "referee_id"),
    "session.schedule": lambda viewer_id, row: row.get("mentor_id") == viewer_id != row.get("mentee_id"),
    "session.complete": _is_any("mentor_id", "mentee_id"),
    "session.cancel": _is_any("mentor_id", "mentee_id"),
    "alumni_event.create": _is("created_by"),
    "event_attendee.register": _is("user_id"),
    "event_attendee.unregister": _is("user_id"),
    "job_opportunity.post": _is("posted_by"),
}


class RolePermissions:
    """Role-based permission check; unknown actions are denied."""

    def __init__(self, rules: Optional[Mapping[str, Rule]] = None) -> None:
        self._rules: Dict[str, Rule] = dict(DEFAULT_RULES)
        if rules:
            self._rules.update(rules)

    def __call__(self, viewer_id: str, action: str, row: Mapping[str, Any]) -> bool:
        rule = self._rules.get(action)
        if rule is None:
            return False
        return bool(rule(viewer_id, row))


def require_permission(check: PermissionCheck, viewer_id: str, action: str, row: Mapping[str, Any]) -> None:
    """Raise ``PermissionDeniedError`` unless ``check`` allows the action."""
    if not check(viewer_id, action, row):
        logger.warning(f"Permission denied: user={viewer_id} action={action} row={row.get('id')}")
        raise PermissionDeniedError(viewer_id, action)
