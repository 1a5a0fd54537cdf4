"""Error types for Alumni Connect.

Defines a small hierarchy of exceptions raised by the record store, the
lifecycle service and the live refresh coordinator. Every error is scoped to
the single operation that raised it; none of them is retried automatically.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AlumniConnectError(Exception):
    """Base error for all Alumni Connect exceptions."""


class ValidationError(AlumniConnectError):
    """Raised when input is missing or malformed before the store is contacted."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: Any, form: str) -> "ValidationError":
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]} for err in exc.errors()
        ]
        fields = ", ".join(err["field"] for err in errors) or "input"
        return cls(f"Invalid {form}: check {fields}", errors)


class AuthRequiredError(AlumniConnectError):
    """Raised when an operation needs an acting identity and none was given."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Please sign in to {action}.")
        self.action = action


class StoreError(AlumniConnectError):
    """Raised for any failure reported by the record store.

    The original store message is kept in ``detail`` for display.
    """

    def __init__(self, operation: str, *, table: str, detail: str | None = None) -> None:
        message = f"{operation} on '{table}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.table = table
        self.detail = detail


class TransitionRejected(AlumniConnectError):
    """Raised when a requested state change is not a legal edge from the current state."""

    def __init__(self, kind: str, current: str | None, requested: str, reason: str | None = None) -> None:
        message = f"Invalid transition for {kind}: {current} -> {requested}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.kind = kind
        self.current = current
        self.requested = requested
        self.reason = reason


class AlreadyClaimedError(TransitionRejected):
    """Raised when a referral request was claimed by someone else first."""

    def __init__(self, request_id: str, current: str | None) -> None:
        super().__init__("referral_request", current, "accepted", reason=f"request '{request_id}' already claimed")
        self.request_id = request_id


class PermissionDeniedError(AlumniConnectError):
    """Raised when the permission check refuses an action for the acting identity."""

    def __init__(self, viewer_id: str, action: str) -> None:
        super().__init__(f"User '{viewer_id}' is not permitted to {action}")
        self.viewer_id = viewer_id
        self.action = action


class RecordNotFoundError(AlumniConnectError):
    """Raised when a referenced row does not exist."""

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(f"No row '{record_id}' in '{table}'")
        self.table = table
        self.record_id = record_id


class DuplicateSubmissionError(AlumniConnectError):
    """Raised when the same submission is triggered again while still in flight."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Submission already in progress: {key}")
        self.key = key


class SubscriptionError(AlumniConnectError):
    """Raised when a subscription handle is released twice or was never issued."""
