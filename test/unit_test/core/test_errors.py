"""Unit tests for the error hierarchy."""

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from alumni_connect.core.errors import (
    AlreadyClaimedError,
    AlumniConnectError,
    AuthRequiredError,
    DuplicateSubmissionError,
    PermissionDeniedError,
    RecordNotFoundError,
    StoreError,
    SubscriptionError,
    TransitionRejected,
    ValidationError,
)


class _Sample(BaseModel):
    company: str = Field(min_length=1)
    position: str = Field(min_length=1)


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad"),
            AuthRequiredError("post jobs"),
            StoreError("fetch failed", table="profiles"),
            TransitionRejected("mentorship", "accepted", "declined"),
            AlreadyClaimedError("r1", "accepted"),
            PermissionDeniedError("u1", "mentorship.accept"),
            RecordNotFoundError("mentorships", "m1"),
            DuplicateSubmissionError("k"),
            SubscriptionError("gone"),
        ],
    )
    def test_every_error_is_an_alumni_connect_error(self, error):
        assert isinstance(error, AlumniConnectError)

    def test_already_claimed_is_a_transition_rejection(self):
        error = AlreadyClaimedError("r1", "accepted")

        assert isinstance(error, TransitionRejected)
        assert error.kind == "referral_request"
        assert error.current == "accepted"
        assert error.requested == "accepted"
        assert error.request_id == "r1"


class TestMessages:
    def test_auth_required_message(self):
        assert str(AuthRequiredError("request referrals")) == "Please sign in to request referrals."

    def test_store_error_keeps_detail(self):
        error = StoreError("insert failed", table="event_attendees", detail="UNIQUE constraint failed")

        assert str(error) == "insert failed on 'event_attendees': UNIQUE constraint failed"
        assert error.operation == "insert failed"
        assert error.detail == "UNIQUE constraint failed"

    def test_store_error_without_detail(self):
        assert str(StoreError("fetch failed", table="profiles")) == "fetch failed on 'profiles'"

    def test_transition_rejected_message(self):
        error = TransitionRejected("session", "completed", "cancel", reason="terminal state")

        assert str(error) == "Invalid transition for session: completed -> cancel (terminal state)"


class TestValidationErrorFromPydantic:
    def test_collects_field_errors(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _Sample(company="", position="")

        error = ValidationError.from_pydantic(exc_info.value, "referral request")

        assert [e["field"] for e in error.errors] == ["company", "position"]
        assert str(error) == "Invalid referral request: check company, position"
