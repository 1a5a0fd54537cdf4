"""Unit tests for LifecycleService with a mocked record store.

These tests pin the order of the shared steps (identity, validation,
transition, permission, write) and how a lost conditional write is reported.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from alumni_connect.core.errors import (
    AlreadyClaimedError,
    AuthRequiredError,
    DuplicateSubmissionError,
    PermissionDeniedError,
    RecordNotFoundError,
    StoreError,
    TransitionRejected,
    ValidationError,
)
from alumni_connect.lifecycle import LifecycleDeps, LifecycleService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def referral_row(**overrides) -> dict:
    row = {
        "id": "r1",
        "requester_id": "requester",
        "referee_id": None,
        "company": "Acme",
        "position": "Engineer",
        "message": "Please refer me",
        "status": "open",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def mentorship_row(**overrides) -> dict:
    row = {
        "id": "m1",
        "mentor_id": "mentor",
        "mentee_id": "mentee",
        "message": "hi",
        "status": "pending",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


class TestLifecycleServiceUnit:
    """Tests for LifecycleService against a mocked store."""

    @pytest.fixture
    def mock_store(self):
        """Mock record store."""
        return AsyncMock()

    @pytest.fixture
    def service(self, mock_store):
        return LifecycleService(LifecycleDeps(store=mock_store, clock=lambda: NOW))

    async def test_anonymous_viewer_never_reaches_store(self, service, mock_store):
        with pytest.raises(AuthRequiredError, match="Please sign in to request referrals."):
            await service.create_referral_request(
                None, {"company": "Acme", "position": "Engineer", "message": "hi"}
            )

        mock_store.insert.assert_not_awaited()

    async def test_invalid_form_never_reaches_store(self, service, mock_store):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_referral_request("requester", {"company": "  ", "position": "Engineer"})

        fields = {error["field"] for error in exc_info.value.errors}
        assert fields == {"company", "message"}
        mock_store.insert.assert_not_awaited()

    async def test_store_error_propagates_unchanged(self, service, mock_store):
        failure = StoreError("insert failed", table="referral_requests", detail="connection reset")
        mock_store.insert.side_effect = failure

        with pytest.raises(StoreError) as exc_info:
            await service.create_referral_request(
                "requester", {"company": "Acme", "position": "Engineer", "message": "hi"}
            )

        assert exc_info.value is failure
        mock_store.insert.assert_awaited_once()

    async def test_create_referral_request_row(self, service, mock_store):
        mock_store.insert.side_effect = lambda table, row: row

        created = await service.create_referral_request(
            "requester", {"company": " Acme ", "position": "Engineer", "message": "hi"}
        )

        table, row = mock_store.insert.await_args.args
        assert table == "referral_requests"
        assert row["company"] == "Acme"
        assert row["status"] == "open"
        assert row["referee_id"] is None
        assert row["requester_id"] == "requester"
        assert created.created_at == NOW

    async def test_claim_writes_conditionally(self, service, mock_store):
        mock_store.get.side_effect = [referral_row(), referral_row(status="accepted", referee_id="offerer")]
        mock_store.update.return_value = 1

        claimed = await service.claim_referral("offerer", "r1")

        table, precondition, patch = mock_store.update.await_args.args
        assert table == "referral_requests"
        assert precondition.all_of == {"id": "r1", "status": "open", "referee_id": None}
        assert patch == {"status": "accepted", "referee_id": "offerer", "updated_at": NOW}
        assert claimed.referee_id == "offerer"

    async def test_lost_claim_is_already_claimed(self, service, mock_store):
        mock_store.get.side_effect = [referral_row(), referral_row(status="accepted", referee_id="rival")]
        mock_store.update.return_value = 0

        with pytest.raises(AlreadyClaimedError) as exc_info:
            await service.claim_referral("offerer", "r1")

        assert exc_info.value.current == "accepted"

    async def test_lost_status_change_is_transition_rejected(self, service, mock_store):
        mock_store.get.side_effect = [mentorship_row(), mentorship_row(status="declined")]
        mock_store.update.return_value = 0

        with pytest.raises(TransitionRejected) as exc_info:
            await service.accept_mentorship("mentor", "m1")

        assert not isinstance(exc_info.value, AlreadyClaimedError)
        assert exc_info.value.reason == "changed concurrently"

    async def test_row_removed_during_transition(self, service, mock_store):
        mock_store.get.side_effect = [mentorship_row(), None]
        mock_store.update.return_value = 0

        with pytest.raises(RecordNotFoundError):
            await service.accept_mentorship("mentor", "m1")

    async def test_missing_row(self, service, mock_store):
        mock_store.get.return_value = None

        with pytest.raises(RecordNotFoundError):
            await service.cancel_session("mentor", "s-missing")

        mock_store.update.assert_not_awaited()

    async def test_illegal_transition_never_writes(self, service, mock_store):
        mock_store.get.return_value = mentorship_row(status="accepted")

        with pytest.raises(TransitionRejected):
            await service.decline_mentorship("mentor", "m1")

        mock_store.update.assert_not_awaited()

    async def test_permission_checked_before_write(self, service, mock_store):
        mock_store.get.return_value = mentorship_row()

        with pytest.raises(PermissionDeniedError):
            await service.accept_mentorship("mentee", "m1")

        mock_store.update.assert_not_awaited()

    async def test_injected_permission_check(self, mock_store):
        check = MagicMock(return_value=False)
        service = LifecycleService(LifecycleDeps(store=mock_store, permissions=check, clock=lambda: NOW))

        with pytest.raises(PermissionDeniedError):
            await service.post_job(
                "poster", {"title": "Engineer", "description": "Build things", "company": "Acme"}
            )

        assert check.call_args.args[:2] == ("poster", "job_opportunity.post")
        mock_store.insert.assert_not_awaited()

    async def test_duplicate_submission_rejected(self, service, mock_store):
        async with service.guard.submitting("referral_request.claim:r1:offerer"):
            with pytest.raises(DuplicateSubmissionError):
                await service.claim_referral("offerer", "r1")

        mock_store.get.assert_not_awaited()

    async def test_unregister_when_absent(self, service, mock_store):
        mock_store.query.return_value = []

        with pytest.raises(TransitionRejected):
            await service.unregister_from_event("user", "e1")

        mock_store.delete.assert_not_awaited()

    async def test_request_mentorship_from_self(self, service, mock_store):
        with pytest.raises(ValidationError):
            await service.request_mentorship("mentor", "mentor")

        mock_store.query.assert_not_awaited()

    async def test_defaults_from_constructor(self, mock_store):
        service = LifecycleService(
            LifecycleDeps(store=mock_store, clock=lambda: NOW),
            mentorship_message="Hello mentor",
            default_session_minutes=30,
        )
        mock_store.query.return_value = [{"user_id": "mentor", "is_mentor": True, "is_available_for_mentorship": True}]
        mock_store.count.return_value = 0
        mock_store.insert.side_effect = lambda table, row: row

        mentorship = await service.request_mentorship("mentee", "mentor")
        session = await service.schedule_session(
            "mentor", {"mentee_id": "mentee", "title": "Intro", "scheduled_at": NOW}
        )

        assert mentorship.message == "Hello mentor"
        assert session.duration_minutes == 30
