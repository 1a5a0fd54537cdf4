"""Unit tests for LiveRefreshCoordinator.

The store is a thin stand-in around a real ChangeHub so notifications are
delivered exactly as the SQL store delivers them; fetches are AsyncMocks.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from alumni_connect.core.errors import StoreError, SubscriptionError
from alumni_connect.core.models.domain.enums import ChangeType, ViewState
from alumni_connect.realtime import LiveRefreshCoordinator
from alumni_connect.store import ChangeHub, ChangeNotification, RowFilter

TABLE = "one_on_one_sessions"


class HubStore:
    """Subscription half of a record store backed by a ChangeHub."""

    def __init__(self):
        self.hub = ChangeHub()
        self.unsubscribe_calls = 0

    def subscribe(self, table, row_filter, on_change):
        return self.hub.subscribe(table, row_filter, on_change)

    def unsubscribe(self, handle):
        self.unsubscribe_calls += 1
        self.hub.unsubscribe(handle)


def notify(store: HubStore, **row) -> int:
    return store.hub.publish(ChangeNotification(table=TABLE, change_type=ChangeType.update, row=row))


class GatedFetch:
    """Fetch whose calls block until released, counting every call."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = 0
        self.gate = asyncio.Event()
        self.gate.set()
        self.started = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        self.started.set()
        await self.gate.wait()
        return list(self.rows)


@pytest.fixture
def hub_store():
    return HubStore()


class TestMount:
    async def test_mount_fetches_and_subscribes(self, hub_store):
        fetch = AsyncMock(return_value=[{"id": "s1"}])
        listener = MagicMock()
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch, on_update=listener)

        assert coordinator.rows is None
        assert coordinator.state == ViewState.idle

        await coordinator.mount()

        assert coordinator.state == ViewState.ready
        assert coordinator.rows == [{"id": "s1"}]
        assert coordinator.stale is False
        assert len(hub_store.hub) == 1
        fetch.assert_awaited_once()
        listener.assert_called_once_with(coordinator)

    async def test_loading_until_first_fetch(self, hub_store):
        fetch = GatedFetch([{"id": "s1"}])
        fetch.gate.clear()
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)

        mounting = asyncio.create_task(coordinator.mount())
        await fetch.started.wait()

        assert coordinator.state == ViewState.loading
        assert coordinator.rows is None
        assert coordinator.view is None

        fetch.gate.set()
        await mounting
        assert coordinator.rows == [{"id": "s1"}]

    async def test_mount_failure(self, hub_store):
        failure = StoreError("fetch failed", table=TABLE, detail="timeout")
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, AsyncMock(side_effect=failure))

        with pytest.raises(StoreError):
            await coordinator.mount()

        assert coordinator.state == ViewState.error
        assert coordinator.error is failure
        assert coordinator.rows is None

    async def test_mount_failure_recovers_on_next_change(self, hub_store):
        failure = StoreError("fetch failed", table=TABLE, detail="timeout")
        fetch = AsyncMock(side_effect=[failure, [{"id": "s1"}]])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)

        with pytest.raises(StoreError):
            await coordinator.mount()
        assert len(hub_store.hub) == 1

        notify(hub_store, id="s1")
        await coordinator.wait_idle()

        assert coordinator.state == ViewState.ready
        assert coordinator.error is None
        assert coordinator.rows == [{"id": "s1"}]

        await coordinator.unmount()
        assert len(hub_store.hub) == 0

    async def test_mount_twice(self, hub_store):
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, AsyncMock(return_value=[]))
        await coordinator.mount()

        with pytest.raises(RuntimeError):
            await coordinator.mount()


class TestRefresh:
    async def test_notification_triggers_full_refetch(self, hub_store):
        fetch = AsyncMock(side_effect=[[{"id": "s1"}], [{"id": "s1"}, {"id": "s2"}]])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()

        notify(hub_store, id="s2")
        assert coordinator.stale is True

        await coordinator.wait_idle()
        assert coordinator.rows == [{"id": "s1"}, {"id": "s2"}]
        assert coordinator.stale is False
        assert fetch.await_count == 2

    async def test_rapid_notifications_coalesce(self, hub_store):
        fetch = AsyncMock(return_value=[])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()

        for _ in range(3):
            notify(hub_store, id="s1")
        await coordinator.wait_idle()

        assert fetch.await_count == 2  # mount + one coalesced refresh

    async def test_notifications_during_running_fetch_cost_one_follow_up(self, hub_store):
        fetch = GatedFetch([])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()

        fetch.gate.clear()
        fetch.started.clear()
        notify(hub_store, id="s1")
        await fetch.started.wait()
        for _ in range(3):
            notify(hub_store, id="s1")
        fetch.gate.set()
        await coordinator.wait_idle()

        assert fetch.calls == 3  # mount, the running refresh, one follow-up
        assert coordinator.stale is False

    async def test_row_filter_scopes_notifications(self, hub_store):
        fetch = AsyncMock(return_value=[])
        coordinator = LiveRefreshCoordinator(
            hub_store, TABLE, fetch, row_filter=RowFilter.participant("v", "mentor_id", "mentee_id")
        )
        await coordinator.mount()

        assert notify(hub_store, mentor_id="x", mentee_id="y") == 0
        assert notify(hub_store, mentor_id="x", mentee_id="v") == 1
        await coordinator.wait_idle()

        assert fetch.await_count == 2

    async def test_refresh_failure_keeps_rows(self, hub_store):
        failure = StoreError("fetch failed", table=TABLE)
        fetch = AsyncMock(side_effect=[[{"id": "s1"}], failure])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()

        notify(hub_store, id="s1")
        await coordinator.wait_idle()

        assert coordinator.state == ViewState.error
        assert coordinator.error is failure
        assert coordinator.rows == [{"id": "s1"}]

    async def test_failing_listener_does_not_break_refresh(self, hub_store, caplog):
        fetch = AsyncMock(side_effect=[[{"id": "s1"}], [{"id": "s1"}, {"id": "s2"}], [{"id": "s3"}]])
        listener = MagicMock(side_effect=RuntimeError("render failed"))
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch, on_update=listener)
        await coordinator.mount()

        with caplog.at_level("ERROR", logger="alumni_connect.realtime.coordinator"):
            notify(hub_store, id="s2")
            await coordinator.wait_idle()

        assert coordinator.state == ViewState.ready
        assert coordinator.rows == [{"id": "s1"}, {"id": "s2"}]
        assert coordinator.is_refreshing is False
        assert "Update listener" in caplog.text

        notify(hub_store, id="s3")
        await coordinator.wait_idle()
        assert coordinator.rows == [{"id": "s3"}]
        assert listener.call_count == 3


class TestLocalEdits:
    async def test_staged_edits_survive_refresh(self, hub_store):
        fetch = AsyncMock(return_value=[{"id": "s1", "title": "Old"}, {"id": "s2", "title": "Other"}])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()

        coordinator.stage_edit("s1", {"title": "Draft"})
        notify(hub_store, id="s2")
        await coordinator.wait_idle()

        assert coordinator.view == [{"id": "s1", "title": "Draft"}, {"id": "s2", "title": "Other"}]
        assert coordinator.rows[0]["title"] == "Old"

        coordinator.discard_edit("s1")
        assert coordinator.view[0]["title"] == "Old"
        assert coordinator.drafts == {}


class TestUnmount:
    async def test_unmount_releases_subscription_once(self, hub_store):
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, AsyncMock(return_value=[]))
        await coordinator.mount()

        await coordinator.unmount()
        await coordinator.unmount()

        assert hub_store.unsubscribe_calls == 1
        assert len(hub_store.hub) == 0
        assert coordinator.state == ViewState.closed

    async def test_unmount_cancels_in_flight_fetch(self, hub_store):
        fetch = GatedFetch([{"id": "late"}])
        fetch.gate.clear()
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)

        mounting = asyncio.create_task(coordinator.mount())
        await fetch.started.wait()
        await coordinator.unmount()
        await mounting

        assert coordinator.rows is None
        assert coordinator.state == ViewState.closed
        assert hub_store.unsubscribe_calls == 1

    async def test_notifications_after_unmount_are_ignored(self, hub_store):
        fetch = AsyncMock(return_value=[])
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, fetch)
        await coordinator.mount()
        handle_callback = next(iter(hub_store.hub._subscriptions.values())).callback
        await coordinator.unmount()

        handle_callback(ChangeNotification(table=TABLE, change_type=ChangeType.delete, row={}))

        assert coordinator.is_refreshing is False
        assert fetch.await_count == 1

    async def test_releasing_the_handle_elsewhere_surfaces(self, hub_store):
        coordinator = LiveRefreshCoordinator(hub_store, TABLE, AsyncMock(return_value=[]))
        await coordinator.mount()
        handle = next(iter(hub_store.hub._subscriptions.values())).handle
        hub_store.hub.unsubscribe(handle)

        with pytest.raises(SubscriptionError):
            await coordinator.unmount()
