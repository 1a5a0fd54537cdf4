"""Live refresh coordinator.

Keeps one list view in sync with its table. The view is fetched in full on
mount; after that every change notification on the subscribed table marks
the view stale and schedules a full re-fetch of the same query. Payloads are
never merged into the rows: the list is always re-derived from the store.

Refresh model
-------------

Notifications only raise a ``dirty`` flag. A single refresh task drains it:
each pass clears the flag, fetches, and loops again if the flag was raised
meanwhile. However many notifications arrive while a fetch is pending or
running, they cost one follow-up fetch.

Local edits
-----------

A view can stage patches on rows it is editing (``stage_edit``). ``view``
returns the fetched rows with those patches overlaid; a refresh replaces
``rows`` but leaves staged patches alone until the view discards them.

Teardown
--------

``unmount`` cancels the in-flight fetch without applying its result and
releases the subscription exactly once. Later notifications and repeated
``unmount`` calls are no-ops.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from ..core.errors import StoreError
from ..core.models.domain.enums import ViewState
from ..store.interfaces import ChangeNotification, Filters, RecordStore, Row, SubscriptionHandle

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[List[Row]]]
UpdateListener = Callable[["LiveRefreshCoordinator"], None]


class LiveRefreshCoordinator:
    """Maintain a live, re-fetched view of one table."""

    def __init__(
        self,
        store: RecordStore,
        table: str,
        fetch: Fetch,
        row_filter: Filters = None,
        on_update: Optional[UpdateListener] = None,
    ) -> None:
        self._store = store
        self._table = table
        self._fetch = fetch
        self._row_filter = row_filter
        self._on_update = on_update

        self._handle: Optional[SubscriptionHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._dirty = False
        self._closed = False
        self._drafts: Dict[str, Dict[str, Any]] = {}

        self.state = ViewState.idle
        self.stale = False
        self.rows: Optional[List[Row]] = None
        self.error: Optional[StoreError] = None
        self.fetch_count = 0

    @property
    def table(self) -> str:
        return self._table

    @property
    def is_refreshing(self) -> bool:
        return self._task is not None

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Subscribe and run the initial fetch.

        A failed initial fetch leaves the subscription in place: the next
        change notification retries the fetch, so the view can recover
        without remounting. Callers still own the subscription and must call
        ``unmount()`` whether or not ``mount()`` raised.

        Raises:
            StoreError: If the initial fetch fails; the view is left in ``error``.
            RuntimeError: If the coordinator was already mounted or unmounted.
        """
        if self._handle is not None or self._closed:
            raise RuntimeError(f"Coordinator for '{self._table}' cannot be mounted twice")

        self._handle = self._store.subscribe(self._table, self._row_filter, self._on_change)
        logger.debug(f"Mounted live view on '{self._table}' ({self._handle.id})")
        self._dirty = True
        self._task = asyncio.get_running_loop().create_task(self._refresh_loop())
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._closed:
                raise
            return
        if self.state == ViewState.error and self.error is not None:
            raise self.error

    async def unmount(self) -> None:
        """Cancel the in-flight fetch and release the subscription."""
        if self._closed:
            return
        self._closed = True
        self.state = ViewState.closed

        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        if self._handle is not None:
            handle, self._handle = self._handle, None
            self._store.unsubscribe(handle)
            logger.debug(f"Unmounted live view on '{self._table}' ({handle.id})")

    async def wait_idle(self) -> None:
        """Wait until no refresh is pending or running."""
        while self._task is not None:
            task = self._task
            await asyncio.gather(task, return_exceptions=True)
            if self._task is task:
                break

    # ------------------------------------------------------------------
    # refresh
    # ------------------------------------------------------------------

    def _on_change(self, notification: ChangeNotification) -> None:
        if self._closed:
            return
        logger.debug(f"{notification.change_type.value} on '{self._table}', marking view stale")
        self.stale = True
        self._dirty = True
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._refresh_loop())

    async def _refresh_loop(self) -> None:
        try:
            while self._dirty and not self._closed:
                self._dirty = False
                if self.rows is None:
                    self.state = ViewState.loading
                self.fetch_count += 1
                rows = await self._fetch()
                if self._closed:
                    return
                self.rows = list(rows)
                self.error = None
                self.state = ViewState.ready
                self.stale = self._dirty
                self._notify()
        except StoreError as exc:
            if self._closed:
                return
            logger.error(f"Refresh of '{self._table}' failed: {exc}")
            self.error = exc
            self.state = ViewState.error
            self._notify()
        finally:
            if not self._closed:
                self._task = None

    def _notify(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self)
        except Exception:
            logger.exception(f"Update listener for '{self._table}' failed")

    # ------------------------------------------------------------------
    # local edits
    # ------------------------------------------------------------------

    def stage_edit(self, row_id: str, patch: Mapping[str, Any]) -> None:
        """Overlay ``patch`` on row ``row_id`` until it is discarded."""
        self._drafts.setdefault(row_id, {}).update(patch)

    def discard_edit(self, row_id: str) -> None:
        self._drafts.pop(row_id, None)

    @property
    def drafts(self) -> Dict[str, Dict[str, Any]]:
        return {row_id: dict(patch) for row_id, patch in self._drafts.items()}

    @property
    def view(self) -> Optional[List[Row]]:
        """Fetched rows with staged edits overlaid; ``None`` before the first fetch."""
        if self.rows is None:
            return None
        return [{**row, **self._drafts.get(row.get("id"), {})} for row in self.rows]
