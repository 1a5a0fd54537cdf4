"""In-process change notification hub.

``ChangeHub`` keeps the subscriptions of one record store and fans committed
changes out to them. Callbacks run synchronously in the publishing task; a
callback that needs to do I/O schedules its own task.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import count
from typing import Dict, List

from ..core.errors import SubscriptionError
from .interfaces import ChangeCallback, ChangeNotification, Filters, RowFilter, SubscriptionHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Subscription:
    handle: SubscriptionHandle
    row_filter: RowFilter
    callback: ChangeCallback


class ChangeHub:
    """Registry of table subscriptions."""

    def __init__(self) -> None:
        self._subscriptions: Dict[str, _Subscription] = {}
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, table: str, row_filter: Filters, on_change: ChangeCallback) -> SubscriptionHandle:
        handle = SubscriptionHandle(id=f"sub-{next(self._ids)}", table=table)
        self._subscriptions[handle.id] = _Subscription(handle, RowFilter.coerce(row_filter), on_change)
        logger.debug(f"Subscribed {handle.id} to '{table}'")
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """Release a subscription.

        Raises:
            SubscriptionError: If the handle was already released or never issued.
        """
        if self._subscriptions.pop(handle.id, None) is None:
            raise SubscriptionError(f"Subscription '{handle.id}' is not active")
        logger.debug(f"Released {handle.id} on '{handle.table}'")

    def publish(self, notification: ChangeNotification) -> int:
        """Deliver a notification to every matching subscriber.

        A callback that raises is logged and skipped; the write that produced
        the notification is already committed, and the remaining subscribers
        are still notified.

        Returns:
            Number of callbacks invoked.
        """
        targets: List[_Subscription] = [
            sub
            for sub in self._subscriptions.values()
            if sub.handle.table == notification.table and sub.row_filter.matches(notification.row)
        ]
        for sub in targets:
            try:
                sub.callback(notification)
            except Exception:
                logger.exception(f"Subscriber {sub.handle.id} on '{notification.table}' failed")
        return len(targets)
