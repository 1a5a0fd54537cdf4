"""Record store client.

``RecordStore`` is the protocol the lifecycle service, the view sources and
the live refresh coordinator depend on; ``SqlRecordStore`` is the SQLModel
implementation and ``ChangeHub`` its notification fan-out.
"""

from .interfaces import (
    ChangeCallback,
    ChangeNotification,
    Order,
    RecordStore,
    Row,
    RowFilter,
    SubscriptionHandle,
)
from .notifications import ChangeHub
from .sql import SqlRecordStore

__all__ = [
    "ChangeCallback",
    "ChangeHub",
    "ChangeNotification",
    "Order",
    "RecordStore",
    "Row",
    "RowFilter",
    "SqlRecordStore",
    "SubscriptionHandle",
]
