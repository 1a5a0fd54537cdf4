"""Record store protocol and the value types it exchanges.

The store is the only collaborator the core talks to for persistence. It
works on plain row dictionaries (the store's native row shape), supports
equality filters with an optional OR group, and emits change notifications
to subscribers after each committed write.

``RowFilter`` serves three purposes:

- the WHERE clause of ``query``,
- the precondition of ``update``/``delete`` (a conditional write is an update
  whose filter includes the expected current values),
- the row scope of a subscription, evaluated in memory with ``matches``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

from ..core.models.domain.enums import ChangeType

Row = Dict[str, Any]


@dataclass(frozen=True)
class RowFilter:
    """Equality filter over row fields.

    ``all_of`` fields must all match; when ``any_of`` is non-empty at least one
    of its fields must match as well. A ``None`` value matches a NULL column.
    """

    all_of: Mapping[str, Any] = field(default_factory=dict)
    any_of: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: Union["RowFilter", Mapping[str, Any], None]) -> "RowFilter":
        if value is None:
            return cls()
        if isinstance(value, RowFilter):
            return value
        return cls(all_of=dict(value))

    @classmethod
    def participant(cls, viewer_id: str, *fields: str) -> "RowFilter":
        """Rows where any of ``fields`` equals ``viewer_id``."""
        return cls(any_of={name: viewer_id for name in fields})

    def matches(self, row: Mapping[str, Any]) -> bool:
        if any(row.get(key) != value for key, value in self.all_of.items()):
            return False
        if self.any_of and not any(row.get(key) == value for key, value in self.any_of.items()):
            return False
        return True

    def fields(self) -> List[str]:
        return [*self.all_of.keys(), *self.any_of.keys()]


@dataclass(frozen=True)
class Order:
    """Sort order for a query."""

    field: str
    ascending: bool = True


@dataclass(frozen=True)
class ChangeNotification:
    """A committed change to one row of one table."""

    table: str
    change_type: ChangeType
    row: Row


ChangeCallback = Callable[[ChangeNotification], None]


@dataclass(frozen=True)
class SubscriptionHandle:
    """Opaque token returned by ``subscribe`` and consumed by ``unsubscribe``."""

    id: str
    table: str


Filters = Union[RowFilter, Mapping[str, Any], None]


@runtime_checkable
class RecordStore(Protocol):
    """CRUD, filtered query and change subscription over named tables."""

    async def query(
        self,
        table: str,
        filters: Filters = None,
        order: Optional[Order] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[Row]: ...

    async def get(self, table: str, record_id: str) -> Optional[Row]: ...

    async def count(self, table: str, filters: Filters = None) -> int: ...

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row: ...

    async def upsert(self, table: str, row: Mapping[str, Any], *, on: str) -> Row: ...

    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> int: ...

    async def delete(self, table: str, filters: Filters) -> int: ...

    def subscribe(self, table: str, row_filter: Filters, on_change: ChangeCallback) -> SubscriptionHandle: ...

    def unsubscribe(self, handle: SubscriptionHandle) -> None: ...
