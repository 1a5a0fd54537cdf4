"""
SQL-backed record store.

``SqlRecordStore`` implements the ``RecordStore`` protocol on top of the
SQLModel entities and an async SQLAlchemy session factory. Each call opens
its own short-lived session and commits before returning, so every write is
a single transaction.

Updates and deletes are issued as one ``UPDATE``/``DELETE ... WHERE ...
RETURNING`` statement. The filter is evaluated by the database inside that
statement, which makes "update where status = 'open'" a real conditional
write: when two callers race, exactly one of them sees a non-zero count.

After commit, one ``ChangeNotification`` per affected row is published on
the store's ``ChangeHub``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Type

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlalchemy import update as sa_update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from ..core.database.base import Base
from ..core.database.entities import TABLES
from ..core.database.session import get_session_maker
from ..core.errors import StoreError
from ..core.models.domain.enums import ChangeType
from .interfaces import (
    ChangeCallback,
    ChangeNotification,
    Filters,
    Order,
    Row,
    RowFilter,
    SubscriptionHandle,
)
from .notifications import ChangeHub

logger = logging.getLogger(__name__)


class SqlRecordStore:
    """Record store over SQL tables registered in ``TABLES``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], hub: Optional[ChangeHub] = None) -> None:
        """Initialize the store.

        Args:
            session_factory: Async session factory used for every call
            hub: Notification hub; a private one is created when omitted
        """
        self._session_factory = session_factory
        self.hub = hub or ChangeHub()

    @classmethod
    def from_settings(cls, hub: Optional[ChangeHub] = None) -> "SqlRecordStore":
        """Build a store on the process-wide session factory for ``settings.database_url``."""
        return cls(get_session_maker(), hub)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _model(table: str, operation: str) -> Type[Base]:
        model = TABLES.get(table)
        if model is None:
            raise StoreError(operation, table=table, detail="unknown table")
        return model

    @staticmethod
    def _column(model: Type[Base], table: str, name: str, operation: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise StoreError(operation, table=table, detail=f"unknown column '{name}'")
        return column

    def _where(self, model: Type[Base], table: str, row_filter: RowFilter, operation: str) -> list:
        def clause(name: str, value: Any):
            column = self._column(model, table, name, operation)
            return column.is_(None) if value is None else column == value

        clauses = [clause(name, value) for name, value in row_filter.all_of.items()]
        if row_filter.any_of:
            clauses.append(or_(*(clause(name, value) for name, value in row_filter.any_of.items())))
        return clauses

    def _publish(self, table: str, change_type: ChangeType, rows: List[Row]) -> None:
        for row in rows:
            self.hub.publish(ChangeNotification(table=table, change_type=change_type, row=row))

    @staticmethod
    def _to_row(entity: Base) -> Row:
        return entity.model_dump()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    async def query(
        self,
        table: str,
        filters: Filters = None,
        order: Optional[Order] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """Fetch the rows of ``table`` that match ``filters``.

        Args:
            table: Table name
            filters: Row filter or mapping of field equalities
            order: Optional sort order
            limit: Maximum number of rows

        Returns:
            Matching rows as dictionaries

        Raises:
            StoreError: ``"fetch failed"`` on any database failure
        """
        operation = "fetch failed"
        model = self._model(table, operation)
        stmt = select(model)
        clauses = self._where(model, table, RowFilter.coerce(filters), operation)
        if clauses:
            stmt = stmt.where(*clauses)
        if order is not None:
            column = self._column(model, table, order.field, operation)
            stmt = stmt.order_by(column.asc() if order.ascending else column.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                entities = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error(f"Query on '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc
        return [self._to_row(entity) for entity in entities]

    async def get(self, table: str, record_id: str) -> Optional[Row]:
        """Fetch one row by primary key, or ``None``."""
        rows = await self.query(table, {"id": record_id}, limit=1)
        return rows[0] if rows else None

    async def count(self, table: str, filters: Filters = None) -> int:
        """Count the rows of ``table`` that match ``filters``."""
        operation = "fetch failed"
        model = self._model(table, operation)
        stmt = select(func.count()).select_from(model.__table__)
        clauses = self._where(model, table, RowFilter.coerce(filters), operation)
        if clauses:
            stmt = stmt.where(*clauses)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except SQLAlchemyError as exc:
            logger.error(f"Count on '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        """Insert one row and return it as stored.

        Raises:
            StoreError: ``"insert failed"`` with the database or validation message
        """
        operation = "insert failed"
        model = self._model(table, operation)
        try:
            entity = model.model_validate(dict(row))
            async with self._session_factory() as session:
                session.add(entity)
                await session.commit()
                await session.refresh(entity)
        except (SQLAlchemyError, PydanticValidationError) as exc:
            logger.error(f"Insert into '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc

        stored = self._to_row(entity)
        logger.debug(f"Inserted row '{stored.get('id')}' into '{table}'")
        self._publish(table, ChangeType.insert, [stored])
        return stored

    async def upsert(self, table: str, row: Mapping[str, Any], *, on: str) -> Row:
        """Insert ``row`` or update the existing row whose ``on`` field matches.

        Args:
            table: Table name
            row: Column values to write; columns it omits keep their stored values
            on: Conflict key column (e.g. ``user_id``)
        """
        operation = "upsert failed"
        model = self._model(table, operation)
        key_column = self._column(model, table, on, operation)
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(model).where(key_column == row[on]))
                entity = result.scalars().one_or_none()
                change_type = ChangeType.update if entity is not None else ChangeType.insert
                if entity is None:
                    entity = model.model_validate(dict(row))
                else:
                    for name, value in row.items():
                        if name != "id":
                            setattr(entity, name, value)
                session.add(entity)
                await session.commit()
                await session.refresh(entity)
        except (SQLAlchemyError, PydanticValidationError) as exc:
            logger.error(f"Upsert into '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc

        stored = self._to_row(entity)
        self._publish(table, change_type, [stored])
        return stored

    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> int:
        """Apply ``patch`` to every row matching ``filters``.

        The filter is the write precondition: rows that no longer match when
        the statement runs are left untouched.

        Returns:
            Number of rows updated

        Raises:
            StoreError: ``"update failed"`` on any database failure or an empty filter
        """
        operation = "update failed"
        model = self._model(table, operation)
        clauses = self._where(model, table, RowFilter.coerce(filters), operation)
        if not clauses:
            raise StoreError(operation, table=table, detail="refusing to update without a filter")
        columns = model.__table__.columns
        stmt = sa_update(model.__table__).where(*clauses).values(**dict(patch)).returning(*columns)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = [dict(mapping) for mapping in result.mappings().all()]
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Update on '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc

        logger.debug(f"Updated {len(rows)} row(s) in '{table}'")
        self._publish(table, ChangeType.update, rows)
        return len(rows)

    async def delete(self, table: str, filters: Filters) -> int:
        """Delete every row matching ``filters``.

        Returns:
            Number of rows deleted

        Raises:
            StoreError: ``"delete failed"`` on any database failure or an empty filter
        """
        operation = "delete failed"
        model = self._model(table, operation)
        clauses = self._where(model, table, RowFilter.coerce(filters), operation)
        if not clauses:
            raise StoreError(operation, table=table, detail="refusing to delete without a filter")
        stmt = sa_delete(model.__table__).where(*clauses).returning(*model.__table__.columns)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = [dict(mapping) for mapping in result.mappings().all()]
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error(f"Delete on '{table}' failed: {exc}")
            raise StoreError(operation, table=table, detail=str(exc)) from exc

        logger.debug(f"Deleted {len(rows)} row(s) from '{table}'")
        self._publish(table, ChangeType.delete, rows)
        return len(rows)

    # ------------------------------------------------------------------
    # subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, table: str, row_filter: Filters, on_change: ChangeCallback) -> SubscriptionHandle:
        self._model(table, "subscribe failed")
        return self.hub.subscribe(table, row_filter, on_change)

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self.hub.unsubscribe(handle)
