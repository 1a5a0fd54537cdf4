from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from alumni_connect.core.database import create_all, create_engine, create_sessionmaker
from alumni_connect.lifecycle import LifecycleDeps, LifecycleService
from alumni_connect.store import SqlRecordStore

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
async def sqlite_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine so concurrent sessions use separate connections."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'alumni_connect.db'}")
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(sqlite_engine)


@pytest.fixture(scope="function")
def store(session_factory) -> SqlRecordStore:
    return SqlRecordStore(session_factory)


@pytest.fixture
def now() -> datetime:
    """Clock value used by the service fixture."""
    return FIXED_NOW


@pytest.fixture(scope="function")
def service(store: SqlRecordStore, now: datetime) -> LifecycleService:
    return LifecycleService(LifecycleDeps(store=store, clock=lambda: now))
