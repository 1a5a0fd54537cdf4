"""
Global database session and engine management.

This module manages the process-wide AsyncEngine and async_sessionmaker built
from ``settings.database_url``. Both are created on first use so importing the
package never opens a connection pool.
"""

from __future__ import annotations

from functools import lru_cache
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from alumni_connect.core.config import settings

from .utils import create_engine, create_sessionmaker


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Return the global engine for the configured database."""
    return create_engine(settings.database_url, echo=settings.database_echo)


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Return the global session factory bound to ``get_engine()``."""
    return create_sessionmaker(get_engine())

