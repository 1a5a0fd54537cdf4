"""
Database layer for Alumni Connect.

This package provides a unified location for all database entities and the
engine/session helpers used by the SQL record store.

Structure:
- entities/: Database entity models, one module per table or table group
- session.py: Lazily created global engine and session factory
- utils.py: Engine, session factory and schema creation helpers
"""

from .base import Base
from .entities import TABLES
from .session import get_engine, get_session_maker
from .utils import create_all, create_engine, create_sessionmaker

__all__ = [
    "Base",
    "TABLES",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "get_engine",
    "get_session_maker",
]
