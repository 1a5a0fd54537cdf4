"""Test configuration for database unit tests.

This module provides common fixtures for testing the entities against an
in-memory SQLite database.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from alumni_connect.core.database import create_all, create_sessionmaker


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )

    # Create all tables
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
def sample_profile_data() -> dict:
    """Sample profile data for testing."""
    return {
        "user_id": "user_alice",
        "full_name": "Alice Example",
        "email": "alice@example.com",
        "current_company": "Acme",
        "major": "Computer Science",
        "graduation_year": 2015,
        "is_mentor": True,
        "is_available_for_mentorship": True,
    }


@pytest.fixture(scope="function")
def sample_event_data() -> dict:
    """Sample alumni event data for testing."""
    return {
        "created_by": "user_alice",
        "title": "Spring Networking Night",
        "description": "Meet alumni working in tech",
        "event_date": datetime(2026, 4, 1, 18, 0, tzinfo=timezone.utc),
        "location": "Main Hall",
        "event_type": "networking",
        "max_attendees": 50,
    }
