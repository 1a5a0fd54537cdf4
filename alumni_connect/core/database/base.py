"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the database layer using SQLModel.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Get current UTC datetime (timezone aware)."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a primary key value."""
    return str(uuid4())


def timestamp_field(**kwargs):
    """Timezone-aware timestamp column."""
    return Field(sa_type=DateTime(timezone=True), **kwargs)


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)
