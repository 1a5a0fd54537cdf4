"""
Alumni event entity models.

This module contains the database entities for events and for the attendee
join records that register a user for an event.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class AlumniEventBase(Base):
    """Base fields for alumni event entity."""

    created_by: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)

    title: str = Field(max_length=200)
    description: str = Field(sa_type=Text)
    location: Optional[str] = Field(default=None, max_length=200)
    event_type: str = Field(max_length=32, index=True)
    max_attendees: Optional[int] = Field(default=None)
    registration_url: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    is_active: Optional[bool] = Field(default=True, index=True)


class AlumniEvent(AlumniEventBase, table=True):
    """Entity for alumni events.

    Table: alumni_events
    """

    __tablename__ = "alumni_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    event_date: datetime = timestamp_field(index=True)

    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"AlumniEvent(id={self.id}, title={self.title}, event_date={self.event_date})"


class EventAttendee(Base, table=True):
    """Entity registering one user for one event.

    Table: event_attendees
    """

    __tablename__ = "event_attendees"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_attendees_event_user"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    event_id: str = Field(max_length=64, foreign_key="alumni_events.id", index=True)
    user_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)
    registered_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"EventAttendee(event_id={self.event_id}, user_id={self.user_id})"
