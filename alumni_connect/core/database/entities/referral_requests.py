"""
Referral request entity models.

This module contains the database entity for referral requests. A request is
posted by a requester and later claimed by a referee.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class ReferralRequestBase(Base):
    """Base fields for referral request entity."""

    requester_id: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)
    referee_id: Optional[str] = Field(default=None, max_length=64, foreign_key="profiles.user_id", index=True)

    company: str = Field(max_length=200)
    position: str = Field(max_length=200)
    message: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="open", max_length=16, index=True)


class ReferralRequest(ReferralRequestBase, table=True):
    """Entity for referral requests.

    Table: referral_requests
    """

    __tablename__ = "referral_requests"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)

    created_at: datetime = timestamp_field(default_factory=utc_now, index=True)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"ReferralRequest(id={self.id}, company={self.company}, status={self.status})"
