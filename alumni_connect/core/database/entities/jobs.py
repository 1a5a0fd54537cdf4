"""
Job opportunity entity models.

This module contains the database entity for job postings. Postings have no
lifecycle beyond an active flag and an optional expiry.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, timestamp_field, utc_now


class JobOpportunityBase(Base):
    """Base fields for job opportunity entity."""

    posted_by: str = Field(max_length=64, foreign_key="profiles.user_id", index=True)

    title: str = Field(max_length=200)
    description: str = Field(sa_type=Text)
    company: str = Field(max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    job_type: str = Field(max_length=32, index=True)
    salary_range: Optional[str] = Field(default=None, max_length=100)
    requirements: Optional[str] = Field(default=None, sa_type=Text)
    application_url: Optional[str] = Field(default=None)
    is_active: Optional[bool] = Field(default=True, index=True)


class JobOpportunity(JobOpportunityBase, table=True):
    """Entity for job postings.

    Table: job_opportunities
    """

    __tablename__ = "job_opportunities"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    expires_at: Optional[datetime] = timestamp_field(default=None)

    created_at: datetime = timestamp_field(default_factory=utc_now, index=True)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"JobOpportunity(id={self.id}, title={self.title}, company={self.company})"
