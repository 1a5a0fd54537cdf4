"""
Form I/O models.

These models describe what a viewer submits to create rows. They are kept
apart from the domain models and the database entities so the submitted
shape can evolve independently of the stored one.
"""

from .forms import (
    EventForm,
    JobForm,
    ProfileForm,
    ReferralRequestForm,
    SessionForm,
)

__all__ = [
    "EventForm",
    "JobForm",
    "ProfileForm",
    "ReferralRequestForm",
    "SessionForm",
]
