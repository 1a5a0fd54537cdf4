"""Duplicate-submission guard.

A view disables the control that triggered a write until the write resolves.
``SubmissionGuard`` holds that "in flight" state outside the view: the
service wraps each write in ``submitting(key)`` and views ask ``is_busy(key)``
to decide whether the control is enabled.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Set

from ..core.errors import DuplicateSubmissionError

logger = logging.getLogger(__name__)


class SubmissionGuard:
    """Tracks submissions that are still in flight, by key."""

    def __init__(self) -> None:
        self._in_flight: Set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    @asynccontextmanager
    async def submitting(self, key: str) -> AsyncIterator[None]:
        """Mark ``key`` in flight for the duration of the block.

        Raises:
            DuplicateSubmissionError: If ``key`` is already in flight.
        """
        if key in self._in_flight:
            logger.info(f"Rejected duplicate submission: {key}")
            raise DuplicateSubmissionError(key)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
