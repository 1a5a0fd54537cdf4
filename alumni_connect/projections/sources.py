"""Named store queries behind each list view.

A ``ViewSource`` is the filtered query one view issues on mount and again on
every change notification, plus the filter scoping its subscription.

Only actor fields (requester, participants, attendee) are used to scope a
subscription; they never change after insert. Views filtered on a status
subscribe to the whole table, since a row that leaves the status filter must
still trigger a refresh.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from ..core.models.domain.enums import MentorshipStatus, ReferralStatus, Table
from ..store.interfaces import Order, RecordStore, Row, RowFilter

Fetch = Callable[[], Awaitable[List[Row]]]


@dataclass(frozen=True)
class ViewSource:
    """Table, filter and order of one list view."""

    name: str
    table: Table
    row_filter: RowFilter
    order: Optional[Order] = None
    subscription_filter: Optional[RowFilter] = None

    async def fetch(self, store: RecordStore) -> List[Row]:
        return await store.query(self.table.value, self.row_filter, self.order)

    def fetcher(self, store: RecordStore) -> Fetch:
        """Zero-argument fetch bound to ``store``, as the refresh coordinator expects."""

        async def _fetch() -> List[Row]:
            return await self.fetch(store)

        return _fetch


def open_referrals() -> ViewSource:
    return ViewSource(
        "open_referrals",
        Table.referral_requests,
        RowFilter(all_of={"status": ReferralStatus.open.value}),
        Order("created_at", ascending=False),
    )


def my_referrals(viewer_id: str) -> ViewSource:
    return ViewSource(
        "my_referrals",
        Table.referral_requests,
        RowFilter(all_of={"requester_id": viewer_id}),
        Order("created_at", ascending=False),
        RowFilter(all_of={"requester_id": viewer_id}),
    )


def my_sessions(viewer_id: str) -> ViewSource:
    return ViewSource(
        "my_sessions",
        Table.one_on_one_sessions,
        RowFilter.participant(viewer_id, "mentor_id", "mentee_id"),
        Order("scheduled_at"),
        RowFilter.participant(viewer_id, "mentor_id", "mentee_id"),
    )


def my_mentorships(viewer_id: str) -> ViewSource:
    return ViewSource(
        "my_mentorships",
        Table.mentorships,
        RowFilter.participant(viewer_id, "mentor_id", "mentee_id"),
        Order("created_at", ascending=False),
        RowFilter.participant(viewer_id, "mentor_id", "mentee_id"),
    )


def incoming_mentorship_requests(viewer_id: str) -> ViewSource:
    return ViewSource(
        "incoming_mentorship_requests",
        Table.mentorships,
        RowFilter(all_of={"mentor_id": viewer_id, "status": MentorshipStatus.pending.value}),
        Order("created_at", ascending=False),
        RowFilter(all_of={"mentor_id": viewer_id}),
    )


def active_events() -> ViewSource:
    return ViewSource(
        "active_events",
        Table.alumni_events,
        RowFilter(all_of={"is_active": True}),
        Order("event_date"),
    )


def my_registrations(viewer_id: str) -> ViewSource:
    return ViewSource(
        "my_registrations",
        Table.event_attendees,
        RowFilter(all_of={"user_id": viewer_id}),
        Order("registered_at", ascending=False),
        RowFilter(all_of={"user_id": viewer_id}),
    )


def active_jobs() -> ViewSource:
    return ViewSource(
        "active_jobs",
        Table.job_opportunities,
        RowFilter(all_of={"is_active": True}),
        Order("created_at", ascending=False),
    )


def mentor_directory() -> ViewSource:
    return ViewSource(
        "mentor_directory",
        Table.profiles,
        RowFilter(all_of={"is_mentor": True, "is_available_for_mentorship": True}),
        Order("full_name"),
    )


def view_sources(viewer_id: Optional[str] = None) -> Dict[str, ViewSource]:
    """All list sources; viewer-scoped ones are included only with a viewer."""
    sources = [open_referrals(), active_events(), active_jobs(), mentor_directory()]
    if viewer_id:
        sources += [
            my_referrals(viewer_id),
            my_sessions(viewer_id),
            my_mentorships(viewer_id),
            incoming_mentorship_requests(viewer_id),
            my_registrations(viewer_id),
        ]
    return {source.name: source for source in sources}
