"""
Live views: one collection bound to a normalizer and a reducer.

A view turns a full collection snapshot into the payload the console
renders. Views hold no subscription state of their own; the subscriber
drives them (courtsync.services.subscriber).
"""

from abc import ABC, abstractmethod
from typing import Optional

from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS, USERS
from courtsync.schemas.shell import AppView
from courtsync.schemas.views import (
    CancellationsState,
    EventRequestsState,
    OverviewState,
    UserDirectoryState,
    ViewState,
)
from courtsync.services.interfaces.document_store import DocumentStore, Snapshot
from courtsync.services.normalizers import (
    NormalizedBatch,
    normalize_booking,
    normalize_cancellation,
    normalize_event_request,
    normalize_snapshot,
    normalize_user,
    resolve_requester_names,
)
from courtsync.services.reducers import (
    PENDING,
    active_booking_monitor,
    court_cards,
    filter_by_status,
    filter_unprocessed,
    reduce_occupancy,
)


class LiveView(ABC):
    view: AppView
    collection: str
    state_cls: type[ViewState]

    @abstractmethod
    async def project(self, snapshot: Snapshot) -> ViewState:
        """Recompute the whole view payload from a full snapshot."""

    def loading_state(self) -> ViewState:
        return self.state_cls(loading=True)

    def error_state(self, message: str) -> ViewState:
        return self.state_cls(loading=False, error=message)

    def subscription_error_message(self) -> str:
        return f"Unable to connect to '{self.collection}'. Check permissions."

    def parse_error_message(self, batch: NormalizedBatch) -> Optional[str]:
        if not batch.skipped:
            return None
        return (
            f"Data parsing error. {batch.skipped} document(s) in '{self.collection}' "
            "do not match the expected fields."
        )


class OverviewView(LiveView):
    """Occupancy of the six courts plus the active booking monitor."""

    view = AppView.OVERVIEW
    collection = BOOKINGS
    state_cls = OverviewState

    async def project(self, snapshot: Snapshot) -> OverviewState:
        batch = normalize_snapshot(self.collection, snapshot, normalize_booking)
        occupancy = reduce_occupancy(batch.records)
        return OverviewState(
            loading=False,
            error=self.parse_error_message(batch),
            skipped=batch.skipped,
            courts=court_cards(occupancy),
            active_bookings=active_booking_monitor(occupancy),
        )


class EventRequestsView(LiveView):
    view = AppView.EVENT_REQUESTS
    collection = EVENT_BOOKINGS
    state_cls = EventRequestsState

    def __init__(self, store: DocumentStore):
        self.store = store

    async def project(self, snapshot: Snapshot) -> EventRequestsState:
        user_names = await resolve_requester_names(self.store, snapshot)
        batch = normalize_snapshot(
            self.collection, snapshot, normalize_event_request, user_names=user_names,
        )
        pending = filter_by_status(batch.records, PENDING)
        return EventRequestsState(
            loading=False,
            error=self.parse_error_message(batch),
            skipped=batch.skipped,
            requests=pending,
            count=len(pending),
        )


class CancellationsView(LiveView):
    view = AppView.CANCELLATION_REQUESTS
    collection = CANCELLATION_REQUESTS
    state_cls = CancellationsState

    async def project(self, snapshot: Snapshot) -> CancellationsState:
        batch = normalize_snapshot(self.collection, snapshot, normalize_cancellation)
        pending = filter_unprocessed(batch.records)
        return CancellationsState(
            loading=False,
            error=self.parse_error_message(batch),
            skipped=batch.skipped,
            requests=pending,
            count=len(pending),
        )


class UserDirectoryView(LiveView):
    view = AppView.USER_MANAGEMENT
    collection = USERS
    state_cls = UserDirectoryState

    async def project(self, snapshot: Snapshot) -> UserDirectoryState:
        batch = normalize_snapshot(self.collection, snapshot, normalize_user)
        return UserDirectoryState(
            loading=False,
            error=self.parse_error_message(batch),
            skipped=batch.skipped,
            users=batch.records,
            count=len(batch.records),
        )


def build_view(view: AppView, store: DocumentStore) -> LiveView:
    if view is AppView.OVERVIEW:
        return OverviewView()
    if view is AppView.EVENT_REQUESTS:
        return EventRequestsView(store)
    if view is AppView.CANCELLATION_REQUESTS:
        return CancellationsView()
    return UserDirectoryView()
