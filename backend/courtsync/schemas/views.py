"""
Payloads pushed to the console for each live view.

Every payload carries the loading/error state of its subscription and how
many documents were skipped because they could not be normalized.
"""

from typing import Optional

from courtsync.schemas.base import CamelModel
from courtsync.schemas.records import (
    BookingRecord,
    CancellationRecord,
    CourtStatus,
    EventRequestRecord,
    UserRecord,
)
from courtsync.schemas.shell import AppView


class ViewState(CamelModel):
    view: AppView
    loading: bool = True
    error: Optional[str] = None
    skipped: int = 0


class OverviewState(ViewState):
    view: AppView = AppView.OVERVIEW
    courts: list[CourtStatus] = []
    active_bookings: list[BookingRecord] = []


class EventRequestsState(ViewState):
    view: AppView = AppView.EVENT_REQUESTS
    requests: list[EventRequestRecord] = []
    count: int = 0


class CancellationsState(ViewState):
    view: AppView = AppView.CANCELLATION_REQUESTS
    requests: list[CancellationRecord] = []
    count: int = 0


class UserDirectoryState(ViewState):
    view: AppView = AppView.USER_MANAGEMENT
    users: list[UserRecord] = []
    count: int = 0
