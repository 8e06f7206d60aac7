from courtsync.schemas.actions import EventActionResponse, CancellationActionResponse
from courtsync.schemas.auth import AdminCredentials, AdminIdentity, Token, SessionInfo
from courtsync.schemas.records import (
    BookingRecord, CourtStatus, CancellationRecord, EventRequestRecord, UserRecord,
)
from courtsync.schemas.shell import AppView, ViewSelect, ShellResponse
from courtsync.schemas.stats import StatsResponse
from courtsync.schemas.views import (
    ViewState, OverviewState, EventRequestsState, CancellationsState, UserDirectoryState,
)

__all__ = [
    "EventActionResponse", "CancellationActionResponse",
    "AdminCredentials", "AdminIdentity", "Token", "SessionInfo",
    "BookingRecord", "CourtStatus", "CancellationRecord", "EventRequestRecord", "UserRecord",
    "AppView", "ViewSelect", "ShellResponse",
    "StatsResponse",
    "ViewState", "OverviewState", "EventRequestsState", "CancellationsState", "UserDirectoryState",
]
