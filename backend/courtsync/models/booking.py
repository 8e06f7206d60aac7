"""
Raw court booking as written by the member-facing booking flow.

courtId is usually a number but older clients stored it as a string
("3") or under the key `court`.
"""

from typing import Any, Literal, Optional

from courtsync.models.base import RawDocument


class RawBooking(RawDocument):
    kind: Literal["bookings"] = "bookings"

    court_id: Any = None
    court: Any = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    duration: Any = None
    user_id: Optional[str] = None
    status: Any = None
