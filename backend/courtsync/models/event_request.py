"""
Raw event booking request (collection `event_bookings`).
"""

from typing import Any, Literal, Optional

from courtsync.models.base import RawDocument


class RawEventRequest(RawDocument):
    kind: Literal["event_bookings"] = "event_bookings"

    user_id: Optional[str] = None
    requester_name: Optional[str] = None
    user_name: Optional[str] = None
    name: Optional[str] = None

    event_name: Optional[str] = None
    title: Optional[str] = None
    purpose: Optional[str] = None
    description: Optional[str] = None

    date_time: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    time: Optional[str] = None
    duration: Any = None

    attendance: Any = None
    expected_attendance: Any = None
    participants: Any = None

    courts: Optional[list[Any]] = None
    court: Any = None

    status: Optional[str] = None
