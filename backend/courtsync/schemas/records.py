"""
Display records: the strictly shaped rows each view renders.
Built from raw documents by courtsync.services.normalizers.
"""

from typing import Literal, Optional

from courtsync.schemas.base import CamelModel


class BookingRecord(CamelModel):
    id: str
    court_number: Optional[int] = None
    date: str
    start_time: str
    duration: Optional[float] = None
    user_id: str
    player_label: str
    status: str


class CourtStatus(CamelModel):
    id: int
    label: str
    status: Literal["available", "booked"]
    booking: Optional[BookingRecord] = None


class CancellationRecord(CamelModel):
    id: str
    booking_id: str
    court_name: str
    user_name: str
    reason: str
    processed: bool
    time: str
    date: str


class EventRequestRecord(CamelModel):
    id: str
    user_id: Optional[str] = None
    requester_name: str
    event_name: str
    purpose: str
    date_time: str
    date: str
    start_time: str
    duration: Optional[float] = None
    attendance: Optional[int] = None
    courts: list[str]
    status: str


class UserRecord(CamelModel):
    id: str
    name: str
    email: str
    role: str
    join_date: str
