"""
Pydantic schemas for admin action responses.
"""

from typing import Optional

from courtsync.schemas.base import CamelModel


class EventActionResponse(CamelModel):
    message: str
    request_id: str
    status: str


class CancellationActionResponse(CamelModel):
    message: str
    request_id: str
    action: str
    booking_id: Optional[str] = None
    booking_deleted: bool = False
