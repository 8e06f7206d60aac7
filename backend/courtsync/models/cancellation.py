"""
Raw cancellation request.

bookingDetails is a copy of the booking's display fields taken when the
member filed the request, so it survives deletion of the booking.
"""

from typing import Any, Literal, Optional

from courtsync.models.base import RawDocument


class RawBookingDetails(RawDocument):
    booking_id: Optional[str] = None
    court_name: Optional[str] = None
    court_id: Any = None
    date: Optional[str] = None
    time: Optional[str] = None


class RawCancellationRequest(RawDocument):
    kind: Literal["cancellation_requests"] = "cancellation_requests"

    booking_id: Optional[str] = None
    booking_details: Optional[RawBookingDetails] = None
    user_name: Optional[str] = None
    name: Optional[str] = None
    reason: Optional[str] = None
    processed: Any = None
