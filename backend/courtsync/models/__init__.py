"""
Raw document models, one per consumed collection.

parse_document() validates a (collection, fields) pair into the matching
model; the collection name is the union tag.
"""

from typing import Annotated, Any, Union

from pydantic import Field, TypeAdapter

from courtsync.models.base import RawDocument
from courtsync.models.booking import RawBooking
from courtsync.models.cancellation import RawBookingDetails, RawCancellationRequest
from courtsync.models.event_request import RawEventRequest
from courtsync.models.user import RawUser

BOOKINGS = "bookings"
CANCELLATION_REQUESTS = "cancellation_requests"
EVENT_BOOKINGS = "event_bookings"
USERS = "users"

AnyRawDocument = Annotated[
    Union[RawBooking, RawCancellationRequest, RawEventRequest, RawUser],
    Field(discriminator="kind"),
]

_adapter = TypeAdapter(AnyRawDocument)


def parse_document(collection: str, fields: Any) -> RawDocument:
    """Raises pydantic.ValidationError when the document does not fit its model."""
    if not isinstance(fields, dict):
        raise TypeError(f"{collection} document is {type(fields).__name__}, expected a mapping")
    return _adapter.validate_python({**fields, "kind": collection})


__all__ = [
    "RawDocument", "RawBooking", "RawBookingDetails", "RawCancellationRequest",
    "RawEventRequest", "RawUser", "AnyRawDocument", "parse_document",
    "BOOKINGS", "CANCELLATION_REQUESTS", "EVENT_BOOKINGS", "USERS",
]
