"""
Record normalizers: raw store documents -> display records.

FALLBACK CHAINS
===============

Documents come from several client versions, so most display fields have
an ordered chain of candidate keys. The first truthy value wins; missing
keys, None, "", 0, False and empty lists all fall through to the next link.
The chains are part of the console's compatibility contract with existing
data and must not be reordered.

Failure isolation:
  Each document is validated and shaped on its own. A document that fails
  produces a failed NormalizeResult instead of raising, so the rest of the
  snapshot still renders and the view can report how many were skipped.

Requester names:
  Event requests only carry a userId. The names are resolved in one batched
  read against `users` before shaping (resolve_requester_names), then joined
  in. Until resolved, or when the lookup fails, the first 8 characters of
  the id stand in for the name.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from pydantic import ValidationError

from courtsync.models import (
    BOOKINGS,
    CANCELLATION_REQUESTS,
    EVENT_BOOKINGS,
    USERS,
    RawBookingDetails,
    parse_document,
)
from courtsync.schemas.records import (
    BookingRecord,
    CancellationRecord,
    EventRequestRecord,
    UserRecord,
)
from courtsync.services.interfaces.document_store import DocumentStore, Snapshot, StoreError
from courtsync.core.metrics import normalization_failures, user_lookup_failures
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

# Sentinel written into CancellationRecord.booking_id when no reference exists
MISSING_BOOKING_ID = "N/A"
PLACEHOLDER_LENGTH = 8

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class NormalizeResult(Generic[R]):
    document_id: str
    record: Optional[R] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class NormalizedBatch(Generic[R]):
    records: list[R] = field(default_factory=list)
    failures: list[NormalizeResult] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.failures)


def first_truthy(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value:
            return value
    return default


def parse_court_number(value: Any) -> Optional[int]:
    """Leading-integer parse: 3 -> 3, "4" -> 4, " 2b" -> 2, "abc" -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def placeholder_name(user_id: str) -> str:
    return user_id[:PLACEHOLDER_LENGTH]


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value))
    except ValueError:
        return None


def _as_int(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


def _lower(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return str(value).lower()


def normalize_booking(document_id: str, fields: Any) -> BookingRecord:
    raw = parse_document(BOOKINGS, fields)
    user_id = raw.user_id or ""
    return BookingRecord(
        id=document_id,
        court_number=parse_court_number(first_truthy(raw.court_id, raw.court)),
        date=raw.date or "",
        start_time=raw.start_time or "",
        duration=_as_number(raw.duration),
        user_id=user_id,
        player_label=placeholder_name(user_id),
        status=_lower(raw.status, "active"),
    )


def normalize_cancellation(document_id: str, fields: Any) -> CancellationRecord:
    raw = parse_document(CANCELLATION_REQUESTS, fields)
    details = raw.booking_details or RawBookingDetails()

    court_name = details.court_name
    if not court_name:
        court_id = details.court_id if details.court_id not in (None, "") else MISSING_BOOKING_ID
        court_name = f"Court {court_id}"

    return CancellationRecord(
        id=document_id,
        booking_id=first_truthy(raw.booking_id, details.booking_id, default=MISSING_BOOKING_ID),
        court_name=court_name,
        user_name=first_truthy(raw.user_name, raw.name, default="User"),
        reason=first_truthy(raw.reason, default="No reason provided"),
        processed=raw.processed is True,
        time=first_truthy(details.time, default="N/A"),
        date=first_truthy(details.date, default=""),
    )


def normalize_event_request(
    document_id: str,
    fields: Any,
    user_names: Optional[Mapping[str, str]] = None,
) -> EventRequestRecord:
    raw = parse_document(EVENT_BOOKINGS, fields)

    if raw.user_id:
        requester = placeholder_name(raw.user_id)
        if user_names and user_names.get(raw.user_id):
            requester = user_names[raw.user_id]
    else:
        requester = first_truthy(raw.requester_name, raw.user_name, raw.name, default="Unknown")

    if raw.courts:
        courts = [str(court) for court in raw.courts]
    elif raw.court:
        courts = [str(raw.court)]
    else:
        courts = []

    return EventRequestRecord(
        id=document_id,
        user_id=raw.user_id,
        requester_name=requester,
        event_name=first_truthy(raw.event_name, raw.title, default="Untitled Event"),
        purpose=first_truthy(raw.purpose, raw.description, default=""),
        date_time=first_truthy(raw.date_time, raw.date, default="No Date Set"),
        date=raw.date or "",
        start_time=first_truthy(raw.start_time, raw.time, default=""),
        duration=_as_number(raw.duration),
        attendance=_as_int(first_truthy(raw.attendance, raw.expected_attendance, raw.participants)),
        courts=courts,
        status=_lower(raw.status, "pending"),
    )


def booking_reference(fields: Any) -> Optional[str]:
    """
    The booking a cancellation request points at, or None.

    Same chain as CancellationRecord.booking_id, without validating the rest
    of the document: bookingId -> bookingDetails.bookingId.
    """
    if not isinstance(fields, dict):
        return None
    details = fields.get("bookingDetails")
    reference = first_truthy(
        fields.get("bookingId"),
        details.get("bookingId") if isinstance(details, dict) else None,
    )
    if not isinstance(reference, str) or reference == MISSING_BOOKING_ID:
        return None
    return reference


def normalize_user(document_id: str, fields: Any) -> UserRecord:
    raw = parse_document(USERS, fields)
    join_date = first_truthy(raw.join_date, raw.created_at, default="")
    return UserRecord(
        id=document_id,
        name=first_truthy(raw.name, default="N/A"),
        email=first_truthy(raw.email, default="N/A"),
        role=first_truthy(raw.role, default="user"),
        join_date=str(join_date),
    )


def normalize_one(
    collection: str,
    document_id: str,
    fields: Any,
    normalizer: Callable[..., R],
    **extra: Any,
) -> NormalizeResult[R]:
    """Shape one document, turning any validation problem into a failed result."""
    try:
        return NormalizeResult(document_id, record=normalizer(document_id, fields, **extra))
    except (ValidationError, TypeError, ValueError) as e:
        normalization_failures.labels(collection=collection).inc()
        logger.warning(
            "document_normalization_failed",
            collection=collection,
            document_id=document_id,
            error=str(e),
        )
        return NormalizeResult(document_id, error=str(e))


def normalize_snapshot(
    collection: str,
    snapshot: Snapshot,
    normalizer: Callable[..., R],
    **extra: Any,
) -> NormalizedBatch[R]:
    batch: NormalizedBatch[R] = NormalizedBatch()
    for document_id, fields in snapshot:
        result = normalize_one(collection, document_id, fields, normalizer, **extra)
        if result.ok:
            batch.records.append(result.record)
        else:
            batch.failures.append(result)
    return batch


async def resolve_requester_names(
    store: DocumentStore,
    snapshot: Snapshot,
) -> dict[str, str]:
    """
    Batch-resolve requester names for every userId in an event snapshot.

    Returns {user_id: name} for users that exist and have a name. A failed
    lookup is logged and yields {}, leaving the id placeholders in place.
    """
    user_ids = _collect_user_ids(fields for _, fields in snapshot)
    if not user_ids:
        return {}

    try:
        users = await store.get_many(USERS, user_ids)
    except StoreError as e:
        user_lookup_failures.inc()
        logger.warning("user_lookup_failed", user_ids=len(user_ids), error=str(e))
        return {}

    return {
        user_id: user["name"]
        for user_id, user in users.items()
        if isinstance(user, dict) and isinstance(user.get("name"), str) and user["name"]
    }


def _collect_user_ids(documents: Iterable[Any]) -> list[str]:
    ids: dict[str, None] = {}
    for fields in documents:
        if isinstance(fields, dict):
            user_id = fields.get("userId")
            if isinstance(user_id, str) and user_id:
                ids[user_id] = None
    return list(ids)
