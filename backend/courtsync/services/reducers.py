"""
Status filters and the court occupancy reduction.
"""

from typing import Iterable, TypeVar

from courtsync.schemas.records import BookingRecord, CourtStatus
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# The complex has exactly six courts
COURT_NUMBERS = (1, 2, 3, 4, 5, 6)

PENDING = "pending"
CANCELLED = "cancelled"


def filter_by_status(records: Iterable[T], target: str = PENDING) -> list[T]:
    """Keep records whose normalized status equals target, in snapshot order."""
    return [record for record in records if record.status == target]


def filter_unprocessed(records: Iterable[T]) -> list[T]:
    return [record for record in records if not record.processed]


def reduce_occupancy(bookings: Iterable[BookingRecord]) -> dict[int, BookingRecord]:
    """
    Index non-cancelled bookings by court number.

    Cancelled bookings are dropped before indexing, so they never block or
    overwrite an active one. With two active bookings on one court the last
    one iterated wins. Unparseable or out-of-range court numbers are skipped.
    """
    occupancy: dict[int, BookingRecord] = {}
    for booking in bookings:
        if booking.status == CANCELLED:
            continue
        if booking.court_number is None:
            continue
        if booking.court_number not in COURT_NUMBERS:
            logger.debug("booking_outside_court_range", booking_id=booking.id, court=booking.court_number)
            continue
        occupancy[booking.court_number] = booking
    return occupancy


def court_cards(occupancy: dict[int, BookingRecord]) -> list[CourtStatus]:
    cards = []
    for number in COURT_NUMBERS:
        booking = occupancy.get(number)
        cards.append(CourtStatus(
            id=number,
            label=f"Court {number}",
            status="booked" if booking is not None else "available",
            booking=booking,
        ))
    return cards


def active_booking_monitor(occupancy: dict[int, BookingRecord]) -> list[BookingRecord]:
    """Bookings currently holding a court, in court order."""
    return [occupancy[number] for number in COURT_NUMBERS if number in occupancy]
