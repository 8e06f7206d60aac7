"""
Demo data for a fresh store.

Writes a handful of members, bookings, event requests and cancellation
requests in the shapes the member app produces, including the older
field names the normalizers fall back to.
"""

import random
from datetime import date, timedelta

from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS, USERS
from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

NUM_USERS = 8
NUM_BOOKINGS = 5
START_TIMES = ["08:00", "10:00", "14:00", "16:00", "20:00"]
NAMES = ["Aina", "Hafiz", "Mei Ling", "Ravi", "Siti", "Daniel", "Nurul", "Jason"]


async def seed_demo_data(store: DocumentStore, rng: random.Random | None = None) -> dict[str, int]:
    rng = rng or random.Random(7)
    today = date.today()

    user_ids = []
    for index, name in enumerate(NAMES[:NUM_USERS]):
        user_id = await store.add(USERS, {
            "name": name,
            "email": f"{name.lower().replace(' ', '.')}@student.upm.edu.my",
            "role": "student" if index % 3 else "staff",
            "joinDate": (today - timedelta(days=30 * index)).isoformat(),
        })
        user_ids.append(user_id)

    booking_ids = []
    courts = rng.sample(range(1, 7), NUM_BOOKINGS)
    for court in courts:
        booking_ids.append(await store.add(BOOKINGS, {
            "courtId": court,
            "date": today.isoformat(),
            "startTime": rng.choice(START_TIMES),
            "duration": rng.choice([1, 2]),
            "userId": rng.choice(user_ids),
            "status": "active",
        }))

    await store.add(EVENT_BOOKINGS, {
        "userId": user_ids[0],
        "eventName": "Faculty Badminton Cup",
        "purpose": "Inter-faculty tournament, group stage",
        "date": (today + timedelta(days=14)).isoformat(),
        "startTime": "09:00",
        "duration": 6,
        "attendance": 48,
        "courts": ["Court 1", "Court 2", "Court 3"],
        "status": "Pending",
    })
    await store.add(EVENT_BOOKINGS, {
        "requesterName": "Badminton Club",
        "title": "Weekly club night",
        "dateTime": f"{(today + timedelta(days=3)).isoformat()} 19:00",
        "court": "Court 5",
    })

    await store.add(CANCELLATION_REQUESTS, {
        "bookingId": booking_ids[0],
        "userName": NAMES[1],
        "reason": "Lecture rescheduled",
        "processed": False,
        "bookingDetails": {"courtId": courts[0], "date": today.isoformat(), "time": "10:00"},
    })

    counts = {
        USERS: len(user_ids),
        BOOKINGS: len(booking_ids),
        EVENT_BOOKINGS: 2,
        CANCELLATION_REQUESTS: 1,
    }
    logger.info("demo_data_seeded", **counts)
    return counts
