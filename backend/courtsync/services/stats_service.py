"""
Aggregate counts for the user management cards.

Three one-shot count queries run side by side. Each one fails on its own:
a failed count is logged and the card keeps the last value it showed
(zero before the first successful fetch). Counts are not live; they only
change when the console fetches again.
"""

import asyncio
from typing import Optional

from courtsync.models import BOOKINGS, EVENT_BOOKINGS, USERS
from courtsync.schemas.stats import StatsResponse
from courtsync.services.interfaces.document_store import DocumentStore, StoreError
from courtsync.core.metrics import stats_count_failures
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

# card name -> collection counted
STAT_COLLECTIONS = {
    "bookings": BOOKINGS,
    "events": EVENT_BOOKINGS,
    "users": USERS,
}


class StatsFetcher:
    def __init__(self):
        self.last = StatsResponse()

    async def _count(self, store: DocumentStore, collection: str) -> Optional[int]:
        try:
            return await store.count(collection)
        except StoreError as e:
            stats_count_failures.labels(collection=collection).inc()
            logger.warning("stats_count_failed", collection=collection, error=str(e))
            return None

    async def fetch(self, store: DocumentStore) -> StatsResponse:
        names = list(STAT_COLLECTIONS)
        counts = await asyncio.gather(
            *(self._count(store, STAT_COLLECTIONS[name]) for name in names)
        )

        values = self.last.model_dump()
        for name, count in zip(names, counts):
            if count is not None:
                values[name] = count

        self.last = StatsResponse(**values)
        logger.debug("stats_fetched", **values)
        return self.last
