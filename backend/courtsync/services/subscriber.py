"""
Collection subscriber shared by every live view.

Each mounted view owns one subscription:

  async with live_view(store, view) as states:
      async for state in states:
          ...push state to the client...

Every snapshot from the store is the full collection, so each one triggers
a full recomputation. On a store error the subscriber yields one final
error payload (loading cleared, records emptied) and stops; reconnecting
is left to the store client. The store listener is released on every exit
path: normal close, error, or task cancellation.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from courtsync.schemas.views import ViewState
from courtsync.services.interfaces.document_store import DocumentStore, StoreError
from courtsync.services.views import LiveView
from courtsync.core.metrics import active_subscriptions, snapshots_received, subscription_errors
from courtsync.core.logging import get_logger

logger = get_logger(__name__)


class CollectionSubscriber:
    def __init__(self, store: DocumentStore, view: LiveView):
        self.store = store
        self.view = view

    async def states(self) -> AsyncIterator[ViewState]:
        collection = self.view.collection
        feed = self.store.subscribe(collection)
        active_subscriptions.labels(collection=collection).inc()
        logger.info("subscription_opened", collection=collection, view=self.view.view.value)
        try:
            async for snapshot in feed:
                snapshots_received.labels(collection=collection).inc()
                logger.debug("snapshot_received", collection=collection, documents=len(snapshot))
                yield await self.view.project(snapshot)
        except StoreError as e:
            subscription_errors.labels(collection=collection).inc()
            logger.error("subscription_failed", collection=collection, error=str(e))
            yield self.view.error_state(self.view.subscription_error_message())
        finally:
            await feed.aclose()
            active_subscriptions.labels(collection=collection).dec()
            logger.info("subscription_closed", collection=collection)


@asynccontextmanager
async def live_view(store: DocumentStore, view: LiveView):
    """Scope a view subscription: opened on enter, released on exit."""
    states = CollectionSubscriber(store, view).states()
    try:
        yield states
    finally:
        await states.aclose()


async def render_once(store: DocumentStore, view: LiveView) -> ViewState:
    """Render a view from the first snapshot, then release the subscription."""
    async with live_view(store, view) as states:
        async for state in states:
            return state
    return view.error_state(view.subscription_error_message())
