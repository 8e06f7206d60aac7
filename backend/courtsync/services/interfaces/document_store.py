"""
Document store interface.
The console only ever talks to its backing store through this contract,
so the in-memory and Redis implementations are interchangeable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Iterable, Optional

# (document_id, fields) pairs in store iteration order
Snapshot = tuple[tuple[str, dict[str, Any]], ...]


class StoreError(Exception):
    """Base error for any failed store operation."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, document_id: str):
        super().__init__(f"{collection}/{document_id} does not exist")
        self.collection = collection
        self.document_id = document_id


class SubscriptionError(StoreError):
    """A live subscription could not be opened or was dropped."""


@dataclass(frozen=True)
class WriteOp:
    """One write inside a batch. kind is 'update' or 'delete'."""

    kind: str
    collection: str
    document_id: str
    fields: dict[str, Any] = field(default_factory=dict)


class DocumentStore(ABC):
    """
    Interface for the hosted collection-of-documents store.

    Implementations:
    - MemoryDocumentStore: in-process, used for development and tests
    - RedisDocumentStore: documents in Redis hashes, change feed over pub/sub
    """

    supports_transactions: bool = False

    @abstractmethod
    def subscribe(self, collection: str) -> AsyncIterator[Snapshot]:
        """
        Open a live subscription to a collection.

        Yields the complete current snapshot right away and again after
        every change. Closing the iterator (aclose) releases the listener.
        Raises SubscriptionError when the feed cannot be opened or drops.
        """

    @abstractmethod
    async def get_one(self, collection: str, document_id: str) -> dict[str, Any]:
        """Fetch one document. Raises DocumentNotFound."""

    @abstractmethod
    async def get_many(self, collection: str, document_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Fetch several documents in one round-trip. Missing ids are omitted."""

    @abstractmethod
    async def update_fields(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document. Raises DocumentNotFound."""

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is a no-op."""

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Point-in-time document count."""

    @abstractmethod
    async def add(self, collection: str, fields: dict[str, Any], document_id: Optional[str] = None) -> str:
        """Create (or replace) a document and return its id."""

    async def run_batch(self, ops: list[WriteOp]) -> None:
        """
        Apply several writes atomically.

        Only available when supports_transactions is True.
        """
        raise StoreError(f"{type(self).__name__} does not support batched writes")

    async def close(self) -> None:
        """Release connections held by the store."""
