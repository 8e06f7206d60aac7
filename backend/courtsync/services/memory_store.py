"""
In-process document store.

Collections are ordered dicts of document id -> fields, so snapshot order
is insertion order. Every write pushes a fresh full snapshot to each open
subscription of the touched collection.
"""

import asyncio
import copy
import secrets
import string
from collections import defaultdict
from typing import Any, AsyncIterator, Iterable, Optional

from courtsync.services.interfaces.document_store import (
    DocumentNotFound,
    DocumentStore,
    Snapshot,
    StoreError,
    WriteOp,
)
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def generate_document_id(length: int = 20) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class MemoryDocumentStore(DocumentStore):
    supports_transactions = True

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._listeners: dict[str, set[asyncio.Queue]] = defaultdict(set)
        self._lock = asyncio.Lock()

    def _snapshot(self, collection: str) -> Snapshot:
        docs = self._collections.get(collection, {})
        return tuple((doc_id, copy.deepcopy(fields)) for doc_id, fields in docs.items())

    def _notify(self, collection: str) -> None:
        if not self._listeners.get(collection):
            return
        snapshot = self._snapshot(collection)
        for queue in self._listeners[collection]:
            queue.put_nowait(snapshot)

    def listener_count(self, collection: str) -> int:
        return len(self._listeners.get(collection, ()))

    async def subscribe(self, collection: str) -> AsyncIterator[Snapshot]:
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners[collection].add(queue)
        queue.put_nowait(self._snapshot(collection))
        logger.debug("memory_listener_added", collection=collection)
        try:
            while True:
                yield await queue.get()
        finally:
            self._listeners[collection].discard(queue)
            logger.debug("memory_listener_removed", collection=collection)

    async def get_one(self, collection: str, document_id: str) -> dict[str, Any]:
        try:
            return copy.deepcopy(self._collections[collection][document_id])
        except KeyError:
            raise DocumentNotFound(collection, document_id) from None

    async def get_many(self, collection: str, document_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        docs = self._collections.get(collection, {})
        return {
            doc_id: copy.deepcopy(docs[doc_id])
            for doc_id in dict.fromkeys(document_ids)
            if doc_id in docs
        }

    async def update_fields(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        async with self._lock:
            self._apply_update(collection, document_id, fields)
        self._notify(collection)

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._lock:
            existed = self._collections[collection].pop(document_id, None) is not None
        if existed:
            self._notify(collection)

    async def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))

    async def add(self, collection: str, fields: dict[str, Any], document_id: Optional[str] = None) -> str:
        document_id = document_id or generate_document_id()
        async with self._lock:
            self._collections[collection][document_id] = copy.deepcopy(fields)
        self._notify(collection)
        return document_id

    async def run_batch(self, ops: list[WriteOp]) -> None:
        async with self._lock:
            # Validate every update target before touching anything
            for op in ops:
                if op.kind == "update" and op.document_id not in self._collections[op.collection]:
                    raise DocumentNotFound(op.collection, op.document_id)
                if op.kind not in ("update", "delete"):
                    raise StoreError(f"Unknown write kind: {op.kind}")
            for op in ops:
                if op.kind == "update":
                    self._apply_update(op.collection, op.document_id, op.fields)
                else:
                    self._collections[op.collection].pop(op.document_id, None)
        for collection in dict.fromkeys(op.collection for op in ops):
            self._notify(collection)

    def _apply_update(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        try:
            document = self._collections[collection][document_id]
        except KeyError:
            raise DocumentNotFound(collection, document_id) from None
        document.update(copy.deepcopy(fields))

    async def close(self) -> None:
        self._listeners.clear()
