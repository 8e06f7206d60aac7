"""
Redis-backed document store.

KEY LAYOUT
==========

  {prefix}:{collection}:docs     HASH   document id -> JSON fields
  {prefix}:{collection}:order    ZSET   document id scored by creation sequence
  {prefix}:{collection}:changes  pub/sub channel, one message per write
  {prefix}:seq                   STRING global creation counter

Snapshots read the ordered ids and the documents inside one MULTI block,
so a subscriber never sees a half-applied write. Snapshot order is creation
order, which matches what the in-memory store returns.

Change feed:
  Every write publishes the touched document id on the collection channel.
  A subscriber re-reads the whole collection on each message; the console
  works with full snapshots, never diffs.

Read-modify-write updates use WATCH/MULTI with a bounded retry, the same
optimistic pattern the store applies to batched writes.
"""

import json
from typing import Any, AsyncIterator, Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from courtsync.services.interfaces.document_store import (
    DocumentNotFound,
    DocumentStore,
    Snapshot,
    StoreError,
    SubscriptionError,
    WriteOp,
)
from courtsync.services.memory_store import generate_document_id
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

MAX_RETRY_ATTEMPTS = 3


def _decode(collection: str, document_id: str, raw: str) -> Any:
    """
    Decode a stored document. Undecodable values are returned as the raw
    string so the normalizers reject that one record, not the whole view.
    """
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("redis_document_undecodable", collection=collection, document_id=document_id)
        return raw


class RedisDocumentStore(DocumentStore):
    supports_transactions = True

    def __init__(self, client: redis.Redis, prefix: str = "courtsync"):
        self.redis = client
        self.prefix = prefix

    def _docs_key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:docs"

    def _order_key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:order"

    def _channel(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:changes"

    async def _read_snapshot(self, collection: str) -> Snapshot:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.zrange(self._order_key(collection), 0, -1)
            pipe.hgetall(self._docs_key(collection))
            ids, docs = await pipe.execute()
        return tuple(
            (doc_id, _decode(collection, doc_id, docs[doc_id]))
            for doc_id in ids
            if doc_id in docs
        )

    async def subscribe(self, collection: str) -> AsyncIterator[Snapshot]:
        pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(self._channel(collection))
            yield await self._read_snapshot(collection)
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                yield await self._read_snapshot(collection)
        except RedisError as e:
            raise SubscriptionError(f"Subscription to '{collection}' failed: {e}") from e
        finally:
            try:
                await pubsub.unsubscribe()
            except RedisError as e:
                logger.warning("redis_unsubscribe_failed", collection=collection, error=str(e))
            await pubsub.aclose()

    async def get_one(self, collection: str, document_id: str) -> dict[str, Any]:
        try:
            raw = await self.redis.hget(self._docs_key(collection), document_id)
        except RedisError as e:
            raise StoreError(str(e)) from e
        if raw is None:
            raise DocumentNotFound(collection, document_id)
        fields = _decode(collection, document_id, raw)
        if not isinstance(fields, dict):
            raise StoreError(f"{collection}/{document_id} is not a valid document")
        return fields

    async def get_many(self, collection: str, document_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return {}
        try:
            values = await self.redis.hmget(self._docs_key(collection), ids)
        except RedisError as e:
            raise StoreError(str(e)) from e
        found = {}
        for doc_id, raw in zip(ids, values):
            if raw is None:
                continue
            fields = _decode(collection, doc_id, raw)
            if isinstance(fields, dict):
                found[doc_id] = fields
        return found

    async def update_fields(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        await self.run_batch([WriteOp("update", collection, document_id, fields)])

    async def delete(self, collection: str, document_id: str) -> None:
        await self.run_batch([WriteOp("delete", collection, document_id)])

    async def count(self, collection: str) -> int:
        try:
            return await self.redis.hlen(self._docs_key(collection))
        except RedisError as e:
            raise StoreError(str(e)) from e

    async def add(self, collection: str, fields: dict[str, Any], document_id: Optional[str] = None) -> str:
        document_id = document_id or generate_document_id()
        try:
            seq = await self.redis.incr(f"{self.prefix}:seq")
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.hset(self._docs_key(collection), document_id, json.dumps(fields, default=str))
                pipe.zadd(self._order_key(collection), {document_id: seq}, nx=True)
                pipe.publish(self._channel(collection), document_id)
                await pipe.execute()
        except RedisError as e:
            raise StoreError(str(e)) from e
        return document_id

    async def run_batch(self, ops: list[WriteOp]) -> None:
        """
        Apply updates and deletes in one MULTI block.
        Retries up to MAX_RETRY_ATTEMPTS when a watched collection changes.
        """
        watched = list(dict.fromkeys(self._docs_key(op.collection) for op in ops))

        for attempt in range(1, MAX_RETRY_ATTEMPTS + 1):
            try:
                async with self.redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(*watched)

                    # Immediate-mode reads for every update target
                    updated: dict[tuple[str, str], dict[str, Any]] = {}
                    for op in ops:
                        if op.kind == "delete":
                            continue
                        if op.kind != "update":
                            raise StoreError(f"Unknown write kind: {op.kind}")
                        key = (op.collection, op.document_id)
                        if key not in updated:
                            raw = await pipe.hget(self._docs_key(op.collection), op.document_id)
                            if raw is None:
                                raise DocumentNotFound(op.collection, op.document_id)
                            document = _decode(op.collection, op.document_id, raw)
                            if not isinstance(document, dict):
                                raise StoreError(
                                    f"{op.collection}/{op.document_id} is not a valid document"
                                )
                            updated[key] = document
                        updated[key].update(op.fields)

                    pipe.multi()
                    for op in ops:
                        if op.kind == "update":
                            document = updated[(op.collection, op.document_id)]
                            pipe.hset(
                                self._docs_key(op.collection),
                                op.document_id,
                                json.dumps(document, default=str),
                            )
                        else:
                            pipe.hdel(self._docs_key(op.collection), op.document_id)
                            pipe.zrem(self._order_key(op.collection), op.document_id)
                        pipe.publish(self._channel(op.collection), op.document_id)
                    await pipe.execute()
                    return
            except WatchError:
                logger.info("redis_batch_retry", attempt=attempt, ops=len(ops))
                if attempt == MAX_RETRY_ATTEMPTS:
                    raise StoreError("Write conflicted with concurrent changes") from None
            except RedisError as e:
                raise StoreError(str(e)) from e

    async def close(self) -> None:
        # The shared client is closed by the application lifespan
        pass
