"""
Document store factory.
Configures which backing store the console talks to.
"""

from typing import Optional

from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.services.memory_store import MemoryDocumentStore
from courtsync.services.redis_store import RedisDocumentStore
from courtsync.infrastructure.redis_client import get_redis
from courtsync.core.config import get_settings


def build_document_store() -> DocumentStore:
    """
    Build the configured document store.

    - memory: in-process store (development, tests)
    - redis:  shared store with a pub/sub change feed

    Selected with the STORE_BACKEND env var.
    """
    settings = get_settings()
    backend = settings.STORE_BACKEND.lower()

    if backend == "redis":
        return RedisDocumentStore(get_redis(), prefix=settings.REDIS_KEY_PREFIX)
    if backend == "memory":
        return MemoryDocumentStore()
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")


# Singleton instance
_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """Get document store singleton. Used as a FastAPI dependency."""
    global _store
    if _store is None:
        _store = build_document_store()
    return _store


async def close_document_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
