"""
Pytest fixtures for the document store, client, and authentication.

Every test gets a fresh in-memory store and session registry, wired into
the app through dependency overrides.
"""

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from courtsync.main import app
from courtsync.core.security import new_session_token
from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS, USERS
from courtsync.services.identity_service import StoreIdentityProvider
from courtsync.services.interfaces.document_store import StoreError, SubscriptionError, WriteOp
from courtsync.services.memory_store import MemoryDocumentStore
from courtsync.services.session_service import SessionRegistry, get_session_registry
from courtsync.services.store_factory import get_document_store

ADMIN_EMAIL = "admin@upm.edu.my"
ADMIN_PASSWORD = "courtsync-admin"


class FlakyStore(MemoryDocumentStore):
    """
    Memory store with injectable failures.

    fail(op, collection) makes that operation raise StoreError;
    drop(collection) breaks open subscriptions on their next snapshot.
    """

    def __init__(self):
        super().__init__()
        self.failures: dict[tuple[str, str], Exception] = {}
        self.dropped: set[str] = set()

    def fail(self, op: str, collection: str, error: Exception | None = None) -> None:
        self.failures[(op, collection)] = error or StoreError(f"{op} on {collection} rejected")

    def _check(self, op: str, collection: str) -> None:
        if (op, collection) in self.failures:
            raise self.failures[(op, collection)]

    def drop(self, collection: str) -> None:
        self.dropped.add(collection)
        self._notify(collection)

    async def subscribe(self, collection: str):
        self._check("subscribe", collection)
        feed = super().subscribe(collection)
        try:
            async for snapshot in feed:
                if collection in self.dropped:
                    raise SubscriptionError("connection lost")
                yield snapshot
        finally:
            await feed.aclose()

    async def get_one(self, collection: str, document_id: str) -> dict[str, Any]:
        self._check("get_one", collection)
        return await super().get_one(collection, document_id)

    async def get_many(self, collection, document_ids):
        self._check("get_many", collection)
        return await super().get_many(collection, document_ids)

    async def update_fields(self, collection, document_id, fields):
        self._check("update_fields", collection)
        await super().update_fields(collection, document_id, fields)

    async def delete(self, collection, document_id):
        self._check("delete", collection)
        await super().delete(collection, document_id)

    async def count(self, collection):
        self._check("count", collection)
        return await super().count(collection)

    async def run_batch(self, ops: list[WriteOp]) -> None:
        for op in ops:
            self._check("run_batch", op.collection)
        await super().run_batch(ops)


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry(ttl_minutes=60)


@pytest_asyncio.fixture(scope="function")
async def client(store: FlakyStore, registry: SessionRegistry) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the store and session registry overridden."""
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_session_registry] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_token(store: FlakyStore, registry: SessionRegistry) -> str:
    """Create an administrator account and open a session for it."""
    provider = StoreIdentityProvider(store)
    identity = await provider.create_account_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
    token = new_session_token()
    registry.open(token, identity)
    return token


@pytest_asyncio.fixture
async def auth_headers(admin_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest_asyncio.fixture
async def member(store: FlakyStore) -> str:
    """A registered member of the booking service."""
    return await store.add(USERS, {
        "name": "Nurul Aina",
        "email": "nurul@student.upm.edu.my",
        "role": "student",
        "joinDate": "2025-02-10",
    }, document_id="u9f3kd81xq2mzp")


@pytest_asyncio.fixture
async def court_booking(store: FlakyStore, member: str) -> str:
    """Active booking on court 3."""
    return await store.add(BOOKINGS, {
        "courtId": 3,
        "date": "2026-10-20",
        "startTime": "18:00",
        "duration": 2,
        "userId": member,
        "status": "active",
    }, document_id="bk-court3")


@pytest_asyncio.fixture
async def cancellation_request(store: FlakyStore, court_booking: str) -> str:
    """Unprocessed cancellation for the court 3 booking."""
    return await store.add(CANCELLATION_REQUESTS, {
        "bookingId": court_booking,
        "userName": "Nurul Aina",
        "reason": "Lab session moved",
        "processed": False,
        "bookingDetails": {"courtName": "Court 3", "date": "2026-10-20", "time": "18:00"},
    }, document_id="cr-1")


@pytest_asyncio.fixture
async def event_request(store: FlakyStore, member: str) -> str:
    """Pending event booking request from a member."""
    return await store.add(EVENT_BOOKINGS, {
        "userId": member,
        "eventName": "Faculty Badminton Cup",
        "purpose": "Inter-faculty tournament",
        "date": "2026-11-02",
        "startTime": "09:00",
        "duration": 6,
        "attendance": 48,
        "courts": ["Court 1", "Court 2"],
        "status": "PENDING",
    }, document_id="ev-1")
