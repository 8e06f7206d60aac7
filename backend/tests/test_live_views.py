"""
Tests for the WebSocket live view endpoint.

These run through Starlette's TestClient so the socket and the store
writes share one event loop (the client's portal).
"""

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from courtsync.main import app
from courtsync.core.security import new_session_token
from courtsync.models import CANCELLATION_REQUESTS
from courtsync.schemas.auth import AdminIdentity
from courtsync.services.session_service import get_session_registry
from courtsync.services.store_factory import get_document_store


@pytest.fixture
def live_client(store, registry):
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def token(registry) -> str:
    token = new_session_token()
    registry.open(token, AdminIdentity(uid="admin-uid", email="admin@upm.edu.my"))
    return token


def test_live_queue_follows_store_changes(live_client, store, token):
    live_client.portal.call(
        store.add, CANCELLATION_REQUESTS, {"reason": "Exam week", "processed": False}, "cr-1",
    )

    with live_client.websocket_connect(f"/api/v1/views/cancellations/live?token={token}") as ws:
        loading = ws.receive_json()
        assert loading["loading"] is True
        assert loading["view"] == "Cancellations"

        first = ws.receive_json()
        assert first["count"] == 1
        assert first["requests"][0]["reason"] == "Exam week"

        live_client.portal.call(
            store.add, CANCELLATION_REQUESTS, {"reason": "Injury", "processed": False}, "cr-2",
        )
        second = ws.receive_json()
        assert [r["id"] for r in second["requests"]] == ["cr-1", "cr-2"]

        live_client.portal.call(store.update_fields, CANCELLATION_REQUESTS, "cr-1", {"processed": True})
        third = ws.receive_json()
        assert [r["id"] for r in third["requests"]] == ["cr-2"]


def test_live_view_pushes_error_then_closes(live_client, store, token):
    store.fail("subscribe", CANCELLATION_REQUESTS)

    with live_client.websocket_connect(f"/api/v1/views/cancellations/live?token={token}") as ws:
        assert ws.receive_json()["loading"] is True
        failed = ws.receive_json()
        assert failed["loading"] is False
        assert failed["error"] == "Unable to connect to 'cancellation_requests'. Check permissions."
        with pytest.raises(WebSocketDisconnect):
            ws.receive_json()


def test_live_view_requires_session(live_client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with live_client.websocket_connect("/api/v1/views/overview/live?token=bogus") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_live_view_unknown_view(live_client, token):
    with pytest.raises(WebSocketDisconnect) as exc:
        with live_client.websocket_connect(f"/api/v1/views/payments/live?token={token}") as ws:
            ws.receive_json()
    assert exc.value.code == 1008
