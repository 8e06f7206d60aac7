"""
Tests for the console endpoints: view shell, view rendering, actions and stats.
"""

import pytest
from httpx import AsyncClient

from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS, USERS


@pytest.mark.asyncio
async def test_shell_defaults_to_overview(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/shell", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["active_view"] == "Overview"
    assert data["views"] == ["Overview", "Event Requests", "Cancellations", "User Management"]


@pytest.mark.asyncio
async def test_switch_view(client: AsyncClient, auth_headers, store):
    response = await client.put(
        "/api/v1/shell/view", json={"view": "Cancellations"}, headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["active_slug"] == "cancellations"

    response = await client.get("/api/v1/shell", headers=auth_headers)
    assert response.json()["active_view"] == "Cancellations"
    # Navigation never writes to the store
    assert await store.count(BOOKINGS) == 0


@pytest.mark.asyncio
async def test_switch_to_unknown_view(client: AsyncClient, auth_headers):
    response = await client.put("/api/v1/shell/view", json={"view": "Payments"}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_overview_view(client: AsyncClient, auth_headers, court_booking):
    response = await client.get("/api/v1/views/overview", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["loading"] is False
    assert [c["status"] for c in data["courts"]].count("booked") == 1
    assert data["courts"][2]["booking"]["startTime"] == "18:00"
    assert data["activeBookings"][0]["playerLabel"] == "u9f3kd81"


@pytest.mark.asyncio
async def test_unknown_view_is_404(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/views/payments", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_event_requests_view(client: AsyncClient, auth_headers, event_request):
    response = await client.get("/api/v1/views/event-requests", headers=auth_headers)
    data = response.json()
    assert data["count"] == 1
    assert data["requests"][0]["requesterName"] == "Nurul Aina"
    assert data["requests"][0]["eventName"] == "Faculty Badminton Cup"


@pytest.mark.asyncio
async def test_approve_event_request(client: AsyncClient, auth_headers, event_request, store):
    response = await client.post(f"/api/v1/event-requests/{event_request}/approve", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    response = await client.get("/api/v1/views/event-requests", headers=auth_headers)
    assert response.json()["count"] == 0


@pytest.mark.asyncio
async def test_decline_failure_is_an_alert(client: AsyncClient, auth_headers, event_request, store):
    store.fail("update_fields", EVENT_BOOKINGS)
    response = await client.post(f"/api/v1/event-requests/{event_request}/decline", headers=auth_headers)
    assert response.status_code == 502
    assert response.json()["detail"] == "Error updating status."


@pytest.mark.asyncio
async def test_accept_cancellation(client: AsyncClient, auth_headers, cancellation_request, court_booking):
    response = await client.post(f"/api/v1/cancellations/{cancellation_request}/accept", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["bookingDeleted"] is True
    assert data["bookingId"] == court_booking

    queue = (await client.get("/api/v1/views/cancellations", headers=auth_headers)).json()
    assert queue["count"] == 0
    overview = (await client.get("/api/v1/views/overview", headers=auth_headers)).json()
    assert overview["activeBookings"] == []


@pytest.mark.asyncio
async def test_reject_cancellation_keeps_booking(client: AsyncClient, auth_headers, cancellation_request):
    response = await client.post(f"/api/v1/cancellations/{cancellation_request}/reject", headers=auth_headers)
    assert response.status_code == 200

    queue = (await client.get("/api/v1/views/cancellations", headers=auth_headers)).json()
    assert queue["count"] == 0
    overview = (await client.get("/api/v1/views/overview", headers=auth_headers)).json()
    assert len(overview["activeBookings"]) == 1


@pytest.mark.asyncio
async def test_accept_unknown_request(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/cancellations/nope/accept", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stats_keep_last_value_per_session(client: AsyncClient, auth_headers, store, member, court_booking):
    response = await client.get("/api/v1/stats", headers=auth_headers)
    assert response.json() == {"bookings": 1, "events": 0, "users": 1}

    await store.add(USERS, {"name": "Jason"})
    store.fail("count", USERS)
    response = await client.get("/api/v1/stats", headers=auth_headers)
    assert response.json() == {"bookings": 1, "events": 0, "users": 1}


@pytest.mark.asyncio
async def test_view_reports_subscription_error(client: AsyncClient, auth_headers, store):
    store.fail("subscribe", CANCELLATION_REQUESTS)
    response = await client.get("/api/v1/views/cancellations", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["loading"] is False
    assert data["error"] == "Unable to connect to 'cancellation_requests'. Check permissions."
    assert data["requests"] == []


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
