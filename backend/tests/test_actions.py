"""
Tests for the action dispatcher: event request decisions and the
two-step cancellation accept.
"""

import pytest
from fastapi import HTTPException

from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS
from courtsync.services.actions import (
    accept_cancellation,
    approve_event_request,
    decline_event_request,
    reject_cancellation,
)
from courtsync.services.interfaces.document_store import DocumentNotFound


@pytest.mark.asyncio
async def test_approve_changes_only_status(store, event_request):
    before = await store.get_one(EVENT_BOOKINGS, event_request)

    response = await approve_event_request(store, event_request)

    after = await store.get_one(EVENT_BOOKINGS, event_request)
    assert response.status == "approved"
    assert after["status"] == "approved"
    assert {k: v for k, v in after.items() if k != "status"} == \
        {k: v for k, v in before.items() if k != "status"}


@pytest.mark.asyncio
async def test_decline_sets_declined(store, event_request):
    await decline_event_request(store, event_request)
    assert (await store.get_one(EVENT_BOOKINGS, event_request))["status"] == "declined"


@pytest.mark.asyncio
async def test_event_update_failure_leaves_status(store, event_request):
    store.fail("update_fields", EVENT_BOOKINGS)

    with pytest.raises(HTTPException) as exc:
        await approve_event_request(store, event_request)

    assert exc.value.status_code == 502
    assert exc.value.detail == "Error updating status."
    assert (await store.get_one(EVENT_BOOKINGS, event_request))["status"] == "PENDING"


@pytest.mark.asyncio
async def test_approve_unknown_request_is_404(store):
    with pytest.raises(HTTPException) as exc:
        await approve_event_request(store, "does-not-exist")
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_accept_marks_processed_and_deletes_booking(store, cancellation_request, court_booking):
    response = await accept_cancellation(store, cancellation_request)

    assert response.booking_deleted is True
    assert response.booking_id == court_booking
    assert (await store.get_one(CANCELLATION_REQUESTS, cancellation_request))["processed"] is True
    with pytest.raises(DocumentNotFound):
        await store.get_one(BOOKINGS, court_booking)


@pytest.mark.asyncio
async def test_accept_with_missing_booking_still_processes(store):
    request_id = await store.add(CANCELLATION_REQUESTS, {"bookingId": "already-gone", "processed": False})

    response = await accept_cancellation(store, request_id)

    assert response.booking_id == "already-gone"
    assert (await store.get_one(CANCELLATION_REQUESTS, request_id))["processed"] is True


@pytest.mark.asyncio
async def test_accept_without_reference_skips_delete(store, court_booking):
    request_id = await store.add(CANCELLATION_REQUESTS, {"bookingId": "N/A"})
    store.fail("delete", BOOKINGS)

    response = await accept_cancellation(store, request_id)

    assert response.booking_deleted is False
    assert response.booking_id is None
    assert (await store.get_one(CANCELLATION_REQUESTS, request_id))["processed"] is True
    assert await store.count(BOOKINGS) == 1


@pytest.mark.asyncio
async def test_accept_delete_failure_leaves_processed_request_and_booking(
    store, cancellation_request, court_booking,
):
    store.fail("delete", BOOKINGS)

    with pytest.raises(HTTPException) as exc:
        await accept_cancellation(store, cancellation_request)

    assert exc.value.status_code == 502
    assert court_booking in exc.value.detail
    # Step 1 is not rolled back
    assert (await store.get_one(CANCELLATION_REQUESTS, cancellation_request))["processed"] is True
    assert (await store.get_one(BOOKINGS, court_booking))["status"] == "active"


@pytest.mark.asyncio
async def test_accept_mark_failure_skips_delete(store, cancellation_request, court_booking):
    store.fail("update_fields", CANCELLATION_REQUESTS)

    with pytest.raises(HTTPException) as exc:
        await accept_cancellation(store, cancellation_request)

    assert exc.value.detail == "Failed to process request. Check if IDs are correct."
    assert await store.count(BOOKINGS) == 1


@pytest.mark.asyncio
async def test_atomic_accept_applies_both_writes(store, cancellation_request, court_booking):
    response = await accept_cancellation(store, cancellation_request, atomic=True)

    assert response.booking_deleted is True
    assert (await store.get_one(CANCELLATION_REQUESTS, cancellation_request))["processed"] is True
    assert await store.count(BOOKINGS) == 0


@pytest.mark.asyncio
async def test_atomic_accept_failure_applies_nothing(store, cancellation_request, court_booking):
    store.fail("run_batch", BOOKINGS)

    with pytest.raises(HTTPException):
        await accept_cancellation(store, cancellation_request, atomic=True)

    assert (await store.get_one(CANCELLATION_REQUESTS, cancellation_request))["processed"] is False
    assert await store.count(BOOKINGS) == 1


@pytest.mark.asyncio
async def test_reject_removes_only_the_request(store, cancellation_request, court_booking):
    await reject_cancellation(store, cancellation_request)

    assert await store.count(CANCELLATION_REQUESTS) == 0
    assert (await store.get_one(BOOKINGS, court_booking))["status"] == "active"


@pytest.mark.asyncio
async def test_reject_failure_is_reported(store, cancellation_request):
    store.fail("delete", CANCELLATION_REQUESTS)

    with pytest.raises(HTTPException) as exc:
        await reject_cancellation(store, cancellation_request)

    assert exc.value.status_code == 502
    assert await store.count(CANCELLATION_REQUESTS) == 1
