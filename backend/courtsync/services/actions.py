"""
Action dispatcher: state transitions triggered by an administrator.

EVENT REQUESTS
==============
  pending -> approved | declined

  One field update on the request document. The store applies a
  single-document update atomically, so a failure leaves the status as it
  was and every other field untouched.

CANCELLATION REQUESTS
=====================
  accept:  1. set processed=true on the request
           2. delete the referenced booking (skipped without a reference)
  reject:  delete the request document; the booking is left alone

  Accept is two independent writes. If step 2 fails after step 1 landed,
  the request stays processed while its booking still exists. Nothing is
  rolled back; the error returned to the console says so, and the booking
  has to be removed by hand. Two accepts racing on the same booking both
  succeed (deleting a missing booking is a no-op).

  With ATOMIC_CANCELLATIONS enabled and a store that supports batched
  writes, both steps go through one batch and either both apply or
  neither does.
"""

from typing import Optional

from fastapi import HTTPException, status

from courtsync.models import BOOKINGS, CANCELLATION_REQUESTS, EVENT_BOOKINGS
from courtsync.schemas.actions import CancellationActionResponse, EventActionResponse
from courtsync.services.interfaces.document_store import (
    DocumentNotFound,
    DocumentStore,
    StoreError,
    WriteOp,
)
from courtsync.services.normalizers import booking_reference
from courtsync.core.metrics import record_action
from courtsync.core.logging import get_logger

logger = get_logger(__name__)

APPROVED = "approved"
DECLINED = "declined"

EVENT_UPDATE_FAILED = "Error updating status."
CANCELLATION_FAILED = "Failed to process request. Check if IDs are correct."


def _action_failed(detail: str, not_found: bool = False) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND if not_found else status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )


async def set_event_request_status(
    store: DocumentStore,
    request_id: str,
    new_status: str,
) -> EventActionResponse:
    action = "approve_event" if new_status == APPROVED else "decline_event"
    try:
        await store.update_fields(EVENT_BOOKINGS, request_id, {"status": new_status})
    except StoreError as e:
        record_action(action, "failure")
        logger.error("event_request_update_failed", request_id=request_id, status=new_status, error=str(e))
        raise _action_failed(EVENT_UPDATE_FAILED, not_found=isinstance(e, DocumentNotFound)) from e

    record_action(action, "success")
    logger.info("event_request_updated", request_id=request_id, status=new_status)
    return EventActionResponse(
        message=f"Event request {new_status}",
        request_id=request_id,
        status=new_status,
    )


async def approve_event_request(store: DocumentStore, request_id: str) -> EventActionResponse:
    return await set_event_request_status(store, request_id, APPROVED)


async def decline_event_request(store: DocumentStore, request_id: str) -> EventActionResponse:
    return await set_event_request_status(store, request_id, DECLINED)


async def _load_booking_reference(store: DocumentStore, request_id: str) -> Optional[str]:
    try:
        fields = await store.get_one(CANCELLATION_REQUESTS, request_id)
    except StoreError as e:
        record_action("accept_cancellation", "failure")
        logger.error("cancellation_lookup_failed", request_id=request_id, error=str(e))
        raise _action_failed(CANCELLATION_FAILED, not_found=isinstance(e, DocumentNotFound)) from e
    return booking_reference(fields)


async def accept_cancellation(
    store: DocumentStore,
    request_id: str,
    atomic: bool = False,
) -> CancellationActionResponse:
    booking_id = await _load_booking_reference(store, request_id)

    if atomic and store.supports_transactions and booking_id:
        return await _accept_in_batch(store, request_id, booking_id)

    # Step 1: mark the request processed
    try:
        await store.update_fields(CANCELLATION_REQUESTS, request_id, {"processed": True})
    except StoreError as e:
        record_action("accept_cancellation", "failure")
        logger.error("cancellation_mark_processed_failed", request_id=request_id, error=str(e))
        raise _action_failed(CANCELLATION_FAILED, not_found=isinstance(e, DocumentNotFound)) from e

    if not booking_id:
        record_action("accept_cancellation", "success")
        logger.info("cancellation_accepted", request_id=request_id, booking_id=None)
        return CancellationActionResponse(
            message="Cancellation accepted; no booking was referenced",
            request_id=request_id,
            action="accept",
        )

    # Step 2: delete the booking. Step 1 is not undone if this fails.
    try:
        await store.delete(BOOKINGS, booking_id)
    except StoreError as e:
        record_action("accept_cancellation", "partial")
        logger.error(
            "cancellation_booking_delete_failed",
            request_id=request_id,
            booking_id=booking_id,
            error=str(e),
        )
        raise _action_failed(
            f"Request was marked processed but booking {booking_id} could not be deleted. "
            "Remove the booking manually."
        ) from e

    record_action("accept_cancellation", "success")
    logger.info("cancellation_accepted", request_id=request_id, booking_id=booking_id)
    return CancellationActionResponse(
        message="Cancellation accepted and booking deleted",
        request_id=request_id,
        action="accept",
        booking_id=booking_id,
        booking_deleted=True,
    )


async def _accept_in_batch(
    store: DocumentStore,
    request_id: str,
    booking_id: str,
) -> CancellationActionResponse:
    try:
        await store.run_batch([
            WriteOp("update", CANCELLATION_REQUESTS, request_id, {"processed": True}),
            WriteOp("delete", BOOKINGS, booking_id),
        ])
    except StoreError as e:
        record_action("accept_cancellation", "failure")
        logger.error(
            "cancellation_batch_failed",
            request_id=request_id,
            booking_id=booking_id,
            error=str(e),
        )
        raise _action_failed(CANCELLATION_FAILED, not_found=isinstance(e, DocumentNotFound)) from e

    record_action("accept_cancellation", "success")
    logger.info("cancellation_accepted", request_id=request_id, booking_id=booking_id, atomic=True)
    return CancellationActionResponse(
        message="Cancellation accepted and booking deleted",
        request_id=request_id,
        action="accept",
        booking_id=booking_id,
        booking_deleted=True,
    )


async def reject_cancellation(store: DocumentStore, request_id: str) -> CancellationActionResponse:
    """Drop the request from the queue. The booking stays."""
    try:
        await store.delete(CANCELLATION_REQUESTS, request_id)
    except StoreError as e:
        record_action("reject_cancellation", "failure")
        logger.error("cancellation_reject_failed", request_id=request_id, error=str(e))
        raise _action_failed(CANCELLATION_FAILED) from e

    record_action("reject_cancellation", "success")
    logger.info("cancellation_rejected", request_id=request_id)
    return CancellationActionResponse(
        message="Cancellation request rejected",
        request_id=request_id,
        action="reject",
    )
