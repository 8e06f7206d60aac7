"""
Cancellation request actions.

Accept marks the request processed and deletes its booking; reject only
removes the request from the queue.
"""

from fastapi import APIRouter, Depends

from courtsync.schemas.actions import CancellationActionResponse
from courtsync.services.actions import accept_cancellation, reject_cancellation
from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.services.session_service import ConsoleSession
from courtsync.services.store_factory import get_document_store
from courtsync.core.config import get_settings
from courtsync.core.security import get_current_session

router = APIRouter(prefix="/cancellations", tags=["Cancellations"])


@router.post("/{request_id}/accept", response_model=CancellationActionResponse)
async def accept(
    request_id: str,
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    """Refund and delete: mark processed, then delete the referenced booking."""
    return await accept_cancellation(store, request_id, atomic=get_settings().ATOMIC_CANCELLATIONS)


@router.post("/{request_id}/reject", response_model=CancellationActionResponse)
async def reject(
    request_id: str,
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    return await reject_cancellation(store, request_id)
