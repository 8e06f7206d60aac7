"""
Event booking request actions: approve or decline a pending request.
"""

from fastapi import APIRouter, Depends

from courtsync.schemas.actions import EventActionResponse
from courtsync.services.actions import approve_event_request, decline_event_request
from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.services.session_service import ConsoleSession
from courtsync.services.store_factory import get_document_store
from courtsync.core.security import get_current_session

router = APIRouter(prefix="/event-requests", tags=["Event Requests"])


@router.post("/{request_id}/approve", response_model=EventActionResponse)
async def approve(
    request_id: str,
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    return await approve_event_request(store, request_id)


@router.post("/{request_id}/decline", response_model=EventActionResponse)
async def decline(
    request_id: str,
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    return await decline_event_request(store, request_id)
