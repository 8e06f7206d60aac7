"""
Aggregate count endpoint for the user management cards.
"""

from fastapi import APIRouter, Depends

from courtsync.schemas.stats import StatsResponse
from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.services.session_service import ConsoleSession
from courtsync.services.store_factory import get_document_store
from courtsync.core.security import get_current_session

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Fetch the three counts again.
    A failed count keeps the value this session last saw.
    """
    return await session.stats.fetch(store)
