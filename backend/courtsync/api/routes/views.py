"""
Live view endpoints.

GET  /views/{view}                 render from the current snapshot once
WS   /views/{view}/live?token=...  one JSON payload per snapshot

A WebSocket connection is a mounted view: the subscription opens when the
socket is accepted and is released as soon as the client goes away, even
when no new snapshot arrives to notice the disconnect.
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from courtsync.schemas.shell import AppView
from courtsync.schemas.views import ViewState
from courtsync.services.interfaces.document_store import DocumentStore
from courtsync.services.session_service import ConsoleSession, SessionRegistry, get_session_registry
from courtsync.services.store_factory import get_document_store
from courtsync.services.subscriber import live_view, render_once
from courtsync.services.views import LiveView, build_view
from courtsync.core.security import get_current_session
from courtsync.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/views", tags=["Views"])


def _resolve_view(slug: str) -> AppView:
    try:
        return AppView.from_slug(slug)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown view '{slug}'",
        ) from None


def _payload(state: ViewState) -> dict:
    return state.model_dump(mode="json", by_alias=True)


@router.get("/{view_slug}")
async def get_view(
    view_slug: str,
    session: ConsoleSession = Depends(get_current_session),
    store: DocumentStore = Depends(get_document_store),
):
    """Render a view from the current snapshot."""
    view = build_view(_resolve_view(view_slug), store)
    state = await render_once(store, view)
    return _payload(state)


async def _pump(websocket: WebSocket, store: DocumentStore, view: LiveView) -> None:
    async with live_view(store, view) as states:
        async for state in states:
            await websocket.send_json(_payload(state))


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass


@router.websocket("/{view_slug}/live")
async def live_view_socket(
    websocket: WebSocket,
    view_slug: str,
    token: str = Query(""),
    store: DocumentStore = Depends(get_document_store),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = registry.get(token) if token else None
    if session is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Not signed in")
        return
    try:
        app_view = AppView.from_slug(view_slug)
    except ValueError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Unknown view")
        return

    await websocket.accept()
    view = build_view(app_view, store)
    await websocket.send_json(_payload(view.loading_state()))
    logger.info("live_view_mounted", view=app_view.value, email=session.identity.email)

    pump = asyncio.create_task(_pump(websocket, store, view))
    watcher = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        done, _ = await asyncio.wait({pump, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (pump, watcher):
            task.cancel()
        await asyncio.gather(pump, watcher, return_exceptions=True)
        logger.info("live_view_unmounted", view=app_view.value)

    if pump in done:
        error = pump.exception()
        if error is None:
            # Subscription ended after its error payload; nothing more will come
            await websocket.close()
        elif not isinstance(error, WebSocketDisconnect):
            logger.error("live_view_failed", view=app_view.value, error=str(error))
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
