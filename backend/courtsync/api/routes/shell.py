"""
View shell endpoints: which console view is active.
"""

from fastapi import APIRouter, Depends

from courtsync.schemas.shell import ShellResponse, ViewSelect
from courtsync.services.session_service import ConsoleSession
from courtsync.core.security import get_current_session

router = APIRouter(prefix="/shell", tags=["Shell"])


@router.get("", response_model=ShellResponse)
async def get_shell(session: ConsoleSession = Depends(get_current_session)):
    return session.shell()


@router.put("/view", response_model=ShellResponse)
async def select_view(
    selection: ViewSelect,
    session: ConsoleSession = Depends(get_current_session),
):
    """Switch the active view. Exactly one view is active at a time."""
    session.switch_view(selection.view)
    return session.shell()
