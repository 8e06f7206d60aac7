"""
Authentication endpoints: register, login, logout and the current admin.
"""

from fastapi import APIRouter, Depends, status

from courtsync.schemas.auth import AdminCredentials, SessionInfo, Token
from courtsync.services.auth_service import register_admin, sign_in, sign_out
from courtsync.services.identity_service import get_identity_provider
from courtsync.services.interfaces.identity import IdentityProvider
from courtsync.services.session_service import ConsoleSession, SessionRegistry, get_session_registry
from courtsync.core.security import get_current_session

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: AdminCredentials,
    provider: IdentityProvider = Depends(get_identity_provider),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Create an administrator account and return a session token."""
    return await register_admin(provider, registry, credentials)


@router.post("/login", response_model=Token)
async def login(
    credentials: AdminCredentials,
    provider: IdentityProvider = Depends(get_identity_provider),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Authenticate and receive a bearer session token."""
    return await sign_in(provider, registry, credentials)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    session: ConsoleSession = Depends(get_current_session),
    provider: IdentityProvider = Depends(get_identity_provider),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """End the console session."""
    await sign_out(provider, registry, session)


@router.get("/me", response_model=SessionInfo)
async def me(session: ConsoleSession = Depends(get_current_session)):
    return session.info()
