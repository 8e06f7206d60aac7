"""
Authentication service: administrator sign-up, sign-in and sign-out.
"""

from fastapi import HTTPException, status

from courtsync.schemas.auth import AdminCredentials, Token
from courtsync.services.interfaces.identity import IdentityError, IdentityProvider
from courtsync.services.identity_service import EMAIL_IN_USE, WEAK_PASSWORD
from courtsync.services.session_service import ConsoleSession, SessionRegistry
from courtsync.core.config import get_settings
from courtsync.core.security import new_session_token
from courtsync.core.logging import get_logger

logger = get_logger(__name__)


async def register_admin(
    provider: IdentityProvider,
    registry: SessionRegistry,
    credentials: AdminCredentials,
) -> Token:
    """
    Create an administrator account and sign it in.
    Raises 403 when sign-up is closed, 409 for a taken email, 400 for a weak password.
    """
    settings = get_settings()
    if not settings.ALLOW_SIGNUP:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator sign-up is disabled.",
        )

    try:
        identity = await provider.create_account_with_password(credentials.email, credentials.password)
    except IdentityError as e:
        logger.warning("registration_failed", reason=e.code, email=credentials.email)
        if e.code == EMAIL_IN_USE:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This email is already registered.",
            ) from e
        if e.code == WEAK_PASSWORD:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Password should be at least {settings.MIN_PASSWORD_LENGTH} characters.",
            ) from e
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account.",
        ) from e

    token = new_session_token()
    registry.open(token, identity)
    logger.info("admin_registered", uid=identity.uid)
    return Token(access_token=token)


async def sign_in(
    provider: IdentityProvider,
    registry: SessionRegistry,
    credentials: AdminCredentials,
) -> Token:
    """
    Authenticate an administrator and open a console session.
    Raises 401 if credentials are invalid.
    """
    try:
        identity = await provider.sign_in_with_password(credentials.email, credentials.password)
    except IdentityError as e:
        logger.warning("login_failed", email=credentials.email, reason=e.code)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid administrator credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    token = new_session_token()
    registry.open(token, identity)
    logger.info("admin_logged_in", uid=identity.uid)
    return Token(access_token=token)


async def sign_out(
    provider: IdentityProvider,
    registry: SessionRegistry,
    session: ConsoleSession,
) -> None:
    registry.close(session.token)
    await provider.sign_out(session.identity)
    logger.info("admin_logged_out", uid=session.identity.uid)
