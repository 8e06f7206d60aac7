"""
Password hashing, session tokens and the authenticated-session dependency.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from werkzeug.security import check_password_hash, generate_password_hash

from courtsync.services.session_service import ConsoleSession, SessionRegistry, get_session_registry

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def resolve_session(token: str, registry: SessionRegistry) -> ConsoleSession:
    session = registry.get(token) if token else None
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in or session expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    registry: SessionRegistry = Depends(get_session_registry),
) -> ConsoleSession:
    token = credentials.credentials if credentials else ""
    return resolve_session(token, registry)
