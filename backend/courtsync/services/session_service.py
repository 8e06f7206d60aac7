"""
Console sessions: the signed-in administrator and the active view.

A ConsoleSession is created on successful sign-in and destroyed on
sign-out or expiry. Routes receive it through the get_current_session
dependency instead of reading global state. The view shell lives here:
exactly one of the four views is active per session, and switching views
never touches booking, request or user data.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from courtsync.schemas.auth import AdminIdentity, SessionInfo
from courtsync.schemas.shell import AppView, ShellResponse
from courtsync.services.stats_service import StatsFetcher
from courtsync.core.config import get_settings
from courtsync.core.logging import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConsoleSession:
    token: str
    identity: AdminIdentity
    expires_at: datetime
    active_view: AppView = AppView.OVERVIEW
    stats: StatsFetcher = field(default_factory=StatsFetcher)

    @property
    def expired(self) -> bool:
        return _utcnow() >= self.expires_at

    def switch_view(self, view: AppView) -> AppView:
        previous, self.active_view = self.active_view, view
        logger.info("view_switched", email=self.identity.email, previous=previous.value, view=view.value)
        return self.active_view

    def shell(self) -> ShellResponse:
        return ShellResponse(
            active_view=self.active_view,
            active_slug=self.active_view.slug,
            views=list(AppView),
        )

    def info(self) -> SessionInfo:
        email = self.identity.email
        return SessionInfo(
            uid=self.identity.uid,
            email=email,
            initial=email[:1].upper() or "A",
            active_view=self.active_view,
            expires_at=self.expires_at,
        )


class SessionRegistry:
    """In-process session table keyed by bearer token."""

    def __init__(self, ttl_minutes: int):
        self.ttl = timedelta(minutes=ttl_minutes)
        self._sessions: dict[str, ConsoleSession] = {}

    def open(self, token: str, identity: AdminIdentity) -> ConsoleSession:
        self.purge_expired()
        session = ConsoleSession(token=token, identity=identity, expires_at=_utcnow() + self.ttl)
        self._sessions[token] = session
        structlog.contextvars.bind_contextvars(admin=identity.email)
        logger.info("session_opened", uid=identity.uid)
        return session

    def get(self, token: str) -> Optional[ConsoleSession]:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.expired:
            self._sessions.pop(token, None)
            logger.info("session_expired", email=session.identity.email)
            return None
        return session

    def purge_expired(self) -> int:
        expired = [token for token, session in self._sessions.items() if session.expired]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info("sessions_purged", count=len(expired))
        return len(expired)

    def close(self, token: str) -> Optional[ConsoleSession]:
        session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("session_closed", email=session.identity.email)
        return session

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get session registry singleton. Used as a FastAPI dependency."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry(get_settings().SESSION_TTL_MINUTES)
    return _registry
