"""
Channel Hub — Sessions
========================

A Session is acquired at login, passed explicitly to every entity store call,
and invalidated at logout. The registry maps the opaque API token handed to
the frontend onto the live Session.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from hub.lib.errors import SessionError
from hub.lib.logger import setup_logger

logger = setup_logger("session")


@dataclass
class Session:
    token: str
    user_id: str
    email: Optional[str]
    access_token: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    active: bool = True

    def require_active(self) -> "Session":
        if not self.active:
            raise SessionError("Session has been logged out")
        return self

    def public_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


class SessionRegistry:
    """In-process map of API token -> Session."""

    def __init__(self, on_invalidate: Optional[Callable[[Session], None]] = None):
        self._sessions: Dict[str, Session] = {}
        self._on_invalidate = on_invalidate

    def acquire(self, user_id: str, email: Optional[str], access_token: str) -> Session:
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            email=email,
            access_token=access_token,
        )
        self._sessions[session.token] = session
        logger.info("Session opened for %s (%d active)", email or user_id, len(self._sessions))
        return session

    def get(self, token: Optional[str]) -> Session:
        if not token:
            raise SessionError("Missing session token")
        session = self._sessions.get(token)
        if session is None:
            raise SessionError("Unknown or expired session")
        return session.require_active()

    def invalidate(self, token: str) -> Optional[Session]:
        session = self._sessions.pop(token, None)
        if session is None:
            return None
        session.active = False
        if self._on_invalidate:
            self._on_invalidate(session)
        logger.info("Session closed for %s (%d active)", session.email or session.user_id, len(self._sessions))
        return session

    def invalidate_all(self) -> int:
        tokens = list(self._sessions)
        for token in tokens:
            self.invalidate(token)
        return len(tokens)

    @property
    def active_count(self) -> int:
        return len(self._sessions)
