"""
Supabase Auth Integration
==========================

Email/password login against Supabase Auth. A successful login opens a
Session in the registry and keeps the signed-in client for that user's table
calls; logout signs the client out and drops it.

Setup:
1. Enable the Email provider in Supabase -> Authentication -> Providers
2. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env
"""

import logging
from typing import Any, Dict

from hub.lib import config
from hub.lib.errors import SessionError
from hub.lib.session import Session, SessionRegistry
from hub.lib.supabase_client import (
    new_client,
    register_session_client,
    release_session_client,
)

logger = logging.getLogger(__name__)


def _auth_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or "Authentication failed"


def end_remote_session(session: Session) -> None:
    """Sign the user's client out of Supabase and forget it."""
    client = release_session_client(session.access_token)
    if client is None:
        return
    try:
        client.auth.sign_out()
    except Exception as e:
        logger.warning("Supabase sign-out failed for %s: %s", session.email, e)


class SupabaseAuth:
    """Supabase Auth connector bound to a session registry."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    @property
    def is_configured(self) -> bool:
        return bool(config.SUPABASE_URL and config.SUPABASE_ANON_KEY)

    def get_status(self) -> Dict[str, Any]:
        return {
            "name": "Supabase Auth",
            "configured": self.is_configured,
            "active_sessions": self.registry.active_count,
        }

    def sign_in(self, email: str, password: str) -> Session:
        """Authenticate and open a Session. Raises SessionError on bad credentials."""
        client = new_client()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.info("Login failed for %s: %s", email, e)
            raise SessionError(_auth_message(e)) from e

        if not response or not response.session or not response.user:
            raise SessionError("Authentication failed")

        session = self.registry.acquire(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=response.session.access_token,
        )
        register_session_client(session.access_token, client)
        return session

    def sign_out(self, token: str) -> bool:
        """Invalidate a session. Returns False when the token was not active."""
        return self.registry.invalidate(token) is not None
