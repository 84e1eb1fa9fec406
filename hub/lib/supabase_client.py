"""
Supabase Client Helper for Channel Hub.
Provides the shared client (health checks) and one client per signed-in user,
so table calls always run with that user's access token.

Usage:
    from hub.lib.supabase_client import get_client, get_session_client

    client = get_client()
    rows = get_session_client(session.access_token).table("products").select("*").execute()
"""
from typing import Dict, Optional

from hub.lib import config
from hub.lib.errors import ConfigError
from hub.lib.logger import setup_logger

logger = setup_logger(__name__)

_client = None
_session_clients: Dict[str, object] = {}


def new_client():
    """Create a fresh, unshared Supabase client."""
    if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
        raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in .env")

    from supabase import create_client
    return create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)


def get_client():
    """Create and return the shared Supabase client (singleton)."""
    global _client
    if _client is not None:
        return _client

    _client = new_client()
    logger.info("Supabase client connected to %s", config.SUPABASE_URL)
    return _client


def register_session_client(access_token: str, client) -> None:
    """Keep the client a user signed in with, keyed by their access token."""
    _session_clients[access_token] = client
    logger.debug("Session client registered (%d active)", len(_session_clients))


def get_session_client(access_token: str):
    """Return the client whose table queries run as the given user."""
    client = _session_clients.get(access_token)
    if client is not None:
        return client

    # Token issued before a restart: rebuild a client around it
    client = new_client()
    client.postgrest.auth(access_token)
    _session_clients[access_token] = client
    return client


def release_session_client(access_token: str) -> Optional[object]:
    """Drop and return the cached client for a session that has ended."""
    client = _session_clients.pop(access_token, None)
    if client is not None:
        logger.debug("Session client released (%d active)", len(_session_clients))
    return client


def reset_clients() -> None:
    """Forget all cached clients."""
    global _client
    _client = None
    _session_clients.clear()
