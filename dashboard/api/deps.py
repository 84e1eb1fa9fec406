"""
Channel Hub — API Dependencies
================================
Shared FastAPI dependencies and the HubError -> HTTP status mapping.
"""
from __future__ import annotations

from fastapi import HTTPException, Request

from hub.lib.entity_store import EntityStore
from hub.lib.errors import (
    ConfigError,
    DuplicateTargetError,
    HubError,
    NotFoundError,
    SessionError,
    StoreError,
    ValidationError,
)
from hub.lib.session import Session

# Most specific first
_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (DuplicateTargetError, 409),
    (ValidationError, 422),
    (SessionError, 401),
    (ConfigError, 503),
    (StoreError, 502),
)


def http_error(exc: HubError) -> HTTPException:
    """HTTPException carrying the error's own message as detail."""
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return HTTPException(status_code=status, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def current_session(request: Request) -> Session:
    """Session resolved by SessionMiddleware; 401 when there is none."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    try:
        return session.require_active()
    except SessionError as e:
        raise http_error(e) from e
