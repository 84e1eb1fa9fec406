"""
Channel Hub — Session Auth Middleware
=======================================
Resolves the `Authorization: Bearer <token>` header to a Session from the
app's SessionRegistry and stores it on request.state.session.

Public endpoints (health, login, docs, channel registry) bypass auth.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from hub.lib.errors import SessionError
from hub.lib.logger import setup_logger

logger = setup_logger("api_middleware")

# Paths that don't require a session
PUBLIC_PATHS = {
    "/api/health",
    "/api/auth/login",
    "/api/channels",
    "/docs",
    "/openapi.json",
    "/redoc",
}

# Prefix paths that are public
PUBLIC_PREFIXES = ("/api/channels/",)


def bearer_token(header: Optional[str]) -> Optional[str]:
    """Token part of an Authorization header, or None."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach the caller's Session to the request or answer 401."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        if (
            path in PUBLIC_PATHS
            or any(path.startswith(p) for p in PUBLIC_PREFIXES)
            or request.method == "OPTIONS"
        ):
            return await call_next(request)

        token = bearer_token(request.headers.get("Authorization"))
        try:
            request.state.session = request.app.state.sessions.get(token)
        except SessionError as e:
            logger.debug("Rejected %s %s: %s", request.method, path, e.message)
            return JSONResponse(status_code=401, content={"detail": e.message})

        return await call_next(request)
