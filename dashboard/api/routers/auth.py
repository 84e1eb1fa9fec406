"""
Channel Hub — Auth Router
===========================
Session lifecycle: acquired at login, invalidated at logout.

Endpoints:
  POST /api/auth/login   - Email/password login, returns a session token
  POST /api/auth/logout  - Invalidate the current session
  GET  /api/auth/me      - Current session user
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from dashboard.api.deps import current_session, http_error
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from models.dashboard_models import LoginRequest, LoginResponse, StatusResponse

logger = setup_logger("auth_router")

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, request: Request):
    """Sign in and open a session."""
    try:
        session = request.app.state.auth.sign_in(req.email, req.password)
        return LoginResponse(token=session.token, user_id=session.user_id, email=session.email)
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Login failed: %s", e)
        raise HTTPException(status_code=500, detail="Login failed")


@router.post("/logout", response_model=StatusResponse)
async def logout(request: Request, session: Session = Depends(current_session)):
    """Invalidate the caller's session."""
    request.app.state.auth.sign_out(session.token)
    return StatusResponse(status="logged_out", message="Logged out")


@router.get("/me")
async def me(session: Session = Depends(current_session)):
    """Who the current session belongs to."""
    return session.public_dict()
