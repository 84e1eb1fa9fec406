"""
Channel Hub — API Server
==========================

JSON API over the Supabase entity store for the channel metrics dashboard.

Route groups:
  /api/health            - Health check
  /api/auth/*            - Login / logout / current user
  /api/channels/*        - Channel form registry
  /api/products/*        - Product reference list
  /api/team-members/*    - Team member reference list
  /api/entries/*         - Channel data entries + CSV export
  /api/targets/*         - Targets with progress
  /api/analytics/*       - Summary, chart series, report export
  /ws/entries            - WebSocket live refresh feed
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hub.lib import config
from hub.lib.entity_store import EntityStore
from hub.lib.logger import close_file_handlers
from hub.lib.session import SessionRegistry
from integrations.supabase_auth import SupabaseAuth, end_remote_session

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ─── Lifespan ─────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown."""
    logger.info("Starting Channel Hub...")

    if app.state.auth.is_configured:
        logger.info("Supabase configured: %s", config.SUPABASE_URL)
    else:
        logger.warning("Supabase not configured — set SUPABASE_URL and SUPABASE_ANON_KEY in .env")

    logger.info("Channel Hub ready")
    yield

    app.state.sessions.invalidate_all()
    logger.info("Shutting down Channel Hub...")
    close_file_handlers()


# ─── App Setup ────────────────────────────────────────────────

app = FastAPI(
    title="Channel Hub",
    version=VERSION,
    description="Sales & marketing channel metrics: entries, targets, analytics",
    lifespan=lifespan,
)

app.state.sessions = SessionRegistry(on_invalidate=end_remote_session)
app.state.auth = SupabaseAuth(app.state.sessions)
app.state.store = EntityStore()
app.state.live_refresh_seconds = config.LIVE_REFRESH_SECONDS

from dashboard.api.middleware import SessionMiddleware

app.add_middleware(SessionMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Include Routers ──────────────────────────────────────────

from dashboard.api.routers.auth import router as auth_router
from dashboard.api.routers.channels import router as channels_router
from dashboard.api.routers.products import router as products_router
from dashboard.api.routers.team_members import router as team_members_router
from dashboard.api.routers.entries import router as entries_router
from dashboard.api.routers.targets import router as targets_router
from dashboard.api.routers.analytics import router as analytics_router

app.include_router(auth_router)
app.include_router(channels_router)
app.include_router(products_router)
app.include_router(team_members_router)
app.include_router(entries_router)
app.include_router(targets_router)
app.include_router(analytics_router)


# ─── WebSocket ────────────────────────────────────────────────

from dashboard.api.websocket import entries_feed, ws_manager

app.add_api_websocket_route("/ws/entries", entries_feed)


# ─── Health ───────────────────────────────────────────────────

@app.get("/api/health", tags=["system"])
async def health():
    """Health check with service status."""
    return {
        "status": "healthy",
        "service": "Channel Hub",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "integrations": {
            "supabase": app.state.auth.get_status(),
        },
        "sessions": app.state.sessions.active_count,
        "websocket_connections": ws_manager.connection_count,
        "ui": {
            "success_message_ttl_ms": config.SUCCESS_MESSAGE_TTL_MS,
            "live_refresh_seconds": app.state.live_refresh_seconds,
        },
    }
