"""
Channel Hub — WebSocket Live Feed
===================================
Drives the entries table's live refresh toggle. The server does not push on
change: while live mode is on it re-fetches the channel's entries every
LIVE_REFRESH_SECONDS and sends the full list.

Client messages:
    {"type": "live", "enabled": true, "channel": "sales-campaign"}
    {"type": "live", "enabled": false}
    {"type": "ping"}

Server events:
    connected, live_started, live_stopped, entries, error, pong

A poll that finds its session logged out sends an error and closes with 4401.

Usage:
    app.add_api_websocket_route("/ws/entries", entries_feed)
"""
from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from fastapi import Depends, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from dashboard.api.deps import get_store
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError, SessionError
from hub.lib.live_refresh import LiveRefresh
from hub.lib.logger import setup_logger
from hub.reporting.channels import get_channel

logger = setup_logger("websocket")


class WebSocketManager:
    """Tracks active live feed connections."""

    def __init__(self):
        self._connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        self._connections.add(websocket)
        logger.info(
            "WebSocket connected. Active connections: %d", len(self._connections)
        )

    def disconnect(self, websocket: WebSocket):
        """Remove a disconnected WebSocket."""
        self._connections.discard(websocket)
        logger.info(
            "WebSocket disconnected. Active connections: %d", len(self._connections)
        )

    async def send_to(self, websocket: WebSocket, message: Dict[str, Any]):
        """Send a message to a specific connection."""
        payload = json.dumps(
            {
                **message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            default=str,
        )
        try:
            await websocket.send_text(payload)
        except Exception:
            self._connections.discard(websocket)

    @property
    def connection_count(self) -> int:
        return len(self._connections)


# Singleton manager
ws_manager = WebSocketManager()


def _make_poller(websocket: WebSocket, store: EntityStore, session, channel: str,
                 interval: Optional[float]) -> LiveRefresh:
    async def fetch():
        return await asyncio.to_thread(store.list_entries, session, channel)

    async def deliver(entries):
        await ws_manager.send_to(websocket, {
            "event": "entries",
            "data": {"channel": channel, "results": entries, "count": len(entries)},
        })

    async def report(exc: Exception):
        message = exc.message if isinstance(exc, HubError) else str(exc)
        await ws_manager.send_to(websocket, {"event": "error", "data": {"message": message}})
        if isinstance(exc, SessionError):
            # Logged out while live: the poller has ended, drop the feed too
            try:
                await websocket.close(code=4401, reason=message)
            except RuntimeError as e:
                logger.debug("Live feed already closed: %s", e)

    return LiveRefresh(fetch=fetch, on_update=deliver, on_error=report,
                       interval=interval, name=channel)


async def entries_feed(websocket: WebSocket, store: EntityStore = Depends(get_store)):
    """
    Live refresh feed for one entries view.

    Authenticates with ?token=<session token>. Closing the socket is the view
    teardown and stops any running poll.
    """
    try:
        session = websocket.app.state.sessions.get(websocket.query_params.get("token"))
    except SessionError as e:
        await websocket.close(code=4401, reason=e.message)
        return

    interval = getattr(websocket.app.state, "live_refresh_seconds", None)
    await ws_manager.connect(websocket)
    await ws_manager.send_to(websocket, {
        "event": "connected",
        "data": {"message": "Connected to Channel Hub live feed"},
    })

    poller: Optional[LiveRefresh] = None
    try:
        while websocket.application_state == WebSocketState.CONNECTED:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("type") == "ping":
                await ws_manager.send_to(websocket, {"event": "pong", "data": {}})
                continue

            if msg.get("type") != "live":
                continue

            if poller is not None:
                await poller.stop()
                poller = None

            if not msg.get("enabled"):
                await ws_manager.send_to(websocket, {"event": "live_stopped", "data": {}})
                continue

            channel = msg.get("channel")
            try:
                get_channel(channel)
            except HubError as e:
                await ws_manager.send_to(websocket, {"event": "error", "data": {"message": e.message}})
                continue

            poller = _make_poller(websocket, store, session, channel, interval)
            poller.start()
            await ws_manager.send_to(websocket, {
                "event": "live_started",
                "data": {"channel": channel, "interval": poller.interval},
            })
    except WebSocketDisconnect:
        pass
    finally:
        if poller is not None:
            await poller.stop()
        ws_manager.disconnect(websocket)
