"""
Channel Hub — Channels Router
===============================
Channel form registry for rendering the entry and edit forms.

Endpoints:
  GET /api/channels              - All channels with their fields
  GET /api/channels/{channel}    - One channel
"""
from __future__ import annotations

from fastapi import APIRouter

from dashboard.api.deps import http_error
from hub.lib.errors import HubError
from hub.reporting.channels import get_channel, registry_as_dict, schema_as_dict

router = APIRouter(prefix="/api/channels", tags=["channels"])


@router.get("")
async def list_channels():
    """All data channels in display order."""
    channels = registry_as_dict()
    return {"results": channels, "count": len(channels)}


@router.get("/{channel}")
async def get_channel_schema(channel: str):
    """Form definition for one channel."""
    try:
        return schema_as_dict(get_channel(channel))
    except HubError as e:
        raise http_error(e) from e
