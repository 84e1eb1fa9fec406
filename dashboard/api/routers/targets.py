"""
Channel Hub — Targets Router
==============================
Goal amounts per channel + product, listed with progress against all entries.

Endpoints:
  GET    /api/targets        - Targets newest first, with progress and status
  POST   /api/targets        - Add a target (one per channel + product)
  DELETE /api/targets/{id}   - Delete a target
"""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from dashboard.api.deps import current_session, get_store, http_error
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from hub.reporting.aggregation import target_progress
from hub.reporting.channels import get_channel
from models.dashboard_models import CreatedResponse, StatusResponse, TargetCreate

logger = setup_logger("targets_router")

router = APIRouter(prefix="/api/targets", tags=["targets"])


@router.get("")
async def list_targets(
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """
    Targets with progress over every entry.

    `percentage` is capped at 100 for progress bars; `raw_percentage` is not.
    """
    try:
        targets, entries = await asyncio.gather(
            asyncio.to_thread(store.list_targets, session),
            asyncio.to_thread(store.list_entries, session),
        )
        results = []
        for target in targets:
            progress = target_progress(target, entries)
            results.append({
                **target,
                "progress": progress.progress,
                "percentage": progress.capped_percentage,
                "raw_percentage": progress.percentage,
                "status": progress.status,
            })
        return {"results": results, "count": len(results)}
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("List targets failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch targets")


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_target(
    body: TargetCreate,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Add a target; a second target for the same channel and product is refused."""
    try:
        get_channel(body.channel)
        target_id = store.create_target(session, {
            "channel": body.channel,
            "product": body.product.strip(),
            "amount": body.amount,
        })
        return CreatedResponse(id=target_id, message="Target added successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Create target failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add target")


@router.delete("/{target_id}", response_model=StatusResponse)
async def delete_target(
    target_id: str,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    try:
        store.delete_target(session, target_id)
        return StatusResponse(status="deleted", message="Target deleted successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Delete target failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete target")
