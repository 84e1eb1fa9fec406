"""
Channel Hub — Entries Router
==============================
Per-channel data entries. Create and edit both validate against the channel
form registry before anything is sent to the store.

Endpoints:
  GET    /api/entries           - List entries (channel + date/product/team filters)
  GET    /api/entries/export    - Channel CSV of the filtered entries
  GET    /api/entries/{id}      - Single entry
  POST   /api/entries           - Add an entry
  PATCH  /api/entries/{id}      - Replace some fields of an entry
  DELETE /api/entries/{id}      - Delete an entry
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from dashboard.api.deps import current_session, get_store, http_error
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from hub.reporting.channels import build_entry_record, get_channel
from hub.reporting.export import CSV_MEDIA_TYPE, export_channel_csv, export_filename
from hub.reporting.filters import EntryFilter, filter_entries, normalize_filter
from models.dashboard_models import CreatedResponse, EntryCreate, EntryUpdate, StatusResponse

logger = setup_logger("entries_router")

router = APIRouter(prefix="/api/entries", tags=["entries"])


def entry_filter(
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Inclusive YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Inclusive YYYY-MM-DD"),
    product: Optional[str] = Query(None, description="Product name or 'all'"),
    team_member: Optional[str] = Query(None, alias="teamMember", description="Team member name"),
) -> EntryFilter:
    try:
        return normalize_filter({
            "date_from": date_from,
            "date_to": date_to,
            "product": product,
            "team_member": team_member,
        })
    except HubError as e:
        raise http_error(e) from e


def _load(store: EntityStore, session: Session, channel: Optional[str], spec: EntryFilter):
    if channel:
        get_channel(channel)
    return filter_entries(store.list_entries(session, channel=channel), spec)


@router.get("")
async def list_entries(
    channel: Optional[str] = Query(None, description="Channel id"),
    spec: EntryFilter = Depends(entry_filter),
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Entries newest first, narrowed by the given filters."""
    try:
        entries = _load(store, session, channel, spec)
        return {"results": entries, "count": len(entries), "filters": spec.to_dict()}
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("List entries failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch entries")


@router.get("/export")
async def export_entries(
    channel: Optional[str] = Query(None, description="Channel id"),
    spec: EntryFilter = Depends(entry_filter),
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Download the filtered entries as CSV. 204 when there is nothing to export."""
    try:
        entries = _load(store, session, channel, spec)
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Export entries failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to export entries")

    if not entries:
        return Response(status_code=204)

    filename = export_filename(f"{channel}-entries" if channel else "entries")
    return Response(
        content=export_channel_csv(entries),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{entry_id}")
async def get_entry(
    entry_id: str,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    try:
        return store.get_entry(session, entry_id)
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Get entry failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch entry")


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_entry(
    body: EntryCreate,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Validate against the channel's form and add the entry."""
    try:
        record = build_entry_record(body.channel, body.payload())
        entry_id = store.create_entry(session, record)
        return CreatedResponse(id=entry_id, message="Entry added successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Create entry failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add entry")


@router.patch("/{entry_id}", response_model=StatusResponse)
async def update_entry(
    entry_id: str,
    body: EntryUpdate,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Replace the supplied fields, checked against the entry's own channel form."""
    payload = body.payload()
    if not payload:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        current = store.get_entry(session, entry_id)
        updates = build_entry_record(current["channel"], payload, partial=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        store.update_entry(session, entry_id, updates)
        return StatusResponse(status="updated", message="Entry updated successfully!")
    except HTTPException:
        raise
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Update entry failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update entry")


@router.delete("/{entry_id}", response_model=StatusResponse)
async def delete_entry(
    entry_id: str,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    try:
        store.delete_entry(session, entry_id)
        return StatusResponse(status="deleted", message="Entry deleted successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Delete entry failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete entry")
