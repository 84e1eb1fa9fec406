"""
Channel Hub — Team Members Router
===================================

Endpoints:
  GET    /api/team-members        - List team members (by name)
  POST   /api/team-members        - Add a team member
  DELETE /api/team-members/{id}   - Delete a team member
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dashboard.api.deps import current_session, get_store, http_error
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from models.dashboard_models import CreatedResponse, NameCreate, StatusResponse

logger = setup_logger("team_members_router")

router = APIRouter(prefix="/api/team-members", tags=["team-members"])


@router.get("")
async def list_team_members(
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    try:
        members = store.list_team_members(session)
        return {"results": members, "count": len(members)}
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("List team members failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch team members")


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_team_member(
    body: NameCreate,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Team member name is required")
    try:
        member_id = store.create_team_member(session, name)
        return CreatedResponse(id=member_id, message="Team member added successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Create team member failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add team member")


@router.delete("/{member_id}", response_model=StatusResponse)
async def delete_team_member(
    member_id: str,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    try:
        store.delete_team_member(session, member_id)
        return StatusResponse(status="deleted", message="Team member deleted successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Delete team member failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete team member")
