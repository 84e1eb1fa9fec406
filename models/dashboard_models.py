"""
Channel Hub — Pydantic Models
===============================

Request/response models for auth, reference lists, entries and targets.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── Auth Models ─────────────────────────────────────────────

class LoginRequest(BaseModel):
    """Email/password login."""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Session token to send back as `Authorization: Bearer <token>`."""
    token: str
    user_id: str
    email: Optional[str] = None


# ─── Reference List Models ───────────────────────────────────

class NameCreate(BaseModel):
    """Create a product or team member."""
    name: str = Field(min_length=1)


class NamedRecord(BaseModel):
    """Product or team member as returned by API."""
    id: str
    name: str
    createdAt: Optional[Any] = None


# ─── Entry Models ────────────────────────────────────────────

class EntryCreate(BaseModel):
    """New data entry. Channel fields are passed flat alongside date."""
    model_config = ConfigDict(extra="allow")

    channel: str
    date: Optional[str] = None

    def payload(self) -> dict:
        return self.model_dump(exclude={"channel"})


class EntryUpdate(BaseModel):
    """Partial entry update: only supplied keys are replaced."""
    model_config = ConfigDict(extra="allow")

    date: Optional[str] = None

    def payload(self) -> dict:
        data = dict(self.model_extra or {})
        if "date" in self.model_fields_set:
            data["date"] = self.date
        return data


# ─── Target Models ───────────────────────────────────────────

class TargetCreate(BaseModel):
    """Goal amount for a channel and product."""
    channel: str
    product: str = Field(min_length=1)
    amount: float = Field(ge=0)


# ─── Common Responses ────────────────────────────────────────

class CreatedResponse(BaseModel):
    """Result of a create call."""
    id: str
    status: str = "created"
    message: str


class StatusResponse(BaseModel):
    """Result of an update or delete call."""
    status: str
    message: str
