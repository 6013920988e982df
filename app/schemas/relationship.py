"""Relationship lifecycle schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from app.models.relationship import RelationshipStatus


class InvitationCreated(BaseModel):
    relationship_id: int
    invitation_token: str
    invite_url: str


class InvitationRead(BaseModel):
    relationship_id: int
    initiator_display_name: str
    initiator_avatar_url: str | None = None
    state: RelationshipStatus
    created_at: datetime


class InvitationDecision(BaseModel):
    relationship_id: int
    state: RelationshipStatus


class RelationshipRead(BaseModel):
    id: int
    state: RelationshipStatus
    role: str
    partner_id: int | None
    partner_display_name: str | None
    partner_avatar_url: str | None
    created_at: datetime
    updated_at: datetime


class BlockRead(BaseModel):
    blocked_id: int
    created_at: datetime
