"""Profile export schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas.notification import NotificationRead


class ProfileRead(BaseModel):
    id: int
    email: str
    display_name: str
    avatar_url: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExportedRelationship(BaseModel):
    id: int
    state: str
    role: str
    partner_id: int | None
    created_at: datetime


class ExportedConsentEntry(BaseModel):
    relationship_id: int
    boundary_id: int
    accepted: bool
    note: str | None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExportedBlock(BaseModel):
    blocked_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountExport(BaseModel):
    exported_at: datetime
    profile: ProfileRead
    relationships: list[ExportedRelationship]
    consent_entries: list[ExportedConsentEntry]
    notifications: list[NotificationRead]
    blocks: list[ExportedBlock]
