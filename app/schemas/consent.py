"""Consent ledger schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import NOTE_MAX_LENGTH


class ConsentEntryRead(BaseModel):
    """One of the caller's own entries, note included."""

    boundary_id: int
    accepted: bool
    note: str | None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConsentEntryUpdate(BaseModel):
    boundary_id: int = Field(gt=0)
    accepted: bool
    note: str | None = Field(default=None, max_length=NOTE_MAX_LENGTH)

    @field_validator("note")
    @classmethod
    def _blank_note_means_unchanged(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class ConsentEntriesUpdate(BaseModel):
    entries: list[ConsentEntryUpdate]


class LedgerRead(BaseModel):
    relationship_id: int
    entries: list[ConsentEntryRead]


class NoteUpdate(BaseModel):
    # Length and emptiness are checked by the ledger service.
    note: str
