"""Notification schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models.notification import NotificationKind


class NotificationRead(BaseModel):
    id: int
    kind: NotificationKind
    title: str
    message: str
    related_party_id: int | None
    related_relationship_id: int | None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    notifications: list[NotificationRead]
    count: int
    unread: int


class ReadAllResult(BaseModel):
    updated: int
