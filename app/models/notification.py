"""Notification model."""
from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Enum as SqlEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class NotificationKind(str, Enum):
    INVITATION_ACCEPTED = "invitation_accepted"
    RELATIONSHIP_DELETED = "relationship_deleted"
    NEW_COMMON_LIMIT = "new_common_limit"
    LIMIT_REMOVED = "limit_removed"


class Notification(Base):
    """Event record consumed by the external delivery channel."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_recipient_read", "recipient_id", "is_read"),)

    recipient_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    kind: Mapped[NotificationKind] = mapped_column(
        SqlEnum(NotificationKind, name="notification_kind"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    related_party_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    related_relationship_id: Mapped[int | None] = mapped_column(
        ForeignKey("relationships.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
