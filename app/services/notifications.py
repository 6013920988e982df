"""Notification emitter and recipient-side read operations.

Notifications are advisory. They are persisted after the write that caused
them has been committed, so a failed insert here never undoes a ledger or
lifecycle change; it is logged and dropped.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.notification import Notification, NotificationKind
from app.utils.errors import forbidden, not_found

logger = logging.getLogger(__name__)

_TEMPLATES: dict[NotificationKind, tuple[str, str]] = {
    NotificationKind.INVITATION_ACCEPTED: (
        "Invitation accepted",
        "{partner} accepted your invitation.",
    ),
    NotificationKind.RELATIONSHIP_DELETED: (
        "Relationship ended",
        "{partner} ended your relationship.",
    ),
    NotificationKind.NEW_COMMON_LIMIT: (
        "New common boundary",
        "You and {partner} both accept \"{boundary}\".",
    ),
    NotificationKind.LIMIT_REMOVED: (
        "Common boundary removed",
        "\"{boundary}\" is no longer shared with {partner}.",
    ),
}


def render(kind: NotificationKind, **context: str) -> tuple[str, str]:
    """Return ``(title, message)`` for a notification kind."""

    title, template = _TEMPLATES[kind]
    return title, template.format(**context)


def _persist(db: Session, notification: Notification) -> None:
    db.add(notification)
    db.commit()


def emit(
    db: Session,
    *,
    recipient_id: int,
    kind: NotificationKind,
    related_party_id: int | None = None,
    related_relationship_id: int | None = None,
    **context: str,
) -> Notification | None:
    """Persist one notification, best effort.

    Must be called after the triggering change is committed.
    """

    title, message = render(kind, **context)
    notification = Notification(
        recipient_id=recipient_id,
        kind=kind,
        title=title,
        message=message,
        related_party_id=related_party_id,
        related_relationship_id=related_relationship_id,
        is_read=False,
    )
    try:
        _persist(db, notification)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Notification not persisted",
            extra={"recipient_id": recipient_id, "kind": kind.value},
        )
        return None
    logger.info(
        "Notification emitted",
        extra={"notification_id": notification.id, "recipient_id": recipient_id, "kind": kind.value},
    )
    return notification


def classify_flip(previous: bool, current: bool, other_accepted: bool) -> NotificationKind | None:
    """Classify an acceptance change against the other party's entry.

    ``other_accepted`` is the other party's value as read during the write.
    """

    if previous == current or not other_accepted:
        return None
    if current:
        return NotificationKind.NEW_COMMON_LIMIT
    return NotificationKind.LIMIT_REMOVED


def notify_boundary_change(
    db: Session,
    *,
    kind: NotificationKind,
    relationship_id: int,
    actor_id: int,
    actor_name: str,
    other_id: int,
    other_name: str,
    boundary_name: str,
) -> None:
    """Emit the notifications for one boundary that became or stopped being common."""

    if kind is NotificationKind.NEW_COMMON_LIMIT:
        # Each side reads the news from its own point of view.
        emit(
            db,
            recipient_id=actor_id,
            kind=kind,
            related_party_id=other_id,
            related_relationship_id=relationship_id,
            partner=other_name,
            boundary=boundary_name,
        )
        emit(
            db,
            recipient_id=other_id,
            kind=kind,
            related_party_id=actor_id,
            related_relationship_id=relationship_id,
            partner=actor_name,
            boundary=boundary_name,
        )
    elif kind is NotificationKind.LIMIT_REMOVED:
        emit(
            db,
            recipient_id=other_id,
            kind=kind,
            related_party_id=actor_id,
            related_relationship_id=relationship_id,
            partner=actor_name,
            boundary=boundary_name,
        )


def detach_relationship(db: Session, relationship_id: int) -> None:
    """Clear references to a relationship that is about to be deleted. Does not commit."""

    db.execute(
        update(Notification)
        .where(Notification.related_relationship_id == relationship_id)
        .values(related_relationship_id=None)
    )


def detach_party(db: Session, party_id: int) -> None:
    """Clear ``related_party_id`` references to a party being removed. Does not commit."""

    db.execute(
        update(Notification)
        .where(Notification.related_party_id == party_id)
        .values(related_party_id=None)
    )


def list_notifications(db: Session, recipient_id: int, *, unread_only: bool = False) -> list[Notification]:
    stmt = select(Notification).where(Notification.recipient_id == recipient_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    return list(db.scalars(stmt).all())


def count_unread(db: Session, recipient_id: int) -> int:
    stmt = select(func.count(Notification.id)).where(
        Notification.recipient_id == recipient_id, Notification.is_read.is_(False)
    )
    return db.scalar(stmt) or 0


def mark_read(db: Session, notification_id: int, recipient_id: int) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        not_found("NOTIFICATION_NOT_FOUND", "Notification not found.")
    if notification.recipient_id != recipient_id:
        forbidden("NOTIFICATION_FORBIDDEN", "This notification belongs to another user.")
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, recipient_id: int) -> int:
    """Mark every unread notification of ``recipient_id`` as read; return how many changed."""

    result = db.execute(
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.expire_all()
    logger.info("Notifications marked read", extra={"recipient_id": recipient_id, "count": result.rowcount})
    return result.rowcount
