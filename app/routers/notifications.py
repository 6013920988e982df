"""Notification endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.notification import Notification
from app.models.user import User
from app.schemas.notification import NotificationList, NotificationRead, ReadAllResult
from app.security import require_party
from app.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationList)
def list_notifications(
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    party: User = Depends(require_party),
) -> NotificationList:
    items = notification_service.list_notifications(db, party.id, unread_only=unread_only)
    return NotificationList(
        notifications=[NotificationRead.model_validate(item) for item in items],
        count=len(items),
        unread=notification_service.count_unread(db, party.id),
    )


# Registered before "/{notification_id}/read" so "read-all" is not parsed as an id.
@router.put("/read-all", response_model=ReadAllResult)
def mark_all_read(db: Session = Depends(get_db), party: User = Depends(require_party)) -> ReadAllResult:
    return ReadAllResult(updated=notification_service.mark_all_read(db, party.id))


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    party: User = Depends(require_party),
) -> Notification:
    return notification_service.mark_read(db, notification_id, party.id)
