"""Account-level hooks: deletion cascade and personal data export."""
from __future__ import annotations

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from app.models.auth_session import AuthSession
from app.models.consent import ConsentEntry
from app.models.notification import Notification
from app.models.relationship import Block, Relationship
from app.models.user import User
from app.schemas.notification import NotificationRead
from app.schemas.profile import (
    AccountExport,
    ExportedBlock,
    ExportedConsentEntry,
    ExportedRelationship,
    ProfileRead,
)
from app.services import notifications as notification_service
from app.services import relationships as relationship_service
from app.utils.audit import actor_for_party, log_audit
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def delete_account(db: Session, user: User) -> None:
    """Remove a party and everything this backend holds about them.

    Each relationship goes through the regular dissolve path so the other
    member is notified.
    """

    user_id = user.id
    relationship_ids = db.scalars(
        select(Relationship.id).where(
            or_(Relationship.initiator_id == user_id, Relationship.responder_id == user_id)
        )
    ).all()
    for relationship_id in relationship_ids:
        relationship_service.dissolve(db, relationship_id, user)

    notification_service.detach_party(db, user_id)
    db.execute(delete(ConsentEntry).where(ConsentEntry.party_id == user_id))
    db.execute(delete(Notification).where(Notification.recipient_id == user_id))
    db.execute(delete(Block).where(or_(Block.blocker_id == user_id, Block.blocked_id == user_id)))
    db.execute(delete(AuthSession).where(AuthSession.user_id == user_id))
    db.delete(user)
    log_audit(
        db,
        actor=actor_for_party(user_id),
        action="ACCOUNT_DELETED",
        entity="User",
        entity_id=user_id,
        data={"relationships_dissolved": len(relationship_ids)},
    )
    db.commit()
    logger.info(
        "Account deleted",
        extra={"user_id": user_id, "relationships_dissolved": len(relationship_ids)},
    )


def export_account(db: Session, user: User) -> AccountExport:
    """Return the caller's own data. Nothing authored by another party is included."""

    relationships = [
        ExportedRelationship(
            id=relationship.id,
            state=relationship.status.value,
            role="initiator" if relationship.initiator_id == user.id else "responder",
            partner_id=partner.id if partner is not None else None,
            created_at=relationship.created_at,
        )
        for relationship, partner in relationship_service.list_relationships(db, user.id)
    ]
    entries = db.scalars(
        select(ConsentEntry)
        .where(ConsentEntry.party_id == user.id)
        .order_by(ConsentEntry.relationship_id, ConsentEntry.boundary_id)
    ).all()
    blocks = db.scalars(select(Block).where(Block.blocker_id == user.id).order_by(Block.id)).all()

    logger.info("Account exported", extra={"user_id": user.id})
    return AccountExport(
        exported_at=utcnow(),
        profile=ProfileRead.model_validate(user),
        relationships=relationships,
        consent_entries=[ExportedConsentEntry.model_validate(entry) for entry in entries],
        notifications=[
            NotificationRead.model_validate(notification)
            for notification in notification_service.list_notifications(db, user.id)
        ],
        blocks=[ExportedBlock.model_validate(block_row) for block_row in blocks],
    )
