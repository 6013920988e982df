"""Relationship lifecycle: invite, accept/decline, dissolve, block.

State machine::

    pending -> accepted | declined
    accepted -> (row deleted by dissolve or block)

``accept`` is retry-safe: the ``pending -> accepted`` transition is a
conditional UPDATE, and a replay by the same responder returns the
accepted relationship without a second notification.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.orm import Session

from app.models.consent import ConsentEntry
from app.models.notification import NotificationKind
from app.models.relationship import Block, Relationship, RelationshipStatus
from app.models.user import User
from app.services import notifications as notification_service
from app.utils.audit import actor_for_party, log_audit
from app.utils.errors import conflict, error_response, forbidden, not_found
from app.utils.time import utcnow
from app.utils.tokens import gen_invitation_token

logger = logging.getLogger(__name__)


def _audit_relationship(
    db: Session,
    *,
    party_id: int | None,
    action: str,
    relationship_id: int,
    data: dict | None = None,
) -> None:
    log_audit(
        db,
        actor=actor_for_party(party_id),
        action=action,
        entity="Relationship",
        entity_id=relationship_id,
        data=data,
    )


def _get_by_token_or_404(db: Session, token: str) -> Relationship:
    relationship = db.scalars(select(Relationship).where(Relationship.invitation_token == token)).first()
    if relationship is None:
        not_found("INVITATION_NOT_FOUND", "Invitation not found or expired.")
    return relationship


def _ensure_not_initiator(relationship: Relationship, party_id: int) -> None:
    if relationship.initiator_id == party_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_response("SELF_INVITATION", "You cannot answer your own invitation."),
        )


def get_member_relationship(db: Session, relationship_id: int, party_id: int) -> Relationship:
    """Return the relationship when ``party_id`` belongs to it.

    Unknown ids raise 404, non-members raise 403.
    """

    relationship = db.get(Relationship, relationship_id)
    if relationship is None:
        not_found("RELATIONSHIP_NOT_FOUND", "Relationship not found.")
    if not relationship.is_member(party_id):
        forbidden("RELATIONSHIP_FORBIDDEN", "You are not part of this relationship.")
    return relationship


def find_block(db: Session, party_a: int, party_b: int) -> Block | None:
    """Return a block between the two parties, in either direction."""

    stmt = select(Block).where(
        or_(
            and_(Block.blocker_id == party_a, Block.blocked_id == party_b),
            and_(Block.blocker_id == party_b, Block.blocked_id == party_a),
        )
    )
    return db.scalars(stmt).first()


def _accepted_pair_clause(party_a: int, party_b: int):
    return and_(
        Relationship.status == RelationshipStatus.ACCEPTED,
        or_(
            and_(Relationship.initiator_id == party_a, Relationship.responder_id == party_b),
            and_(Relationship.initiator_id == party_b, Relationship.responder_id == party_a),
        ),
    )


def _accepted_between(db: Session, party_a: int, party_b: int) -> Relationship | None:
    return db.scalars(select(Relationship).where(_accepted_pair_clause(party_a, party_b))).first()


def _count_accepted_between(db: Session, party_a: int, party_b: int) -> int:
    """Count accepted rows for the pair, including this transaction's own UPDATE."""

    stmt = select(func.count(Relationship.id)).where(_accepted_pair_clause(party_a, party_b))
    return db.scalar(stmt) or 0


def list_relationships(db: Session, party_id: int) -> list[tuple[Relationship, User | None]]:
    """Return the party's relationships paired with the partner (``None`` while pending)."""

    stmt = (
        select(Relationship)
        .where(or_(Relationship.initiator_id == party_id, Relationship.responder_id == party_id))
        .order_by(Relationship.created_at.desc(), Relationship.id.desc())
    )
    result: list[tuple[Relationship, User | None]] = []
    for relationship in db.scalars(stmt).all():
        partner_id = relationship.other_member(party_id)
        partner = db.get(User, partner_id) if partner_id is not None else None
        result.append((relationship, partner))
    return result


def invite(db: Session, initiator: User) -> Relationship:
    """Create a pending relationship carrying a fresh invitation token."""

    relationship = Relationship(
        initiator_id=initiator.id,
        responder_id=None,
        invitation_token=gen_invitation_token(),
        status=RelationshipStatus.PENDING,
    )
    db.add(relationship)
    db.flush()
    _audit_relationship(db, party_id=initiator.id, action="INVITATION_CREATED", relationship_id=relationship.id)
    db.commit()
    db.refresh(relationship)
    logger.info("Invitation created", extra={"relationship_id": relationship.id, "initiator_id": initiator.id})
    return relationship


def inspect(db: Session, token: str, requester: User) -> tuple[Relationship, User | None]:
    """Return the invitation and its initiator, as seen by a prospective responder."""

    relationship = _get_by_token_or_404(db, token)
    _ensure_not_initiator(relationship, requester.id)
    if relationship.status is RelationshipStatus.ACCEPTED:
        conflict("INVITATION_ALREADY_ACCEPTED", "This invitation has already been accepted.")
    return relationship, db.get(User, relationship.initiator_id)


def _transition_from_pending(
    db: Session, relationship_id: int, responder_id: int, target: RelationshipStatus
) -> bool:
    """Move a relationship out of ``pending``; return whether this call did it.

    The loaded instance is not synchronized; callers refresh it.
    """

    result = db.execute(
        update(Relationship)
        .where(Relationship.id == relationship_id, Relationship.status == RelationshipStatus.PENDING)
        .values(responder_id=responder_id, status=target, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def accept(db: Session, token: str, requester: User) -> Relationship:
    """Accept an invitation. Replays by the accepting party succeed without side effects."""

    relationship = _get_by_token_or_404(db, token)
    _ensure_not_initiator(relationship, requester.id)

    if relationship.status is RelationshipStatus.ACCEPTED:
        return _accepted_replay(relationship, requester)
    if relationship.status is RelationshipStatus.DECLINED:
        conflict("INVITATION_ALREADY_DECLINED", "This invitation has been declined.")

    if find_block(db, relationship.initiator_id, requester.id) is not None:
        forbidden("PAIRING_BLOCKED", "This invitation can no longer be accepted.")
    if _accepted_between(db, relationship.initiator_id, requester.id) is not None:
        conflict("RELATIONSHIP_EXISTS", "You already have a relationship with this person.")

    if not _transition_from_pending(db, relationship.id, requester.id, RelationshipStatus.ACCEPTED):
        # Lost the race against a concurrent answer; report what won.
        db.refresh(relationship)
        if relationship.status is RelationshipStatus.ACCEPTED:
            return _accepted_replay(relationship, requester)
        conflict("INVITATION_ALREADY_DECLINED", "This invitation has been declined.")

    if _count_accepted_between(db, relationship.initiator_id, requester.id) > 1:
        # A reverse invitation between the same pair was accepted concurrently.
        db.rollback()
        conflict("RELATIONSHIP_EXISTS", "You already have a relationship with this person.")

    _audit_relationship(
        db,
        party_id=requester.id,
        action="INVITATION_ACCEPTED",
        relationship_id=relationship.id,
        data={"initiator_id": relationship.initiator_id},
    )
    db.commit()
    db.refresh(relationship)
    logger.info(
        "Invitation accepted",
        extra={"relationship_id": relationship.id, "responder_id": requester.id},
    )

    notification_service.emit(
        db,
        recipient_id=relationship.initiator_id,
        kind=NotificationKind.INVITATION_ACCEPTED,
        related_party_id=requester.id,
        related_relationship_id=relationship.id,
        partner=requester.display_name,
    )
    return relationship


def _accepted_replay(relationship: Relationship, requester: User) -> Relationship:
    if relationship.responder_id != requester.id:
        conflict("INVITATION_ALREADY_ACCEPTED", "This invitation has already been accepted.")
    logger.info(
        "Invitation already accepted by requester; replay ignored",
        extra={"relationship_id": relationship.id, "responder_id": requester.id},
    )
    return relationship


def decline(db: Session, token: str, requester: User) -> Relationship:
    """Decline an invitation. Terminal; a new invitation is needed to pair later."""

    relationship = _get_by_token_or_404(db, token)
    _ensure_not_initiator(relationship, requester.id)
    if relationship.status is RelationshipStatus.ACCEPTED:
        conflict("INVITATION_ALREADY_ACCEPTED", "This invitation has already been accepted.")
    if relationship.status is RelationshipStatus.DECLINED:
        conflict("INVITATION_ALREADY_DECLINED", "This invitation has already been declined.")

    if not _transition_from_pending(db, relationship.id, requester.id, RelationshipStatus.DECLINED):
        db.refresh(relationship)
        if relationship.status is RelationshipStatus.ACCEPTED:
            conflict("INVITATION_ALREADY_ACCEPTED", "This invitation has already been accepted.")
        conflict("INVITATION_ALREADY_DECLINED", "This invitation has already been declined.")

    _audit_relationship(db, party_id=requester.id, action="INVITATION_DECLINED", relationship_id=relationship.id)
    db.commit()
    db.refresh(relationship)
    logger.info("Invitation declined", extra={"relationship_id": relationship.id, "responder_id": requester.id})
    return relationship


def _remove_relationship(db: Session, relationship: Relationship) -> None:
    """Delete a relationship with its ledger rows. Does not commit."""

    relationship_id = relationship.id
    notification_service.detach_relationship(db, relationship_id)
    db.execute(
        delete(ConsentEntry)
        .where(ConsentEntry.relationship_id == relationship_id)
        .execution_options(synchronize_session="fetch")
    )
    db.delete(relationship)
    db.flush()


def dissolve(db: Session, relationship_id: int, requester: User) -> None:
    """Delete a relationship on behalf of one member and tell the other one."""

    relationship = get_member_relationship(db, relationship_id, requester.id)
    other_id = relationship.other_member(requester.id)
    previous_status = relationship.status

    _remove_relationship(db, relationship)
    _audit_relationship(
        db,
        party_id=requester.id,
        action="RELATIONSHIP_DISSOLVED",
        relationship_id=relationship_id,
        data={"status": previous_status.value, "other_party_id": other_id},
    )
    db.commit()
    logger.info("Relationship dissolved", extra={"relationship_id": relationship_id, "party_id": requester.id})

    # A declined invitation was never a pairing; nobody is told about its removal.
    if other_id is not None and previous_status is RelationshipStatus.ACCEPTED:
        notification_service.emit(
            db,
            recipient_id=other_id,
            kind=NotificationKind.RELATIONSHIP_DELETED,
            related_party_id=requester.id,
            partner=requester.display_name,
        )


def block(db: Session, relationship_id: int, requester: User) -> Block:
    """Dissolve the relationship and veto any future pairing with the other member."""

    relationship = get_member_relationship(db, relationship_id, requester.id)
    other_id = relationship.other_member(requester.id)
    if other_id is None:
        conflict("RELATIONSHIP_NOT_ACCEPTED", "Nobody has answered this invitation yet.")
    if find_block(db, requester.id, other_id) is not None:
        conflict("ALREADY_BLOCKED", "A block already exists between these users.")

    _remove_relationship(db, relationship)
    block_row = Block(blocker_id=requester.id, blocked_id=other_id)
    db.add(block_row)
    _audit_relationship(
        db,
        party_id=requester.id,
        action="RELATIONSHIP_BLOCKED",
        relationship_id=relationship_id,
        data={"blocked_id": other_id},
    )
    db.commit()
    db.refresh(block_row)
    logger.info(
        "Relationship blocked",
        extra={"relationship_id": relationship_id, "blocker_id": requester.id, "blocked_id": other_id},
    )
    return block_row
