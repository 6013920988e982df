"""Relationship, consent ledger and match endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.models.user import User
from app.schemas.consent import ConsentEntriesUpdate, ConsentEntryRead, LedgerRead, NoteUpdate
from app.schemas.matches import CommonBoundariesRead
from app.schemas.relationship import (
    BlockRead,
    InvitationCreated,
    InvitationDecision,
    InvitationRead,
    RelationshipRead,
)
from app.security import require_party
from app.services import consent as consent_service
from app.services import matches as match_service
from app.services import relationships as relationship_service

router = APIRouter(prefix="/relationships", tags=["relationships"])


def _ledger(relationship_id: int, entries) -> LedgerRead:
    return LedgerRead(
        relationship_id=relationship_id,
        entries=[ConsentEntryRead.model_validate(entry) for entry in entries],
    )


@router.get("", response_model=list[RelationshipRead])
def list_relationships(db: Session = Depends(get_db), party: User = Depends(require_party)) -> list[RelationshipRead]:
    return [
        RelationshipRead(
            id=relationship.id,
            state=relationship.status,
            role="initiator" if relationship.initiator_id == party.id else "responder",
            partner_id=partner.id if partner is not None else None,
            partner_display_name=partner.display_name if partner is not None else None,
            partner_avatar_url=partner.avatar_url if partner is not None else None,
            created_at=relationship.created_at,
            updated_at=relationship.updated_at,
        )
        for relationship, partner in relationship_service.list_relationships(db, party.id)
    ]


@router.post("/invite", response_model=InvitationCreated, status_code=status.HTTP_201_CREATED)
def create_invitation(db: Session = Depends(get_db), party: User = Depends(require_party)) -> InvitationCreated:
    relationship = relationship_service.invite(db, party)
    return InvitationCreated(
        relationship_id=relationship.id,
        invitation_token=relationship.invitation_token,
        invite_url=f"{get_settings().FRONTEND_URL}/invite/{relationship.invitation_token}",
    )


@router.get("/invite/{token}", response_model=InvitationRead)
def inspect_invitation(
    token: str, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> InvitationRead:
    relationship, initiator = relationship_service.inspect(db, token, party)
    return InvitationRead(
        relationship_id=relationship.id,
        initiator_display_name=initiator.display_name if initiator is not None else "Unknown user",
        initiator_avatar_url=initiator.avatar_url if initiator is not None else None,
        state=relationship.status,
        created_at=relationship.created_at,
    )


@router.post("/accept/{token}", response_model=InvitationDecision)
def accept_invitation(
    token: str, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> InvitationDecision:
    """Accept an invitation; repeating the call is harmless."""

    relationship = relationship_service.accept(db, token, party)
    return InvitationDecision(relationship_id=relationship.id, state=relationship.status)


@router.post("/decline/{token}", response_model=InvitationDecision)
def decline_invitation(
    token: str, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> InvitationDecision:
    relationship = relationship_service.decline(db, token, party)
    return InvitationDecision(relationship_id=relationship.id, state=relationship.status)


@router.delete("/{relationship_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def dissolve_relationship(
    relationship_id: int, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> Response:
    relationship_service.dissolve(db, relationship_id, party)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{relationship_id}/block", response_model=BlockRead, status_code=status.HTTP_201_CREATED)
def block_relationship(
    relationship_id: int, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> BlockRead:
    block_row = relationship_service.block(db, relationship_id, party)
    return BlockRead(blocked_id=block_row.blocked_id, created_at=block_row.created_at)


@router.get("/{relationship_id}/boundaries", response_model=LedgerRead)
def get_own_ledger(
    relationship_id: int, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> LedgerRead:
    """The caller's own entries only."""

    return _ledger(relationship_id, consent_service.get_own(db, relationship_id, party))


@router.put("/{relationship_id}/boundaries", response_model=LedgerRead)
def set_ledger_entries(
    relationship_id: int,
    payload: ConsentEntriesUpdate,
    db: Session = Depends(get_db),
    party: User = Depends(require_party),
) -> LedgerRead:
    entries = consent_service.set_many(db, relationship_id, party, payload.entries)
    return _ledger(relationship_id, entries)


@router.put("/{relationship_id}/boundaries/{boundary_id}/note", response_model=ConsentEntryRead)
def set_note(
    relationship_id: int,
    boundary_id: int,
    payload: NoteUpdate,
    db: Session = Depends(get_db),
    party: User = Depends(require_party),
) -> ConsentEntryRead:
    entry = consent_service.set_note(db, relationship_id, party, boundary_id, payload.note)
    return ConsentEntryRead.model_validate(entry)


@router.delete(
    "/{relationship_id}/boundaries/{boundary_id}/note",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def clear_note(
    relationship_id: int,
    boundary_id: int,
    db: Session = Depends(get_db),
    party: User = Depends(require_party),
) -> Response:
    consent_service.clear_note(db, relationship_id, party, boundary_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{relationship_id}/common-boundaries", response_model=CommonBoundariesRead)
def get_common_boundaries(
    relationship_id: int, db: Session = Depends(get_db), party: User = Depends(require_party)
) -> CommonBoundariesRead:
    return match_service.common_boundaries(db, relationship_id, party.id)
