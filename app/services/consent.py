"""Consent ledger: each party's acceptance and private note per boundary.

Every read and write here is scoped to the caller's own rows. The only code
allowed to look at both parties' rows together is ``app.services.matches``,
plus the acceptance lookup ``set_many`` performs to classify notifications
(it reads the other party's ``accepted`` flag, never their note).
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import NOTE_MAX_LENGTH
from app.models.catalog import Boundary
from app.models.consent import ConsentEntry
from app.models.notification import NotificationKind
from app.models.user import User
from app.schemas.consent import ConsentEntryUpdate
from app.services import catalog as catalog_service
from app.services import notifications as notification_service
from app.services.relationships import get_member_relationship
from app.utils.errors import not_found, unprocessable

logger = logging.getLogger(__name__)


def _own_entries(db: Session, relationship_id: int, party_id: int) -> list[ConsentEntry]:
    stmt = (
        select(ConsentEntry)
        .where(ConsentEntry.relationship_id == relationship_id, ConsentEntry.party_id == party_id)
        .order_by(ConsentEntry.boundary_id)
    )
    return list(db.scalars(stmt).all())


def _own_entry(db: Session, relationship_id: int, party_id: int, boundary_id: int) -> ConsentEntry | None:
    stmt = select(ConsentEntry).where(
        ConsentEntry.relationship_id == relationship_id,
        ConsentEntry.party_id == party_id,
        ConsentEntry.boundary_id == boundary_id,
    )
    return db.scalars(stmt).first()


def _other_acceptance(
    db: Session, relationship_id: int, other_id: int | None, boundary_ids: set[int]
) -> dict[int, bool]:
    """Return the other party's ``accepted`` flags, as observed now."""

    if other_id is None or not boundary_ids:
        return {}
    stmt = select(ConsentEntry.boundary_id, ConsentEntry.accepted).where(
        ConsentEntry.relationship_id == relationship_id,
        ConsentEntry.party_id == other_id,
        ConsentEntry.boundary_id.in_(boundary_ids),
    )
    return {boundary_id: accepted for boundary_id, accepted in db.execute(stmt).all()}


def _clean_note(note: str | None) -> str:
    cleaned = (note or "").strip()
    if not cleaned:
        unprocessable("NOTE_EMPTY", "Note cannot be empty.")
    if len(cleaned) > NOTE_MAX_LENGTH:
        unprocessable(
            "NOTE_TOO_LONG",
            f"Note cannot exceed {NOTE_MAX_LENGTH} characters.",
            {"max_length": NOTE_MAX_LENGTH},
        )
    return cleaned


def get_own(db: Session, relationship_id: int, party: User) -> list[ConsentEntry]:
    """Return the caller's own entries for a relationship they belong to."""

    get_member_relationship(db, relationship_id, party.id)
    return _own_entries(db, relationship_id, party.id)


def _apply_updates(
    db: Session,
    relationship_id: int,
    party_id: int,
    updates: Sequence[ConsentEntryUpdate],
) -> dict[int, tuple[bool, bool]]:
    """Upsert the caller's rows; return ``{boundary_id: (before, after)}``. Does not commit."""

    boundary_ids = {item.boundary_id for item in updates}
    own = {
        entry.boundary_id: entry
        for entry in db.scalars(
            select(ConsentEntry).where(
                ConsentEntry.relationship_id == relationship_id,
                ConsentEntry.party_id == party_id,
                ConsentEntry.boundary_id.in_(boundary_ids),
            )
        ).all()
    }

    changes: dict[int, tuple[bool, bool]] = {}
    for item in updates:
        entry = own.get(item.boundary_id)
        before = changes[item.boundary_id][0] if item.boundary_id in changes else bool(entry and entry.accepted)
        if entry is None:
            entry = ConsentEntry(
                party_id=party_id,
                relationship_id=relationship_id,
                boundary_id=item.boundary_id,
                accepted=item.accepted,
                note=item.note,
            )
            db.add(entry)
            own[item.boundary_id] = entry
        else:
            entry.accepted = item.accepted
            if item.note is not None:
                entry.note = item.note
        changes[item.boundary_id] = (before, item.accepted)
    db.flush()
    return changes


def set_many(
    db: Session,
    relationship_id: int,
    party: User,
    updates: Sequence[ConsentEntryUpdate],
) -> list[ConsentEntry]:
    """Upsert the caller's entries and emit match notifications for acceptance flips.

    Unknown boundary ids are skipped. Returns the caller's resulting ledger.
    """

    relationship = get_member_relationship(db, relationship_id, party.id)
    other_id = relationship.other_member(party.id)

    known = catalog_service.existing_boundary_ids(db, (item.boundary_id for item in updates))
    valid = [item for item in updates if item.boundary_id in known]
    skipped = len(updates) - len(valid)
    if skipped:
        logger.info(
            "Skipped unknown boundaries",
            extra={"relationship_id": relationship_id, "party_id": party.id, "count": skipped},
        )
    if not valid:
        return _own_entries(db, relationship_id, party.id)

    try:
        changes = _apply_updates(db, relationship_id, party.id, valid)
        theirs = _other_acceptance(db, relationship_id, other_id, set(changes))
        db.commit()
    except IntegrityError:
        # A concurrent request by the same party inserted one of the rows first.
        db.rollback()
        logger.warning(
            "Consent upsert raced; retrying as update",
            extra={"relationship_id": relationship_id, "party_id": party.id},
        )
        changes = _apply_updates(db, relationship_id, party.id, valid)
        theirs = _other_acceptance(db, relationship_id, other_id, set(changes))
        db.commit()

    logger.info(
        "Consent entries updated",
        extra={"relationship_id": relationship_id, "party_id": party.id, "count": len(changes)},
    )

    if other_id is not None:
        _notify_flips(db, relationship_id, party, other_id, changes, theirs)

    return _own_entries(db, relationship_id, party.id)


def _notify_flips(
    db: Session,
    relationship_id: int,
    actor: User,
    other_id: int,
    changes: dict[int, tuple[bool, bool]],
    theirs: dict[int, bool],
) -> None:
    flips: list[tuple[int, NotificationKind]] = []
    for boundary_id, (before, after) in changes.items():
        kind = notification_service.classify_flip(before, after, theirs.get(boundary_id, False))
        if kind is not None:
            flips.append((boundary_id, kind))
    if not flips:
        return

    actor_id = actor.id
    actor_name = actor.display_name
    other = db.get(User, other_id)
    other_name = other.display_name if other is not None else "Your partner"
    for boundary_id, kind in flips:
        boundary = db.get(Boundary, boundary_id)
        notification_service.notify_boundary_change(
            db,
            kind=kind,
            relationship_id=relationship_id,
            actor_id=actor_id,
            actor_name=actor_name,
            other_id=other_id,
            other_name=other_name,
            boundary_name=boundary.name if boundary is not None else "",
        )


def set_note(db: Session, relationship_id: int, party: User, boundary_id: int, note: str) -> ConsentEntry:
    """Attach a private note; creates a non-accepted entry when none exists yet."""

    get_member_relationship(db, relationship_id, party.id)
    cleaned = _clean_note(note)
    if not catalog_service.boundary_exists(db, boundary_id):
        not_found("BOUNDARY_NOT_FOUND", "Boundary not found.")

    entry = _own_entry(db, relationship_id, party.id, boundary_id)
    if entry is None:
        entry = ConsentEntry(
            party_id=party.id,
            relationship_id=relationship_id,
            boundary_id=boundary_id,
            accepted=False,
            note=cleaned,
        )
        db.add(entry)
    else:
        entry.note = cleaned
    db.commit()
    db.refresh(entry)
    logger.info(
        "Consent note saved",
        extra={"relationship_id": relationship_id, "party_id": party.id, "boundary_id": boundary_id},
    )
    return entry


def clear_note(db: Session, relationship_id: int, party: User, boundary_id: int) -> None:
    """Remove a private note; a note-only row (not accepted) is deleted entirely."""

    get_member_relationship(db, relationship_id, party.id)
    entry = _own_entry(db, relationship_id, party.id, boundary_id)
    if entry is None:
        return
    if entry.accepted:
        entry.note = None
    else:
        db.delete(entry)
    db.commit()
    logger.info(
        "Consent note cleared",
        extra={"relationship_id": relationship_id, "party_id": party.id, "boundary_id": boundary_id},
    )
