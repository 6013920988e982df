"""Relationship and block models."""
from __future__ import annotations

from enum import Enum

from sqlalchemy import CheckConstraint, Enum as SqlEnum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class RelationshipStatus(str, Enum):
    """Lifecycle states of a stored relationship.

    Dissolution and blocking delete the row, so there is no "removed" state.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Relationship(Base):
    """Pairing between an initiator and (once answered) a responder."""

    __tablename__ = "relationships"
    __table_args__ = (
        CheckConstraint(
            "responder_id IS NULL OR responder_id <> initiator_id",
            name="ck_relationship_distinct_parties",
        ),
        Index("ix_relationships_status", "status"),
    )

    initiator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    responder_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    invitation_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    status: Mapped[RelationshipStatus] = mapped_column(
        SqlEnum(RelationshipStatus, name="relationship_status"),
        nullable=False,
        default=RelationshipStatus.PENDING,
    )

    def is_member(self, party_id: int) -> bool:
        return party_id in (self.initiator_id, self.responder_id)

    def other_member(self, party_id: int) -> int | None:
        """Return the other party's id, or ``None`` while nobody has answered."""

        if party_id == self.initiator_id:
            return self.responder_id
        return self.initiator_id


class Block(Base):
    """One-directional veto: ``blocker_id`` never pairs with ``blocked_id`` again."""

    __tablename__ = "blocks"
    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="uq_blocks_pair"),
        CheckConstraint("blocker_id <> blocked_id", name="ck_blocks_distinct_parties"),
    )

    blocker_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    blocked_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
