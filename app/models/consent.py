"""Consent ledger model."""
from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.config import NOTE_MAX_LENGTH

from .base import Base


class ConsentEntry(Base):
    """One party's acceptance and private note for one boundary of one relationship.

    The note is readable by its owner only.
    """

    __tablename__ = "consent_entries"
    __table_args__ = (
        UniqueConstraint("party_id", "relationship_id", "boundary_id", name="uq_consent_entry_owner"),
        Index("ix_consent_entries_relationship_boundary", "relationship_id", "boundary_id"),
    )

    party_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    relationship_id: Mapped[int] = mapped_column(
        ForeignKey("relationships.id", ondelete="CASCADE"), nullable=False
    )
    boundary_id: Mapped[int] = mapped_column(ForeignKey("boundaries.id", ondelete="CASCADE"), nullable=False)
    accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    note: Mapped[str | None] = mapped_column(String(NOTE_MAX_LENGTH), nullable=True)
