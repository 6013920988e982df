"""Match engine: boundaries accepted by both members of a relationship.

This is the only place where two parties' ledgers are joined. The query
selects the requester's note column alone, so the other party's note can
never reach a response.
"""
from __future__ import annotations

from sqlalchemy import and_, select
from sqlalchemy.orm import Session, aliased

from app.models.catalog import Boundary, BoundaryCategory, BoundarySubcategory
from app.models.consent import ConsentEntry
from app.models.relationship import RelationshipStatus
from app.schemas.matches import CommonBoundariesRead, CommonBoundaryRead
from app.services import catalog as catalog_service
from app.services.relationships import get_member_relationship

NOT_ACCEPTED_MESSAGE = "The invitation has not been accepted yet."


def common_boundaries(db: Session, relationship_id: int, requester_id: int) -> CommonBoundariesRead:
    """Compute the common boundaries for ``requester_id``; pure read, no caching."""

    relationship = get_member_relationship(db, relationship_id, requester_id)
    other_id = relationship.other_member(requester_id)
    if relationship.status is not RelationshipStatus.ACCEPTED or other_id is None:
        return CommonBoundariesRead(
            relationship_id=relationship_id,
            status=relationship.status.value,
            common_boundaries=[],
            count=0,
            message=NOT_ACCEPTED_MESSAGE,
        )

    mine = aliased(ConsentEntry, name="mine")
    theirs = aliased(ConsentEntry, name="theirs")
    stmt = (
        select(Boundary.id, Boundary.name, mine.note)
        .join(mine, mine.boundary_id == Boundary.id)
        .join(
            theirs,
            and_(
                theirs.boundary_id == Boundary.id,
                theirs.relationship_id == mine.relationship_id,
            ),
        )
        .join(BoundarySubcategory, BoundarySubcategory.id == Boundary.subcategory_id)
        .join(BoundaryCategory, BoundaryCategory.id == BoundarySubcategory.category_id)
        .where(
            mine.relationship_id == relationship_id,
            mine.party_id == requester_id,
            mine.accepted.is_(True),
            theirs.party_id == other_id,
            theirs.accepted.is_(True),
        )
        .order_by(*catalog_service.catalog_order())
    )
    rows = db.execute(stmt).all()
    items = [CommonBoundaryRead(boundary_id=boundary_id, name=name, note=note) for boundary_id, name, note in rows]
    return CommonBoundariesRead(
        relationship_id=relationship_id,
        status=relationship.status.value,
        common_boundaries=items,
        count=len(items),
    )
