"""Boundary catalog endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.catalog import BoundaryCategory
from app.schemas.catalog import BoundaryCategoryRead
from app.services import catalog as catalog_service

router = APIRouter(prefix="/boundaries", tags=["boundaries"])


@router.get("/categories", response_model=list[BoundaryCategoryRead])
def list_categories(db: Session = Depends(get_db)) -> list[BoundaryCategory]:
    """Public, read-only catalog tree."""

    return catalog_service.list_categories(db)
