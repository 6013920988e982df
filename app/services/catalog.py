"""Boundary catalog lookups (read-only reference data)."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.catalog import Boundary, BoundaryCategory, BoundarySubcategory


def list_categories(db: Session) -> list[BoundaryCategory]:
    """Return the full category tree in display order."""

    stmt = (
        select(BoundaryCategory)
        .options(selectinload(BoundaryCategory.subcategories).selectinload(BoundarySubcategory.boundaries))
        .order_by(BoundaryCategory.sort_order, BoundaryCategory.id)
    )
    return list(db.scalars(stmt).all())


def boundary_exists(db: Session, boundary_id: int) -> bool:
    return db.get(Boundary, boundary_id) is not None


def existing_boundary_ids(db: Session, boundary_ids: Iterable[int]) -> set[int]:
    """Return the subset of ``boundary_ids`` present in the catalog."""

    wanted = set(boundary_ids)
    if not wanted:
        return set()
    stmt = select(Boundary.id).where(Boundary.id.in_(wanted))
    return set(db.scalars(stmt).all())


def catalog_order():
    """ORDER BY clause matching the rendered catalog (requires joins to subcategory and category)."""

    return (
        BoundaryCategory.sort_order,
        BoundarySubcategory.sort_order,
        Boundary.sort_order,
        Boundary.id,
    )


def seed_catalog(db: Session, categories: list[dict]) -> int:
    """Insert the catalog when it is empty; return the number of boundaries created."""

    if db.scalars(select(BoundaryCategory.id).limit(1)).first() is not None:
        return 0

    created = 0
    for cat_index, category_data in enumerate(categories, start=1):
        category = BoundaryCategory(
            name=category_data["name"],
            description=category_data.get("description"),
            icon=category_data.get("icon"),
            sort_order=cat_index,
        )
        for sub_index, sub_data in enumerate(category_data["subcategories"], start=1):
            subcategory = BoundarySubcategory(name=sub_data["name"], sort_order=sub_index)
            for boundary_index, name in enumerate(sub_data["boundaries"], start=1):
                subcategory.boundaries.append(Boundary(name=name, sort_order=boundary_index))
                created += 1
            category.subcategories.append(subcategory)
        db.add(category)
    db.commit()
    return created
