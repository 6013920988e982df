"""Boundary catalog schemas."""
from pydantic import BaseModel, ConfigDict


class BoundaryRead(BaseModel):
    id: int
    name: str
    description: str | None
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class BoundarySubcategoryRead(BaseModel):
    id: int
    name: str
    sort_order: int
    boundaries: list[BoundaryRead]

    model_config = ConfigDict(from_attributes=True)


class BoundaryCategoryRead(BaseModel):
    id: int
    name: str
    description: str | None
    icon: str | None
    sort_order: int
    subcategories: list[BoundarySubcategoryRead]

    model_config = ConfigDict(from_attributes=True)
