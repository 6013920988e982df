"""Common boundary (match) schemas."""
from pydantic import BaseModel


class CommonBoundaryRead(BaseModel):
    boundary_id: int
    name: str
    # Always the caller's own note.
    note: str | None = None


class CommonBoundariesRead(BaseModel):
    relationship_id: int
    status: str
    common_boundaries: list[CommonBoundaryRead]
    count: int
    message: str | None = None
