"""Boundary catalog models (static reference data)."""
from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class BoundaryCategory(Base):
    __tablename__ = "boundary_categories"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(16), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    subcategories = relationship(
        "BoundarySubcategory",
        back_populates="category",
        order_by="BoundarySubcategory.sort_order",
        cascade="all, delete-orphan",
    )


class BoundarySubcategory(Base):
    __tablename__ = "boundary_subcategories"

    category_id: Mapped[int] = mapped_column(
        ForeignKey("boundary_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category = relationship("BoundaryCategory", back_populates="subcategories")
    boundaries = relationship(
        "Boundary",
        back_populates="subcategory",
        order_by="Boundary.sort_order",
        cascade="all, delete-orphan",
    )


class Boundary(Base):
    """A single behaviour a party may consent to."""

    __tablename__ = "boundaries"

    subcategory_id: Mapped[int] = mapped_column(
        ForeignKey("boundary_subcategories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    subcategory = relationship("BoundarySubcategory", back_populates="boundaries")
