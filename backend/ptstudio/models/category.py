"""Category taxonomy used to group exercises (parent/child)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ptstudio.core.extensions import db

from .base import ArchivableMixin, OwnedMixin, PKMixin, ReprMixin, TimestampMixin


class Category(PKMixin, TimestampMixin, ArchivableMixin, OwnedMixin, ReprMixin, db.Model):
    """
    Trainer-owned category, optionally nested under a parent category.

    Notes
    -----
    - Only one level of nesting is resolved by the application; the schema
      itself does not limit depth.
    - Name uniqueness among siblings is a service rule (archived rows
      must not block re-use), so there is no unique constraint here.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    parent_category_id: Mapped[int | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL")
    )

    __table_args__ = (Index("ix_categories_owner_parent", "created_by", "parent_category_id"),)

    parent: Mapped[Category | None] = relationship(
        "Category", remote_side="Category.id", lazy="joined", innerjoin=False
    )
