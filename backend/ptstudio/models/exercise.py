"""Exercise catalog: exercises and the measurable variables used in sets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ptstudio.core.extensions import db

from .base import ArchivableMixin, OwnedMixin, PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .category import Category


class Exercise(PKMixin, TimestampMixin, ArchivableMixin, OwnedMixin, ReprMixin, db.Model):
    """Catalog exercise with a demo URL, filed under one category."""

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    category: Mapped[Category] = relationship("Category", lazy="selectin")


class ExerciseVariable(
    PKMixin, TimestampMixin, ArchivableMixin, OwnedMixin, ReprMixin, db.Model
):
    """Measurable quantity targeted in a set (e.g. ``reps``, ``weight`` in kg)."""

    __tablename__ = "exercise_variables"

    name: Mapped[str] = mapped_column(String(80), nullable=False)
    unit: Mapped[str] = mapped_column(String(40), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
