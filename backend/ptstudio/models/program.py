"""Workout programs: reusable templates and client trainings.

Both aggregates share the same shape::

    parent (template | training)
      └─ exercise link (exercise_id, order_position)
           └─ set variable (set_number, exercise_variable_id, target_value)

Child rows are owned by their parent through ``ON DELETE CASCADE`` and are
replaced wholesale on update.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ptstudio.core.extensions import db

from .base import ArchivableMixin, OwnedMixin, PKMixin, ReprMixin, TimestampMixin


class Template(PKMixin, TimestampMixin, ArchivableMixin, OwnedMixin, ReprMixin, db.Model):
    """Reusable workout blueprint owned by a trainer."""

    __tablename__ = "templates"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class TemplateExercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Ordered exercise slot inside a template."""

    __tablename__ = "template_exercises"

    template_id: Mapped[int] = mapped_column(
        ForeignKey("templates.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    order_position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("ix_template_exercises_parent_order", "template_id", "order_position"),)


class TemplateExerciseSetVariable(PKMixin, ReprMixin, db.Model):
    """Target value for one variable in one set of a template exercise."""

    __tablename__ = "template_exercise_set_variables"

    template_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("template_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    exercise_variable_id: Mapped[int] = mapped_column(
        ForeignKey("exercise_variables.id"), nullable=False
    )
    target_value: Mapped[str | None] = mapped_column(String(120))


class Training(PKMixin, TimestampMixin, ArchivableMixin, OwnedMixin, ReprMixin, db.Model):
    """Workout assigned by a trainer to one client (``training_target_id``)."""

    __tablename__ = "trainings"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    training_target_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )


class TrainingExercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Ordered exercise slot inside a training."""

    __tablename__ = "training_exercises"

    training_id: Mapped[int] = mapped_column(
        ForeignKey("trainings.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    order_position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (Index("ix_training_exercises_parent_order", "training_id", "order_position"),)


class TrainingExerciseSetVariable(PKMixin, ReprMixin, db.Model):
    """Target value for one variable in one set of a training exercise."""

    __tablename__ = "training_exercise_set_variables"

    training_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("training_exercises.id", ondelete="CASCADE"), nullable=False, index=True
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    exercise_variable_id: Mapped[int] = mapped_column(
        ForeignKey("exercise_variables.id"), nullable=False
    )
    target_value: Mapped[str | None] = mapped_column(String(120))
