"""Descriptors letting templates and trainings share the writer and reader."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import InstrumentedAttribute

from ptstudio.core.ids import EntityKind
from ptstudio.models import (
    PhotoModel,
    Template,
    TemplateExercise,
    TemplateExerciseSetVariable,
    Training,
    TrainingExercise,
    TrainingExerciseSetVariable,
)


@dataclass(frozen=True)
class ProgramKind:
    """
    Tables and id tags of one program aggregate.

    :ivar parent_model: Template or Training.
    :ivar link_model: Ordered exercise rows of the parent.
    :ivar set_model: Set-variable rows of a link.
    :ivar link_parent_fk: Column on ``link_model`` pointing at the parent.
    :ivar set_link_fk: Column on ``set_model`` pointing at the link.
    :ivar set_kind: Tag for set-variable row ids, ``None`` when rows are not
        individually addressable.
    """

    name: str
    parent_model: type[Any]
    link_model: type[Any]
    set_model: type[Any]
    link_parent_fk: str
    set_link_fk: str
    parent_kind: EntityKind
    link_kind: EntityKind
    set_kind: EntityKind | None
    photo_model: PhotoModel

    @property
    def link_parent_col(self) -> InstrumentedAttribute[Any]:
        return getattr(self.link_model, self.link_parent_fk)

    @property
    def set_link_col(self) -> InstrumentedAttribute[Any]:
        return getattr(self.set_model, self.set_link_fk)


TEMPLATE = ProgramKind(
    name="template",
    parent_model=Template,
    link_model=TemplateExercise,
    set_model=TemplateExerciseSetVariable,
    link_parent_fk="template_id",
    set_link_fk="template_exercise_id",
    parent_kind=EntityKind.TEMPLATE,
    link_kind=EntityKind.TEMPLATE_EXERCISES,
    set_kind=None,
    photo_model=PhotoModel.TEMPLATE,
)

TRAINING = ProgramKind(
    name="training",
    parent_model=Training,
    link_model=TrainingExercise,
    set_model=TrainingExerciseSetVariable,
    link_parent_fk="training_id",
    set_link_fk="training_exercise_id",
    parent_kind=EntityKind.TRAINING,
    link_kind=EntityKind.TRAINING_EXERCISES,
    set_kind=EntityKind.TRAINING_SET_VARIABLES,
    photo_model=PhotoModel.TRAINING,
)
