from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

from ptstudio.services.media import PhotoOut

# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class SetVariableIn:
    """
    One variable target inside a set.

    :param variable_id: Opaque ``EXERCISE-VARIABLES-<id>``.
    :param target_value: Target as typed by the trainer; ``None``/``""`` means
        no target.
    :param id: Opaque ``TRAINING-SET-VARIABLES-<id>`` of an existing row
        (only used when patching a training).
    """

    variable_id: str
    target_value: str | None = None
    id: str | None = None


@dataclass(frozen=True, slots=True)
class SetIn:
    set_number: int
    variables: list[SetVariableIn] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProgramExerciseIn:
    """
    Exercise slot of a template or training.

    ``order_position`` is stored as given; it is not renumbered or checked
    for gaps or duplicates.
    """

    exercise_id: str
    order_position: int
    sets: list[SetIn] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PhotoRefIn:
    """Already-uploaded photo (url + store key)."""

    url: str
    key: str


@dataclass(frozen=True, slots=True)
class TemplateCreateIn:
    name: str
    exercises: list[ProgramExerciseIn]
    description: str | None = None
    file: BinaryIO | None = None


@dataclass(frozen=True, slots=True)
class TemplateUpdateIn:
    id: str
    name: str
    exercises: list[ProgramExerciseIn]
    description: str | None = None
    file: BinaryIO | None = None


@dataclass(frozen=True, slots=True)
class TrainingCreateIn:
    training_target: str
    name: str
    exercises: list[ProgramExerciseIn]
    description: str | None = None
    photo: PhotoRefIn | None = None
    file: BinaryIO | None = None


@dataclass(frozen=True, slots=True)
class TrainingEditIn:
    """Patch ``target_value`` of existing set-variable rows (by row id)."""

    training_id: str
    exercises: list[ProgramExerciseIn]


# -------------------------- Writer specs (decoded) ----------------------- #


@dataclass(frozen=True, slots=True)
class SetRowSpec:
    set_number: int
    variable_id: int
    target_value: str | None


@dataclass(frozen=True, slots=True)
class LinkSpec:
    """Decoded exercise slot handed to the writer."""

    exercise_id: int
    order_position: int
    rows: list[SetRowSpec] = field(default_factory=list)


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ExerciseRefOut:
    id: str
    name: str
    url: str
    category: str | None


@dataclass(frozen=True, slots=True)
class VariableRefOut:
    id: str
    name: str
    unit: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class SetVariableOut:
    """``id`` is set for training rows only; ``variable`` is ``None`` when archived."""

    id: str | None
    variable: VariableRefOut | None
    target_value: str | None


@dataclass(frozen=True, slots=True)
class SetOut:
    set_number: int
    variables: list[SetVariableOut] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProgramExerciseOut:
    """Exercise slot read back; ``exercise`` is ``None`` when the catalog row is gone."""

    id: str
    order_position: int
    exercise: ExerciseRefOut | None
    sets: list[SetOut] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TemplateOut:
    id: str
    name: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
    exercises: list[ProgramExerciseOut] = field(default_factory=list)
    photo: PhotoOut | None = None


@dataclass(frozen=True, slots=True)
class TrainingOut:
    id: str
    name: str
    description: str | None
    training_target: str
    created_at: datetime | None
    updated_at: datetime | None
    exercises: list[ProgramExerciseOut] = field(default_factory=list)
    photo: PhotoOut | None = None
