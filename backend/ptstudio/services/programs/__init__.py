"""Workout programs: templates and trainings sharing one exercise tree model."""

from .dto import (
    ExerciseRefOut,
    PhotoRefIn,
    ProgramExerciseIn,
    ProgramExerciseOut,
    SetIn,
    SetOut,
    SetVariableIn,
    SetVariableOut,
    TemplateCreateIn,
    TemplateOut,
    TemplateUpdateIn,
    TrainingCreateIn,
    TrainingEditIn,
    TrainingOut,
    VariableRefOut,
)
from .kinds import TEMPLATE, TRAINING, ProgramKind
from .reader import ExerciseTreeReader
from .templates import TemplateService
from .trainings import TrainingService
from .writer import ExerciseTreeWriter, SqlReplaceAllWriter

__all__ = [
    "TemplateService",
    "TrainingService",
    "ExerciseTreeReader",
    "ExerciseTreeWriter",
    "SqlReplaceAllWriter",
    "ProgramKind",
    "TEMPLATE",
    "TRAINING",
    "ExerciseRefOut",
    "PhotoRefIn",
    "ProgramExerciseIn",
    "ProgramExerciseOut",
    "SetIn",
    "SetOut",
    "SetVariableIn",
    "SetVariableOut",
    "TemplateCreateIn",
    "TemplateOut",
    "TemplateUpdateIn",
    "TrainingCreateIn",
    "TrainingEditIn",
    "TrainingOut",
    "VariableRefOut",
]
