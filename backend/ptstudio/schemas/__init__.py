"""Convenience exports for payload schemas (camelCase on the wire)."""

from __future__ import annotations

from .catalog import (
    CategoryCreateSchema,
    CategorySchema,
    CategoryUpdateSchema,
    ExerciseCreateSchema,
    ExerciseListSchema,
    ExerciseSchema,
    ExerciseUpdateSchema,
    ExerciseVariableCreateSchema,
    ExerciseVariableSchema,
    ExerciseVariableUpdateSchema,
)
from .client import (
    ClientCreateSchema,
    ClientListSchema,
    ClientSchema,
    ClientUpdateSchema,
    ProfileSchema,
    ProfileUpsertSchema,
)
from .common import (
    CamelCaseSchema,
    PageInfoSchema,
    PageInSchema,
    PhotoSchema,
    SuccessSchema,
    camelcase,
    connection_schema,
    load_dto,
)
from .program import (
    TemplateCreateSchema,
    TemplateSchema,
    TemplateUpdateSchema,
    TrainingCreateSchema,
    TrainingEditSchema,
    TrainingSchema,
)

__all__ = [
    "CamelCaseSchema",
    "PageInSchema",
    "PageInfoSchema",
    "PhotoSchema",
    "SuccessSchema",
    "camelcase",
    "connection_schema",
    "load_dto",
    "CategoryCreateSchema",
    "CategorySchema",
    "CategoryUpdateSchema",
    "ExerciseCreateSchema",
    "ExerciseListSchema",
    "ExerciseSchema",
    "ExerciseUpdateSchema",
    "ExerciseVariableCreateSchema",
    "ExerciseVariableSchema",
    "ExerciseVariableUpdateSchema",
    "ClientCreateSchema",
    "ClientListSchema",
    "ClientSchema",
    "ClientUpdateSchema",
    "ProfileSchema",
    "ProfileUpsertSchema",
    "TemplateCreateSchema",
    "TemplateSchema",
    "TemplateUpdateSchema",
    "TrainingCreateSchema",
    "TrainingEditSchema",
    "TrainingSchema",
]
