from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ptstudio.services._shared.dto import PageIn

# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ExerciseListIn(PageIn):
    """
    Keyset listing of exercises.

    :param category: Opaque category id; matches the category and its
        direct subcategories.
    """

    category: str | None = None


@dataclass(frozen=True, slots=True)
class ExerciseCreateIn:
    name: str
    category: str
    url: str


@dataclass(frozen=True, slots=True)
class ExerciseUpdateIn:
    id: str
    name: str
    category: str
    url: str


@dataclass(frozen=True, slots=True)
class ExerciseVariableCreateIn:
    name: str
    unit: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ExerciseVariableUpdateIn:
    id: str
    name: str
    unit: str
    description: str | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ExerciseOut:
    """Public projection of a catalog exercise."""

    id: str
    name: str
    url: str
    category: str
    category_name: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class ExerciseVariableOut:
    id: str
    name: str
    unit: str
    description: str | None
    created_at: datetime | None
    updated_at: datetime | None
