"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from ptstudio.repositories.base import (
    BaseRepository,
    KeysetPage,
    OwnedRepository,
    paginate_after,
)
from ptstudio.repositories.category import CategoryRepository
from ptstudio.repositories.exercise import ExerciseRepository, ExerciseVariableRepository
from ptstudio.repositories.photo import PhotoRepository
from ptstudio.repositories.program import TemplateRepository, TrainingRepository
from ptstudio.repositories.user import UserDetailsRepository, UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "KeysetPage",
    "OwnedRepository",
    "paginate_after",
    # Domain
    "CategoryRepository",
    "ExerciseRepository",
    "ExerciseVariableRepository",
    "PhotoRepository",
    "TemplateRepository",
    "TrainingRepository",
    "UserDetailsRepository",
    "UserRepository",
]
