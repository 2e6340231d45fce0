"""
Abstract Unit of Work contract shared by the read-write and read-only scopes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from ptstudio.repositories import (
        CategoryRepository,
        ExerciseRepository,
        ExerciseVariableRepository,
        PhotoRepository,
        TemplateRepository,
        TrainingRepository,
        UserDetailsRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transaction per service operation.

    Every repository attribute is bound to :attr:`session`, so all writes of
    an aggregate land (or roll back) together.
    """

    session: Session
    users: UserRepository
    user_details: UserDetailsRepository
    categories: CategoryRepository
    exercises: ExerciseRepository
    exercise_variables: ExerciseVariableRepository
    templates: TemplateRepository
    trainings: TrainingRepository
    photos: PhotoRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
