from __future__ import annotations

import logging

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.exercise import Exercise, ExerciseVariable
from ptstudio.services._shared.base import BaseService
from ptstudio.services._shared.dto import Connection, PageIn, build_connection
from ptstudio.services._shared.errors import ConflictError
from ptstudio.services._shared.guards import ensure_owned
from ptstudio.services.categories import CategoryOut, category_to_out

from .dto import (
    ExerciseCreateIn,
    ExerciseListIn,
    ExerciseOut,
    ExerciseUpdateIn,
    ExerciseVariableCreateIn,
    ExerciseVariableOut,
    ExerciseVariableUpdateIn,
)

logger = logging.getLogger(__name__)

_DUPLICATE_EXERCISE = "An exercise with this name already exists"
_DUPLICATE_VARIABLE = "An exercise variable with this name already exists"


def exercise_to_out(row: Exercise) -> ExerciseOut:
    return ExerciseOut(
        id=encode_id(EntityKind.EXERCISE, row.id),
        name=row.name,
        url=row.url,
        category=encode_id(EntityKind.CATEGORY, row.category_id),
        category_name=row.category.name if row.category is not None else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def variable_to_out(row: ExerciseVariable) -> ExerciseVariableOut:
    return ExerciseVariableOut(
        id=encode_id(EntityKind.EXERCISE_VARIABLES, row.id),
        name=row.name,
        unit=row.unit,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ExerciseService(BaseService):
    """Catalog of exercises owned by the caller."""

    def paginate(self, dto: ExerciseListIn) -> Connection[ExerciseOut]:
        """
        Forward page of active exercises.

        A ``category`` filter also matches exercises filed under its direct
        subcategories.
        """
        owner_id = self.actor_id
        first, after_id = self.page_window(dto.first, dto.after)
        category_id = self.optional_id(EntityKind.CATEGORY, dto.category)

        with self.ro_uow() as uow:
            category_ids = None
            if category_id is not None:
                category_ids = uow.categories.ids_with_children(category_id, owner_id)
            page = uow.exercises.paginate_for_owner(
                owner_id,
                first=first,
                after_id=after_id,
                category_ids=category_ids,
                search_term=dto.search_term,
            )
            return build_connection(page, exercise_to_out)

    def add(self, dto: ExerciseCreateIn) -> ExerciseOut:
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        url = self.require_text(dto.url, field="url")
        category_id = self.require_id(EntityKind.CATEGORY, dto.category, field="category")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.CATEGORY, category_id, owner_id)
            if uow.exercises.name_taken(owner_id, name):
                raise ConflictError("Exercise", _DUPLICATE_EXERCISE)

            exercise = uow.exercises.add(
                Exercise(name=name, url=url, category_id=category_id, created_by=owner_id)
            )
            logger.info("Exercise created", extra={"exercise_id": exercise.id})
            return exercise_to_out(exercise)

    def edit(self, dto: ExerciseUpdateIn) -> ExerciseOut:
        owner_id = self.actor_id
        exercise_id = self.require_id(EntityKind.EXERCISE, dto.id, field="id")
        name = self.require_text(dto.name, field="name")
        url = self.require_text(dto.url, field="url")
        category_id = self.require_id(EntityKind.CATEGORY, dto.category, field="category")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.CATEGORY, category_id, owner_id)
            ensure_owned(uow.session, EntityKind.EXERCISE, exercise_id, owner_id)
            if uow.exercises.name_taken(owner_id, name, exclude_id=exercise_id):
                raise ConflictError("Exercise", _DUPLICATE_EXERCISE)

            exercise = uow.exercises.get_active(exercise_id)
            assert exercise is not None
            uow.exercises.update(exercise, name=name, url=url, category_id=category_id)
            uow.session.expire(exercise, ["category"])
            logger.info("Exercise updated", extra={"exercise_id": exercise_id})
            return exercise_to_out(exercise)

    def delete(self, exercise_id: str) -> str:
        """Archive an exercise; returns its opaque id."""
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.EXERCISE, exercise_id, field="id")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.EXERCISE, numeric_id, owner_id)
            exercise = uow.exercises.get_active(numeric_id)
            uow.exercises.archive(exercise)
            logger.info("Exercise archived", extra={"exercise_id": numeric_id})
        return encode_id(EntityKind.EXERCISE, numeric_id)

    def all_categories(self, exercise_id: str) -> list[CategoryOut]:
        """Category chain of an exercise: ``[parent, category]`` or ``[category]``."""
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.EXERCISE, exercise_id, field="id")

        with self.ro_uow() as uow:
            ensure_owned(uow.session, EntityKind.EXERCISE, numeric_id, owner_id)
            exercise = uow.exercises.get(numeric_id)
            assert exercise is not None
            category = exercise.category
            chain = [category_to_out(category)]
            if category.parent is not None:
                chain.insert(0, category_to_out(category.parent))
            return chain


class ExerciseVariableService(BaseService):
    """Measurable variables (reps, weight, ...) used by program sets."""

    def paginate(self, dto: PageIn) -> Connection[ExerciseVariableOut]:
        owner_id = self.actor_id
        first, after_id = self.page_window(dto.first, dto.after)
        with self.ro_uow() as uow:
            page = uow.exercise_variables.paginate_owned(
                owner_id, first=first, after_id=after_id, search_term=dto.search_term
            )
            return build_connection(page, variable_to_out)

    def add(self, dto: ExerciseVariableCreateIn) -> ExerciseVariableOut:
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        unit = self.require_text(dto.unit, field="unit")

        with self.rw_uow() as uow:
            if uow.exercise_variables.name_taken(owner_id, name):
                raise ConflictError("ExerciseVariable", _DUPLICATE_VARIABLE)
            variable = uow.exercise_variables.add(
                ExerciseVariable(
                    name=name, unit=unit, description=dto.description, created_by=owner_id
                )
            )
            logger.info("Exercise variable created", extra={"variable_id": variable.id})
            return variable_to_out(variable)

    def edit(self, dto: ExerciseVariableUpdateIn) -> ExerciseVariableOut:
        owner_id = self.actor_id
        variable_id = self.require_id(EntityKind.EXERCISE_VARIABLES, dto.id, field="id")
        name = self.require_text(dto.name, field="name")
        unit = self.require_text(dto.unit, field="unit")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.EXERCISE_VARIABLES, variable_id, owner_id)
            if uow.exercise_variables.name_taken(owner_id, name, exclude_id=variable_id):
                raise ConflictError("ExerciseVariable", _DUPLICATE_VARIABLE)
            variable = uow.exercise_variables.get_active(variable_id)
            assert variable is not None
            uow.exercise_variables.update(
                variable, name=name, unit=unit, description=dto.description
            )
            logger.info("Exercise variable updated", extra={"variable_id": variable_id})
            return variable_to_out(variable)

    def delete(self, variable_id: str) -> str:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.EXERCISE_VARIABLES, variable_id, field="id")
        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.EXERCISE_VARIABLES, numeric_id, owner_id)
            uow.exercise_variables.archive(uow.exercise_variables.get_active(numeric_id))
            logger.info("Exercise variable archived", extra={"variable_id": numeric_id})
        return encode_id(EntityKind.EXERCISE_VARIABLES, numeric_id)
