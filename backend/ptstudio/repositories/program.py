"""Template and training repositories (parent rows only).

The exercise/set children are written and read by
:mod:`ptstudio.services.programs.writer` and
:mod:`ptstudio.services.programs.reader`.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import select, update

from ptstudio.models.program import (
    Template,
    Training,
    TrainingExercise,
    TrainingExerciseSetVariable,
)
from ptstudio.repositories.base import OwnedRepository


class TemplateRepository(OwnedRepository[Template]):
    """Persist :class:`Template` parent rows."""

    model = Template

    def _updatable_fields(self) -> set[str]:
        return {"name", "description"}


class TrainingRepository(OwnedRepository[Training]):
    """Persist :class:`Training` parent rows and patch their set targets."""

    model = Training

    def _updatable_fields(self) -> set[str]:
        return {"name", "description"}

    def list_for_target(self, owner_id: int, target_id: int) -> list[Training]:
        stmt = (
            self._owned_by(owner_id)
            .where(self.model.training_target_id == target_id)
            .order_by(self.model.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def patch_target_values(self, training_id: int, values: Mapping[int, str | None]) -> int:
        """Set ``target_value`` on set-variable rows of ``training_id`` by row id.

        Rows that belong to another training are left untouched.

        :param training_id: Training whose rows may change.
        :param values: ``{set_variable_row_id: target_value}``.
        :returns: Number of rows updated.
        """
        links = select(TrainingExercise.id).where(TrainingExercise.training_id == training_id)
        updated = 0
        for row_id, target_value in values.items():
            result = self.session.execute(
                update(TrainingExerciseSetVariable)
                .where(
                    TrainingExerciseSetVariable.id == row_id,
                    TrainingExerciseSetVariable.training_exercise_id.in_(links),
                )
                .values(target_value=target_value)
                .execution_options(synchronize_session=False)
            )
            updated += result.rowcount or 0
        return updated
