"""Read the exercise → set → variable tree of a template or training."""

from __future__ import annotations

from collections import defaultdict
from itertools import groupby
from typing import Any

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models import Category, Exercise, ExerciseVariable

from .dto import (
    ExerciseRefOut,
    ProgramExerciseOut,
    SetOut,
    SetVariableOut,
    VariableRefOut,
)
from .kinds import ProgramKind


class ExerciseTreeReader:
    """
    Two queries per aggregate: the ordered links, then every set row of
    those links in one batch.

    Catalog rows that were archived (or removed) read back as ``None``.
    """

    def read(self, session: Session, kind: ProgramKind, parent_id: int) -> list[ProgramExerciseOut]:
        link = kind.link_model
        link_rows = session.execute(
            select(
                link.id,
                link.order_position,
                Exercise.id.label("exercise_id"),
                Exercise.name.label("exercise_name"),
                Exercise.url.label("exercise_url"),
                Category.name.label("category_name"),
            )
            .select_from(link)
            .outerjoin(
                Exercise,
                and_(Exercise.id == link.exercise_id, Exercise.archived_at.is_(None)),
            )
            .outerjoin(
                Category,
                and_(Category.id == Exercise.category_id, Category.archived_at.is_(None)),
            )
            .where(kind.link_parent_col == parent_id)
            .order_by(link.order_position.asc(), link.id.asc())
        ).all()
        if not link_rows:
            return []

        sets_by_link = self._read_sets(session, kind, [row.id for row in link_rows])
        return [
            ProgramExerciseOut(
                id=encode_id(kind.link_kind, row.id),
                order_position=row.order_position,
                exercise=self._exercise_ref(row),
                sets=sets_by_link.get(row.id, []),
            )
            for row in link_rows
        ]

    def _read_sets(
        self, session: Session, kind: ProgramKind, link_ids: list[int]
    ) -> dict[int, list[SetOut]]:
        set_model = kind.set_model
        rows = session.execute(
            select(
                set_model.id,
                kind.set_link_col.label("link_id"),
                set_model.set_number,
                set_model.target_value,
                ExerciseVariable.id.label("variable_id"),
                ExerciseVariable.name.label("variable_name"),
                ExerciseVariable.unit.label("variable_unit"),
                ExerciseVariable.description.label("variable_description"),
            )
            .select_from(set_model)
            .outerjoin(
                ExerciseVariable,
                and_(
                    ExerciseVariable.id == set_model.exercise_variable_id,
                    ExerciseVariable.archived_at.is_(None),
                ),
            )
            .where(kind.set_link_col.in_(link_ids))
            .order_by(
                kind.set_link_col.asc(),
                set_model.set_number.asc(),
                ExerciseVariable.name.asc(),
                set_model.id.asc(),
            )
        ).all()

        grouped: dict[int, list[SetOut]] = defaultdict(list)
        for (link_id, set_number), members in groupby(rows, key=lambda r: (r.link_id, r.set_number)):
            grouped[link_id].append(
                SetOut(
                    set_number=set_number,
                    variables=[self._set_variable(kind, member) for member in members],
                )
            )
        return grouped

    @staticmethod
    def _exercise_ref(row: Any) -> ExerciseRefOut | None:
        if row.exercise_id is None:
            return None
        return ExerciseRefOut(
            id=encode_id(EntityKind.EXERCISE, row.exercise_id),
            name=row.exercise_name,
            url=row.exercise_url,
            category=row.category_name,
        )

    @staticmethod
    def _set_variable(kind: ProgramKind, row: Any) -> SetVariableOut:
        variable = None
        if row.variable_id is not None:
            variable = VariableRefOut(
                id=encode_id(EntityKind.EXERCISE_VARIABLES, row.variable_id),
                name=row.variable_name,
                unit=row.variable_unit,
                description=row.variable_description,
            )
        return SetVariableOut(
            id=encode_id(kind.set_kind, row.id) if kind.set_kind is not None else None,
            variable=variable,
            target_value=row.target_value,
        )
