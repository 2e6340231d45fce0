from __future__ import annotations

from collections.abc import Sequence

from ptstudio.core.ids import EntityKind, decode_id
from ptstudio.services._shared.errors import InvalidArgumentError

from .dto import LinkSpec, ProgramExerciseIn, SetRowSpec
from .writer import normalize_target


def _require(kind: EntityKind, raw: str | None, field: str) -> int:
    value = decode_id(kind, raw)
    if value is None:
        raise InvalidArgumentError(f"{field} is required")
    return value


def to_link_specs(exercises: Sequence[ProgramExerciseIn] | None) -> list[LinkSpec]:
    """
    Decode exercise slots for the writer.

    :raises InvalidArgumentError: On an empty list or a malformed id.
    """
    if not exercises:
        raise InvalidArgumentError("At least one exercise is required")

    specs: list[LinkSpec] = []
    for slot in exercises:
        rows = [
            SetRowSpec(
                set_number=int(set_in.set_number),
                variable_id=_require(
                    EntityKind.EXERCISE_VARIABLES, variable.variable_id, "variableId"
                ),
                target_value=normalize_target(variable.target_value),
            )
            for set_in in slot.sets
            for variable in set_in.variables
        ]
        specs.append(
            LinkSpec(
                exercise_id=_require(EntityKind.EXERCISE, slot.exercise_id, "exerciseId"),
                order_position=int(slot.order_position),
                rows=rows,
            )
        )
    return specs


def to_target_patch(exercises: Sequence[ProgramExerciseIn] | None) -> dict[int, str | None]:
    """``{set_variable_row_id: target_value}`` from a training edit payload."""
    if not exercises:
        raise InvalidArgumentError("At least one exercise is required")

    patch: dict[int, str | None] = {}
    for slot in exercises:
        for set_in in slot.sets:
            for variable in set_in.variables:
                row_id = _require(EntityKind.TRAINING_SET_VARIABLES, variable.id, "id")
                patch[row_id] = normalize_target(variable.target_value)
    return patch
