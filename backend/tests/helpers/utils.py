"""Tiny helpers shared across test modules."""

from __future__ import annotations

from contextlib import contextmanager

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.services.programs import ProgramExerciseIn, SetIn, SetVariableIn


@contextmanager
def not_raises(exception: type[BaseException]):
    """Context manager asserting that an exception is *not* raised."""
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Did raise {exception}: {exc}") from exc


def oid(kind: EntityKind, row) -> str:
    """Opaque id of a model row (or a raw numeric id)."""
    return encode_id(kind, getattr(row, "id", row))


def slot(exercise, position: int, sets: dict[int, list[tuple[object, str | None]]] | None = None):
    """
    Build a :class:`ProgramExerciseIn`.

    ``sets`` maps ``set_number`` to ``[(variable_row, target_value), ...]``.
    """
    return ProgramExerciseIn(
        exercise_id=oid(EntityKind.EXERCISE, exercise),
        order_position=position,
        sets=[
            SetIn(
                set_number=number,
                variables=[
                    SetVariableIn(
                        variable_id=oid(EntityKind.EXERCISE_VARIABLES, variable),
                        target_value=target,
                    )
                    for variable, target in members
                ],
            )
            for number, members in (sets or {}).items()
        ],
    )
