"""Ownership guard shared by every mutation on an existing resource.

The check is a single lookup of ``(id, created_by)`` among non-archived rows.
It returns a classified :class:`GuardError` instead of raising so callers can
pick an entity-specific message; :func:`ensure_owned` does the usual
"translate and raise" step.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from ptstudio.core.ids import EntityKind
from ptstudio.models import (
    Category,
    Exercise,
    ExerciseVariable,
    Template,
    Training,
    User,
)
from ptstudio.services._shared.errors import NotFoundError, NotOwnerError


class GuardError(Enum):
    NOT_EXIST = "not_exist"
    NOT_OWNER = "not_owner"


_GUARDED_MODELS: Mapping[EntityKind, type] = {
    EntityKind.CATEGORY: Category,
    EntityKind.EXERCISE: Exercise,
    EntityKind.EXERCISE_VARIABLES: ExerciseVariable,
    EntityKind.TEMPLATE: Template,
    EntityKind.TRAINING: Training,
    EntityKind.USER: User,
}

# entity label, "does not exist" message, "not yours" message
MESSAGES: Mapping[EntityKind, tuple[str, str, str]] = {
    EntityKind.CATEGORY: (
        "Category",
        "Category does not exist",
        "You do not have permission to change this category",
    ),
    EntityKind.EXERCISE: (
        "Exercise",
        "Exercise does not exist",
        "You do not have permission to change this exercise",
    ),
    EntityKind.EXERCISE_VARIABLES: (
        "ExerciseVariable",
        "Exercise variable does not exist",
        "You do not have permission to change this exercise variable",
    ),
    EntityKind.TEMPLATE: (
        "Template",
        "Template does not exist",
        "You do not have permission to change this template",
    ),
    EntityKind.TRAINING: (
        "Training",
        "Training does not exist",
        "You do not have permission to change this training",
    ),
    EntityKind.USER: (
        "User",
        "Client does not exist",
        "You do not have permission to manage this client",
    ),
}


def check_existence_and_ownership(
    session: Session, kind: EntityKind, numeric_id: int, caller_id: int
) -> GuardError | None:
    """
    Classify whether ``caller_id`` may act on row ``numeric_id`` of ``kind``.

    Archived rows count as missing.

    :returns: ``None`` when the row exists and is owned by the caller,
        otherwise :attr:`GuardError.NOT_EXIST` or :attr:`GuardError.NOT_OWNER`.
    :raises KeyError: For kinds without an owner column.
    """
    model = _GUARDED_MODELS[kind]
    stmt = select(model.created_by).where(model.id == numeric_id, model.archived_at.is_(None))
    row = session.execute(stmt).first()
    if row is None:
        return GuardError.NOT_EXIST
    if row.created_by != caller_id:
        return GuardError.NOT_OWNER
    return None


def raise_for(kind: EntityKind, error: GuardError, key: int | str | None = None) -> None:
    entity, missing, foreign = MESSAGES[kind]
    if error is GuardError.NOT_EXIST:
        raise NotFoundError(entity, key, missing)
    raise NotOwnerError(entity, foreign)


def ensure_owned(session: Session, kind: EntityKind, numeric_id: int, caller_id: int) -> None:
    """
    Run :func:`check_existence_and_ownership` and raise on failure.

    :raises NotFoundError: Row missing or archived.
    :raises NotOwnerError: Row owned by somebody else.
    """
    error = check_existence_and_ownership(session, kind, numeric_id, caller_id)
    if error is not None:
        raise_for(kind, error, numeric_id)


def ensure_all_owned(
    session: Session, kind: EntityKind, numeric_ids: Iterable[int], caller_id: int
) -> None:
    """
    Batch form of :func:`ensure_owned`: one ``IN`` lookup for every id.

    Missing ids are reported before foreign ones, lowest id first.

    :raises NotFoundError: Some row is missing or archived.
    :raises NotOwnerError: Some row is owned by somebody else.
    """
    wanted = sorted(set(numeric_ids))
    if not wanted:
        return
    model = _GUARDED_MODELS[kind]
    stmt = select(model.id, model.created_by).where(
        model.id.in_(wanted), model.archived_at.is_(None)
    )
    owners = {row.id: row.created_by for row in session.execute(stmt)}
    for numeric_id in wanted:
        if numeric_id not in owners:
            raise_for(kind, GuardError.NOT_EXIST, numeric_id)
    for numeric_id in wanted:
        if owners[numeric_id] != caller_id:
            raise_for(kind, GuardError.NOT_OWNER, numeric_id)
