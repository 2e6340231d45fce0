from __future__ import annotations

import pytest

from ptstudio.core.ids import EntityKind
from ptstudio.services._shared.base import ServiceContext
from ptstudio.services._shared.errors import NotFoundError, NotOwnerError, UnauthenticatedError
from ptstudio.services._shared.guards import (
    GuardError,
    check_existence_and_ownership,
    ensure_owned,
)
from ptstudio.services.exercises import ExerciseService
from tests.factories.catalog import CategoryFactory, ExerciseFactory
from tests.factories.user import TrainerFactory
from tests.helpers.utils import oid


class TestOwnershipGuard:
    def test_owned_row_passes(self, session, trainer):
        category = CategoryFactory(created_by=trainer.id)
        assert check_existence_and_ownership(
            session, EntityKind.CATEGORY, category.id, trainer.id
        ) is None

    def test_missing_row(self, session, trainer):
        assert (
            check_existence_and_ownership(session, EntityKind.CATEGORY, 999_999, trainer.id)
            is GuardError.NOT_EXIST
        )

    def test_foreign_row(self, session, trainer):
        category = CategoryFactory(created_by=TrainerFactory().id)
        assert (
            check_existence_and_ownership(session, EntityKind.CATEGORY, category.id, trainer.id)
            is GuardError.NOT_OWNER
        )

    def test_archived_row_counts_as_missing(self, session, trainer):
        exercise = ExerciseFactory(created_by=trainer.id)
        exercise.archive()
        session.commit()
        assert (
            check_existence_and_ownership(session, EntityKind.EXERCISE, exercise.id, trainer.id)
            is GuardError.NOT_EXIST
        )

    def test_ensure_owned_uses_entity_messages(self, session, trainer):
        category = CategoryFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError, match="permission to change this category"):
            ensure_owned(session, EntityKind.CATEGORY, category.id, trainer.id)
        with pytest.raises(NotFoundError, match="Category does not exist"):
            ensure_owned(session, EntityKind.CATEGORY, 424242, trainer.id)


class TestGuardThroughServices:
    def test_archive_twice_reports_not_found(self, ctx, trainer):
        exercise = ExerciseFactory(created_by=trainer.id)
        service = ExerciseService(ctx=ctx)

        assert service.delete(oid(EntityKind.EXERCISE, exercise)) == f"EXERCISE-{exercise.id}"
        with pytest.raises(NotFoundError):
            service.delete(oid(EntityKind.EXERCISE, exercise))

    def test_foreign_caller_is_rejected(self, trainer):
        exercise = ExerciseFactory(created_by=trainer.id)
        intruder = ServiceContext(actor_id=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            ExerciseService(ctx=intruder).delete(oid(EntityKind.EXERCISE, exercise))

    def test_missing_caller_fails_before_any_query(self):
        with pytest.raises(UnauthenticatedError):
            ExerciseService().delete("EXERCISE-1")
