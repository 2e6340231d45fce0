from __future__ import annotations

import io
import logging

import pytest
from sqlalchemy import func, select

from ptstudio.core.ids import EntityKind
from ptstudio.models import Template, TemplateExercise, TemplateExerciseSetVariable
from ptstudio.services._shared.dto import PageIn
from ptstudio.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    NotOwnerError,
)
from ptstudio.services._shared.ports import InMemoryMediaStore
from ptstudio.services.programs import (
    ProgramExerciseIn,
    SetIn,
    SetVariableIn,
    TemplateCreateIn,
    TemplateService,
    TemplateUpdateIn,
)
from ptstudio.services.programs.writer import SqlReplaceAllWriter
from tests.factories.catalog import ExerciseFactory, ExerciseVariableFactory
from tests.factories.program import TemplateFactory
from tests.factories.user import TrainerFactory
from tests.helpers.utils import oid, slot


class _BrokenStore(InMemoryMediaStore):
    def upload(self, scope_key, stream):
        raise ConnectionError("media store down")


class _FailingWriter(SqlReplaceAllWriter):
    """Writes the whole tree, then fails before the unit of work commits."""

    def replace(self, session, kind, parent_id, links):
        super().replace(session, kind, parent_id, links)
        raise RuntimeError("connection lost")


class TestTemplateService:
    @pytest.fixture()
    def media(self) -> InMemoryMediaStore:
        return InMemoryMediaStore()

    @pytest.fixture()
    def service(self, ctx, media) -> TemplateService:
        return TemplateService(ctx=ctx, media_store=media)

    @pytest.fixture()
    def squat(self, trainer):
        return ExerciseFactory(created_by=trainer.id, name="Squat")

    @pytest.fixture()
    def reps(self, trainer):
        return ExerciseVariableFactory(created_by=trainer.id, name="Reps")

    def _count(self, session, model) -> int:
        return session.scalar(select(func.count()).select_from(model))

    # ---------------------------- Create ---------------------------------- #

    def test_create_persists_tree(self, service, squat, reps):
        out = service.create(
            TemplateCreateIn(
                name="Leg day",
                description="Heavy",
                exercises=[slot(squat, 1, {1: [(reps, "10")], 2: [(reps, "")]})],
            )
        )

        assert out.id.startswith("TEMPLATE-")
        [link] = out.exercises
        assert link.exercise.id == oid(EntityKind.EXERCISE, squat)
        assert [s.set_number for s in link.sets] == [1, 2]
        assert link.sets[1].variables[0].target_value is None
        assert out.photo is None

    def test_create_requires_name_and_exercises(self, service, squat):
        with pytest.raises(InvalidArgumentError):
            service.create(TemplateCreateIn(name="", exercises=[slot(squat, 1)]))
        with pytest.raises(InvalidArgumentError):
            service.create(TemplateCreateIn(name="Empty", exercises=[]))

    def _assert_empty(self, session) -> None:
        assert self._count(session, Template) == 0
        assert self._count(session, TemplateExercise) == 0
        assert self._count(session, TemplateExerciseSetVariable) == 0

    def test_unknown_variable_rolls_back_everything(self, session, service, trainer, squat, reps):
        bench = ExerciseFactory(created_by=trainer.id, name="Bench")
        bad = ProgramExerciseIn(
            exercise_id=oid(EntityKind.EXERCISE, bench),
            order_position=2,
            sets=[SetIn(1, [SetVariableIn(variable_id="EXERCISE-VARIABLES-987654")])],
        )
        with pytest.raises(NotFoundError):
            service.create(
                TemplateCreateIn(
                    name="Broken", exercises=[slot(squat, 1, {1: [(reps, "5")]}), bad]
                )
            )

        self._assert_empty(session)

    def test_writer_failure_rolls_back_partial_tree(self, session, ctx, squat, reps):
        service = TemplateService(ctx=ctx, writer=_FailingWriter())
        with pytest.raises(RuntimeError):
            service.create(
                TemplateCreateIn(name="Broken", exercises=[slot(squat, 1, {1: [(reps, "5")]})])
            )

        self._assert_empty(session)

    def test_foreign_catalog_entries_are_rejected(self, session, service, squat, reps):
        stranger = TrainerFactory()
        their_exercise = ExerciseFactory(created_by=stranger.id)
        their_variable = ExerciseVariableFactory(created_by=stranger.id)

        with pytest.raises(NotOwnerError):
            service.create(TemplateCreateIn(name="Theirs", exercises=[slot(their_exercise, 1)]))
        with pytest.raises(NotOwnerError):
            service.create(
                TemplateCreateIn(
                    name="Theirs", exercises=[slot(squat, 1, {1: [(their_variable, "5")]})]
                )
            )

        self._assert_empty(session)

    def test_archived_exercise_is_not_found(self, session, service, squat):
        squat.archive()
        session.flush()
        with pytest.raises(NotFoundError):
            service.create(TemplateCreateIn(name="Old", exercises=[slot(squat, 1)]))

    def test_duplicate_name_conflicts(self, service, trainer, squat):
        TemplateFactory(created_by=trainer.id, name="Push")
        with pytest.raises(ConflictError):
            service.create(TemplateCreateIn(name="Push", exercises=[slot(squat, 1)]))

    def test_photo_uploaded_after_commit(self, service, media, squat):
        out = service.create(
            TemplateCreateIn(name="Pull", exercises=[slot(squat, 1)], file=io.BytesIO(b"jpeg"))
        )
        template_id = out.id.removeprefix("TEMPLATE-")
        assert out.photo is not None
        assert out.photo.key.startswith(f"ptstudio-test/templates/{template_id}/")
        assert media.assets[out.photo.key] == b"jpeg"

    def test_failed_upload_is_logged_not_raised(self, ctx, squat, caplog):
        service = TemplateService(ctx=ctx, media_store=_BrokenStore())
        with caplog.at_level(logging.WARNING):
            out = service.create(
                TemplateCreateIn(name="Pull", exercises=[slot(squat, 1)], file=io.BytesIO(b"x"))
            )
        assert out.photo is None
        assert any(r.message == "Photo upload failed" for r in caplog.records)

    # ---------------------------- Update ---------------------------------- #

    def test_update_replaces_tree(self, session, service, trainer, squat, reps):
        bench = ExerciseFactory(created_by=trainer.id, name="Bench")
        created = service.create(
            TemplateCreateIn(name="A", exercises=[slot(squat, 1, {1: [(reps, "5")]})])
        )

        out = service.update(
            TemplateUpdateIn(
                id=created.id, name="A2", exercises=[slot(bench, 1), slot(squat, 2)]
            )
        )

        assert out.name == "A2"
        assert [link.exercise.name for link in out.exercises] == ["Bench", "Squat"]
        assert all(link.sets == [] for link in out.exercises)
        assert self._count(session, TemplateExercise) == 2

    def test_update_replaces_photo_and_destroys_old_asset(self, service, media, squat):
        created = service.create(
            TemplateCreateIn(name="A", exercises=[slot(squat, 1)], file=io.BytesIO(b"old"))
        )
        updated = service.update(
            TemplateUpdateIn(
                id=created.id, name="A", exercises=[slot(squat, 1)], file=io.BytesIO(b"new")
            )
        )
        assert updated.photo.key != created.photo.key
        assert created.photo.key in media.destroyed
        assert created.photo.key not in media.assets

    def test_update_foreign_template_is_rejected(self, service, squat):
        foreign = TemplateFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            service.update(
                TemplateUpdateIn(
                    id=oid(EntityKind.TEMPLATE, foreign), name="x", exercises=[slot(squat, 1)]
                )
            )

    def test_failed_update_keeps_previous_name_and_tree(self, service, trainer, squat, reps):
        created = service.create(
            TemplateCreateIn(name="A", exercises=[slot(squat, 1, {1: [(reps, "5")]})])
        )
        bench = ExerciseFactory(created_by=trainer.id, name="Bench")
        bad = ProgramExerciseIn(
            exercise_id=oid(EntityKind.EXERCISE, squat),
            order_position=2,
            sets=[SetIn(1, [SetVariableIn(variable_id="EXERCISE-VARIABLES-987654")])],
        )

        with pytest.raises(NotFoundError):
            service.update(
                TemplateUpdateIn(id=created.id, name="A2", exercises=[slot(bench, 1), bad])
            )

        current = service.get(created.id)
        assert current.name == "A"
        [link] = current.exercises
        assert link.exercise.name == "Squat"
        assert link.sets[0].variables[0].target_value == "5"

    def test_writer_failure_during_update_keeps_previous_tree(
        self, session, ctx, service, squat, reps
    ):
        created = service.create(
            TemplateCreateIn(name="A", exercises=[slot(squat, 1, {1: [(reps, "5")]})])
        )
        failing = TemplateService(ctx=ctx, writer=_FailingWriter())

        with pytest.raises(RuntimeError):
            failing.update(TemplateUpdateIn(id=created.id, name="A2", exercises=[slot(squat, 1)]))

        assert service.get(created.id).name == "A"
        assert self._count(session, TemplateExercise) == 1
        assert self._count(session, TemplateExerciseSetVariable) == 1

    # --------------------------- Delete / read ---------------------------- #

    def test_delete_archives_and_removes_photo(self, service, media, squat):
        created = service.create(
            TemplateCreateIn(name="A", exercises=[slot(squat, 1)], file=io.BytesIO(b"img"))
        )

        assert service.delete(created.id) == created.id

        assert created.photo.key in media.destroyed
        with pytest.raises(NotFoundError):
            service.get(created.id)

    def test_paginate_lists_templates_with_trees(self, service, trainer, squat):
        service.create(TemplateCreateIn(name="Upper", exercises=[slot(squat, 1)]))
        service.create(TemplateCreateIn(name="Lower", exercises=[slot(squat, 1)]))
        TemplateFactory(created_by=TrainerFactory().id, name="Lower")

        page = service.paginate(PageIn(search_term="low"))

        assert [t.name for t in page.nodes] == ["Lower"]
        assert page.nodes[0].exercises[0].exercise.name == "Squat"
