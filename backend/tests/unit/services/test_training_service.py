from __future__ import annotations

import pytest
from sqlalchemy import func, select

from ptstudio.core.ids import EntityKind
from ptstudio.models import Photo, Training, TrainingExercise, TrainingExerciseSetVariable
from ptstudio.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    NotOwnerError,
)
from ptstudio.services._shared.ports import InMemoryMediaStore
from ptstudio.services.programs import (
    PhotoRefIn,
    ProgramExerciseIn,
    SetIn,
    SetVariableIn,
    TrainingCreateIn,
    TrainingEditIn,
    TrainingService,
)
from tests.factories.catalog import ExerciseFactory, ExerciseVariableFactory
from tests.factories.program import TrainingFactory
from tests.factories.user import ClientFactory, TrainerFactory
from tests.helpers.utils import oid, slot


def _patch(*rows: tuple[str, str | None]) -> list[ProgramExerciseIn]:
    """Edit payload carrying ``(row_id, target)`` pairs; other fields are ignored."""
    return [
        ProgramExerciseIn(
            exercise_id="",
            order_position=0,
            sets=[
                SetIn(
                    set_number=1,
                    variables=[
                        SetVariableIn(variable_id="", id=row_id, target_value=target)
                        for row_id, target in rows
                    ],
                )
            ],
        )
    ]


class TestTrainingService:
    @pytest.fixture()
    def service(self, ctx) -> TrainingService:
        return TrainingService(ctx=ctx, media_store=InMemoryMediaStore())

    @pytest.fixture()
    def client(self, trainer):
        return ClientFactory(created_by=trainer.id)

    @pytest.fixture()
    def squat(self, trainer):
        return ExerciseFactory(created_by=trainer.id, name="Squat")

    @pytest.fixture()
    def reps(self, trainer):
        return ExerciseVariableFactory(created_by=trainer.id, name="Reps")

    def _create(self, service, client, squat, reps, name="Week 1", **kwargs):
        return service.create(
            TrainingCreateIn(
                training_target=oid(EntityKind.USER, client),
                name=name,
                exercises=[slot(squat, 1, {1: [(reps, "10")], 2: [(reps, "8")]})],
                **kwargs,
            )
        )

    def test_create_returns_tree_with_row_ids(self, service, client, squat, reps):
        out = self._create(service, client, squat, reps)

        assert out.training_target == oid(EntityKind.USER, client)
        variables = [v for s in out.exercises[0].sets for v in s.variables]
        assert [v.target_value for v in variables] == ["10", "8"]
        assert all(v.id.startswith("TRAINING-SET-VARIABLES-") for v in variables)

    def test_create_records_photo_reference(self, service, client, squat, reps):
        photo = PhotoRefIn(url="https://media.local/a.jpg", key="a")

        out = self._create(service, client, squat, reps, photo=photo)

        assert out.photo.url == "https://media.local/a.jpg"
        assert out.photo.key == "a"

    def test_create_for_foreign_client_is_rejected(self, service, squat, reps):
        stranger = ClientFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            self._create(service, stranger, squat, reps)

    def test_duplicate_name_is_scoped_by_client(self, service, trainer, client, squat, reps):
        self._create(service, client, squat, reps, name="Block A")
        with pytest.raises(ConflictError):
            self._create(service, client, squat, reps, name="Block A")

        other = ClientFactory(created_by=trainer.id)
        out = self._create(service, other, squat, reps, name="Block A")
        assert out.name == "Block A"

    def test_list_for_target(self, service, trainer, client, squat, reps):
        self._create(service, client, squat, reps, name="One")
        self._create(service, client, squat, reps, name="Two")
        TrainingFactory(created_by=trainer.id)

        trainings = service.list_for_target(oid(EntityKind.USER, client))

        assert [t.name for t in trainings] == ["One", "Two"]

    def test_list_for_unknown_client(self, service):
        with pytest.raises(NotFoundError):
            service.list_for_target("USER-999999")

    def test_edit_patches_only_target_values(self, service, client, squat, reps):
        created = self._create(service, client, squat, reps)
        first, second = (v for s in created.exercises[0].sets for v in s.variables)

        out = service.edit(
            TrainingEditIn(training_id=created.id, exercises=_patch((first.id, " 12 "), (second.id, "")))
        )

        variables = [v for s in out.exercises[0].sets for v in s.variables]
        assert [v.target_value for v in variables] == ["12", None]
        assert [v.id for v in variables] == [first.id, second.id]
        assert [link.id for link in out.exercises] == [link.id for link in created.exercises]

    def test_edit_ignores_rows_of_other_trainings(self, service, client, squat, reps):
        mine = self._create(service, client, squat, reps, name="Mine")
        other = self._create(service, client, squat, reps, name="Other")
        foreign_row = other.exercises[0].sets[0].variables[0]

        service.edit(TrainingEditIn(training_id=mine.id, exercises=_patch((foreign_row.id, "99"))))

        assert service.get(other.id).exercises[0].sets[0].variables[0].target_value == "10"

    def test_edit_requires_row_ids(self, service, client, squat, reps):
        created = self._create(service, client, squat, reps)
        with pytest.raises(InvalidArgumentError):
            service.edit(TrainingEditIn(training_id=created.id, exercises=_patch((None, "1"))))

    def test_delete_hides_training(self, service, client, squat, reps):
        created = self._create(service, client, squat, reps)

        assert service.delete(created.id) == created.id

        with pytest.raises(NotFoundError):
            service.get(created.id)
        assert service.list_for_target(oid(EntityKind.USER, client)) == []

    def test_failed_create_leaves_nothing_behind(self, session, service, client, squat):
        bad = ProgramExerciseIn(
            exercise_id=oid(EntityKind.EXERCISE, squat),
            order_position=2,
            sets=[SetIn(1, [SetVariableIn(variable_id="EXERCISE-VARIABLES-987654")])],
        )
        with pytest.raises(NotFoundError):
            service.create(
                TrainingCreateIn(
                    training_target=oid(EntityKind.USER, client),
                    name="Broken",
                    exercises=[slot(squat, 1), bad],
                    photo=PhotoRefIn(url="https://media.local/b.jpg", key="b"),
                )
            )

        for model in (Training, TrainingExercise, TrainingExerciseSetVariable, Photo):
            assert session.scalar(select(func.count()).select_from(model)) == 0

    def test_create_with_foreign_variable_is_rejected(self, service, client, squat):
        their_reps = ExerciseVariableFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            self._create(service, client, squat, their_reps)
