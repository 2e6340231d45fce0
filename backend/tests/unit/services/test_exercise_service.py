from __future__ import annotations

import pytest

from ptstudio.core.ids import EntityKind
from ptstudio.services._shared.dto import PageIn
from ptstudio.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    NotOwnerError,
)
from ptstudio.services.exercises import (
    ExerciseCreateIn,
    ExerciseListIn,
    ExerciseService,
    ExerciseUpdateIn,
    ExerciseVariableCreateIn,
    ExerciseVariableService,
    ExerciseVariableUpdateIn,
)
from tests.factories.catalog import CategoryFactory, ExerciseFactory, ExerciseVariableFactory
from tests.factories.user import TrainerFactory
from tests.helpers.utils import oid


class TestExerciseService:
    @pytest.fixture()
    def service(self, ctx) -> ExerciseService:
        return ExerciseService(ctx=ctx)

    @pytest.fixture()
    def category(self, trainer):
        return CategoryFactory(created_by=trainer.id, name="Strength")

    def _create(self, category, name="Squat") -> ExerciseCreateIn:
        return ExerciseCreateIn(
            name=name, category=oid(EntityKind.CATEGORY, category), url="https://v.example/squat"
        )

    def test_add_returns_category_name(self, service, category):
        out = service.add(self._create(category))
        assert out.id.startswith("EXERCISE-")
        assert out.category == oid(EntityKind.CATEGORY, category)
        assert out.category_name == "Strength"

    @pytest.mark.parametrize("field", ["name", "url"])
    def test_add_requires_fields(self, service, category, field):
        payload = {"name": "Squat", "url": "https://v.example/squat"}
        payload[field] = ""
        with pytest.raises(InvalidArgumentError):
            service.add(ExerciseCreateIn(category=oid(EntityKind.CATEGORY, category), **payload))

    def test_add_into_foreign_category_is_rejected(self, service):
        foreign = CategoryFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            service.add(self._create(foreign))

    def test_duplicate_name_conflicts_until_archived(self, service, category):
        first = service.add(self._create(category, name="Deadlift"))
        with pytest.raises(ConflictError):
            service.add(self._create(category, name="Deadlift"))

        service.delete(first.id)
        again = service.add(self._create(category, name="Deadlift"))
        assert again.id != first.id

    def test_edit_moves_category(self, service, trainer, category):
        other = CategoryFactory(created_by=trainer.id, name="Legs")
        created = service.add(self._create(category))

        out = service.edit(
            ExerciseUpdateIn(
                id=created.id,
                name="Front squat",
                url=created.url,
                category=oid(EntityKind.CATEGORY, other),
            )
        )
        assert out.name == "Front squat"
        assert out.category_name == "Legs"

    def test_edit_archived_exercise_is_not_found(self, service, category):
        created = service.add(self._create(category))
        service.delete(created.id)
        with pytest.raises(NotFoundError):
            service.edit(
                ExerciseUpdateIn(
                    id=created.id,
                    name="x",
                    url="https://v.example/x",
                    category=oid(EntityKind.CATEGORY, category),
                )
            )

    def test_delete_rejects_wrong_id_kind(self, service):
        with pytest.raises(InvalidArgumentError):
            service.delete("CATEGORY-1")

    # ---------------------------- Listing --------------------------------- #

    def test_paginate_walks_pages_with_cursor(self, service, trainer, category):
        rows = [ExerciseFactory(created_by=trainer.id, category_id=category.id) for _ in range(3)]

        first = service.paginate(ExerciseListIn(first=2))
        assert [e.id for e in first.nodes] == [oid(EntityKind.EXERCISE, r) for r in rows[:2]]
        assert first.page_info.has_next_page is True
        assert first.page_info.end_cursor == first.edges[-1].cursor

        second = service.paginate(ExerciseListIn(first=2, after=first.page_info.end_cursor))
        assert [e.id for e in second.nodes] == [oid(EntityKind.EXERCISE, rows[2])]
        assert second.page_info.has_next_page is False

    def test_paginate_defaults_to_configured_size(self, service, trainer, category):
        for _ in range(12):
            ExerciseFactory(created_by=trainer.id, category_id=category.id)
        page = service.paginate(ExerciseListIn())
        assert len(page.edges) == 10
        assert page.page_info.has_next_page is True

    def test_paginate_rejects_negative_size_and_bad_cursor(self, service):
        with pytest.raises(InvalidArgumentError):
            service.paginate(ExerciseListIn(first=-1))
        with pytest.raises(InvalidArgumentError):
            service.paginate(ExerciseListIn(after="not-base64!"))

    def test_category_filter_includes_direct_children(self, service, trainer, category):
        child = CategoryFactory(created_by=trainer.id, parent_category_id=category.id)
        grandchild = CategoryFactory(created_by=trainer.id, parent_category_id=child.id)
        unrelated = CategoryFactory(created_by=trainer.id)
        in_root = ExerciseFactory(created_by=trainer.id, category_id=category.id)
        in_child = ExerciseFactory(created_by=trainer.id, category_id=child.id)
        ExerciseFactory(created_by=trainer.id, category_id=grandchild.id)
        ExerciseFactory(created_by=trainer.id, category_id=unrelated.id)

        page = service.paginate(ExerciseListIn(category=oid(EntityKind.CATEGORY, category)))

        assert [e.id for e in page.nodes] == [
            oid(EntityKind.EXERCISE, in_root),
            oid(EntityKind.EXERCISE, in_child),
        ]

    def test_search_term_filters_by_name(self, service, trainer, category):
        ExerciseFactory(created_by=trainer.id, category_id=category.id, name="Bench press")
        ExerciseFactory(created_by=trainer.id, category_id=category.id, name="Squat")
        page = service.paginate(ExerciseListIn(search_term="BENCH"))
        assert [e.name for e in page.nodes] == ["Bench press"]

    def test_all_categories_returns_parent_chain(self, service, trainer, category):
        child = CategoryFactory(created_by=trainer.id, parent_category_id=category.id, name="Legs")
        exercise = ExerciseFactory(created_by=trainer.id, category_id=child.id)

        chain = service.all_categories(oid(EntityKind.EXERCISE, exercise))

        assert [c.name for c in chain] == ["Strength", "Legs"]


class TestExerciseVariableService:
    @pytest.fixture()
    def service(self, ctx) -> ExerciseVariableService:
        return ExerciseVariableService(ctx=ctx)

    def test_add_edit_delete(self, service):
        created = service.add(ExerciseVariableCreateIn(name="Weight", unit="kg"))
        assert created.id.startswith("EXERCISE-VARIABLES-")

        edited = service.edit(
            ExerciseVariableUpdateIn(id=created.id, name="Load", unit="kg", description="Bar load")
        )
        assert (edited.name, edited.description) == ("Load", "Bar load")

        assert service.delete(created.id) == created.id
        with pytest.raises(NotFoundError):
            service.delete(created.id)

    def test_unit_is_required(self, service):
        with pytest.raises(InvalidArgumentError):
            service.add(ExerciseVariableCreateIn(name="Weight", unit=""))

    def test_duplicate_name_conflicts(self, service):
        service.add(ExerciseVariableCreateIn(name="Reps", unit="reps"))
        with pytest.raises(ConflictError):
            service.add(ExerciseVariableCreateIn(name="Reps", unit="count"))

    def test_paginate_only_lists_own_variables(self, service, trainer):
        mine = ExerciseVariableFactory(created_by=trainer.id)
        ExerciseVariableFactory()
        page = service.paginate(PageIn())
        assert [v.id for v in page.nodes] == [oid(EntityKind.EXERCISE_VARIABLES, mine)]
