from __future__ import annotations

import pytest

from ptstudio.repositories.category import CategoryRepository
from tests.factories.catalog import CategoryFactory


class TestCategoryRepository:
    @pytest.fixture()
    def repo(self, session) -> CategoryRepository:
        return CategoryRepository(session=session)

    def test_subcategories_grouped_by_parent(self, repo, trainer):
        root_a = CategoryFactory(created_by=trainer.id, name="Strength")
        root_b = CategoryFactory(created_by=trainer.id, name="Mobility")
        lower = CategoryFactory(created_by=trainer.id, name="Lower", parent_category_id=root_a.id)
        upper = CategoryFactory(created_by=trainer.id, name="Arms", parent_category_id=root_a.id)

        grouped = repo.subcategories_by_parent([root_a.id, root_b.id], trainer.id)

        assert [c.id for c in grouped[root_a.id]] == [upper.id, lower.id]
        assert grouped[root_b.id] == []

    def test_only_one_level_is_resolved(self, repo, trainer):
        root = CategoryFactory(created_by=trainer.id)
        child = CategoryFactory(created_by=trainer.id, parent_category_id=root.id)
        CategoryFactory(created_by=trainer.id, parent_category_id=child.id)

        assert repo.ids_with_children(root.id, trainer.id) == [root.id, child.id]

    def test_archived_children_are_skipped(self, repo, trainer):
        root = CategoryFactory(created_by=trainer.id)
        child = CategoryFactory(created_by=trainer.id, parent_category_id=root.id)
        repo.archive(child)

        assert repo.subcategories_by_parent([root.id], trainer.id) == {root.id: []}

    def test_name_taken_is_scoped_to_siblings(self, repo, trainer):
        root = CategoryFactory(created_by=trainer.id, name="Strength")
        CategoryFactory(created_by=trainer.id, name="Legs", parent_category_id=root.id)

        assert repo.name_taken(trainer.id, "Legs", parent_category_id=root.id)
        assert not repo.name_taken(trainer.id, "Legs", parent_category_id=None)
        assert repo.name_taken(trainer.id, "Strength", parent_category_id=None)
