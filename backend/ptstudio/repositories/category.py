"""Category repository and the one-level hierarchy resolver."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import InstrumentedAttribute

from ptstudio.models.category import Category
from ptstudio.repositories.base import OwnedRepository, _apply_sorting


class CategoryRepository(OwnedRepository[Category]):
    """Persist :class:`Category` rows for a trainer."""

    model = Category

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "name": self.model.name,
            "created_at": self.model.created_at,
            "updated_at": self.model.updated_at,
        }

    def _updatable_fields(self) -> set[str]:
        return {"name", "parent_category_id"}

    def list_roots(self, owner_id: int) -> list[Category]:
        """Active top-level categories, most recently updated first."""
        stmt = self._owned_by(owner_id).where(self.model.parent_category_id.is_(None))
        stmt = _apply_sorting(
            stmt, self._sortable_fields(), ["-updated_at", "name"], pk_attr=self._pk_attr()
        )
        return list(self.session.execute(stmt).scalars().unique().all())

    def subcategories_by_parent(
        self, parent_ids: Iterable[int], owner_id: int
    ) -> dict[int, list[Category]]:
        """Group the immediate active children of ``parent_ids`` by parent.

        Only one level is resolved; grandchildren are not followed. Parents
        without children map to an empty list.

        :param parent_ids: Category ids whose children are wanted.
        :param owner_id: Trainer whose rows are considered.
        :returns: ``{parent_id: [child, ...]}`` ordered by name then id.
        """
        ids = list(dict.fromkeys(parent_ids))
        grouped: dict[int, list[Category]] = defaultdict(list)
        if not ids:
            return {}
        stmt = (
            self._owned_by(owner_id)
            .where(self.model.parent_category_id.in_(ids))
            .order_by(self.model.name.asc(), self.model.id.asc())
        )
        for child in self.session.execute(stmt).scalars().unique():
            grouped[child.parent_category_id].append(child)  # type: ignore[index]
        return {pid: grouped.get(pid, []) for pid in ids}

    def ids_with_children(self, category_id: int, owner_id: int) -> list[int]:
        """``[category_id, *child ids]`` used by hierarchy filters."""
        children = self.subcategories_by_parent([category_id], owner_id)[category_id]
        return [category_id, *(c.id for c in children)]

    def archive_many(self, categories: Iterable[Category]) -> None:
        for category in categories:
            self._soft_delete(category)
        self.flush()
