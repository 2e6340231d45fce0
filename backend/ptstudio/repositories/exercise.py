"""Exercise catalog repositories."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from sqlalchemy import func, select

from ptstudio.models.exercise import Exercise, ExerciseVariable
from ptstudio.repositories.base import KeysetPage, OwnedRepository, paginate_after


class ExerciseRepository(OwnedRepository[Exercise]):
    """Persist :class:`Exercise` rows and answer category-reference checks."""

    model = Exercise

    def _updatable_fields(self) -> set[str]:
        return {"name", "url", "category_id"}

    def paginate_for_owner(
        self,
        owner_id: int,
        *,
        first: int,
        after_id: int | None = None,
        category_ids: Sequence[int] | None = None,
        search_term: str | None = None,
    ) -> KeysetPage[Exercise]:
        """Keyset page of active exercises, optionally within ``category_ids``."""
        stmt = self._search(self._owned_by(owner_id), search_term)
        if category_ids:
            stmt = stmt.where(self.model.category_id.in_(list(category_ids)))
        return cast(
            KeysetPage[Exercise],
            paginate_after(
                self.session, stmt, pk_attr=self.model.id, first=first, after_id=after_id
            ),
        )

    def any_in_categories(self, category_ids: Sequence[int], owner_id: int) -> bool:
        """Whether any active exercise of ``owner_id`` uses one of the categories."""
        if not category_ids:
            return False
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(
                self.model.category_id.in_(list(category_ids)),
                self.model.created_by == owner_id,
                self.model.archived_at.is_(None),
            )
        )
        return bool(self.session.execute(stmt).scalar())


class ExerciseVariableRepository(OwnedRepository[ExerciseVariable]):
    """Persist :class:`ExerciseVariable` rows."""

    model = ExerciseVariable

    def _updatable_fields(self) -> set[str]:
        return {"name", "unit", "description"}
