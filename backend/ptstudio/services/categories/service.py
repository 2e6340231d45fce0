from __future__ import annotations

import logging

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.category import Category
from ptstudio.services._shared.base import BaseService
from ptstudio.services._shared.errors import ConflictError, InvalidArgumentError
from ptstudio.services._shared.guards import ensure_owned

from .dto import CategoryCreateIn, CategoryDeleteIn, CategoryOut, CategoryUpdateIn

logger = logging.getLogger(__name__)


def category_to_out(row: Category, subcategories: list[Category] | None = None) -> CategoryOut:
    return CategoryOut(
        id=encode_id(EntityKind.CATEGORY, row.id),
        name=row.name,
        parent_category=(
            encode_id(EntityKind.CATEGORY, row.parent_category_id)
            if row.parent_category_id is not None
            else None
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
        subcategories=[category_to_out(child) for child in subcategories or []],
    )


class CategoryService(BaseService):
    """Manage the caller's category tree (one resolved level of nesting)."""

    def list_roots(self) -> list[CategoryOut]:
        """Active root categories, newest update first, each with its children."""
        owner_id = self.actor_id
        with self.ro_uow() as uow:
            roots = uow.categories.list_roots(owner_id)
            children = uow.categories.subcategories_by_parent([r.id for r in roots], owner_id)
            return [category_to_out(root, children.get(root.id, [])) for root in roots]

    def add(self, dto: CategoryCreateIn) -> CategoryOut:
        """Create a category after checking the parent and sibling names."""
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        parent_id = self.optional_id(EntityKind.CATEGORY, dto.parent_category)

        with self.rw_uow() as uow:
            if parent_id is not None:
                ensure_owned(uow.session, EntityKind.CATEGORY, parent_id, owner_id)
            if uow.categories.name_taken(owner_id, name, parent_category_id=parent_id):
                raise ConflictError("Category", "A category with this name already exists")

            category = uow.categories.add(
                Category(name=name, parent_category_id=parent_id, created_by=owner_id)
            )
            logger.info(
                "Category created",
                extra={"category_id": category.id, "parent_category_id": parent_id},
            )
            return category_to_out(category)

    def edit(self, dto: CategoryUpdateIn) -> CategoryOut:
        """Rename or re-parent a category."""
        owner_id = self.actor_id
        category_id = self.require_id(EntityKind.CATEGORY, dto.id, field="id")
        name = self.require_text(dto.name, field="name")
        parent_id = self.optional_id(EntityKind.CATEGORY, dto.parent_category)
        if parent_id == category_id:
            raise InvalidArgumentError("A category cannot be its own parent")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.CATEGORY, category_id, owner_id)
            if parent_id is not None:
                ensure_owned(uow.session, EntityKind.CATEGORY, parent_id, owner_id)
            if uow.categories.name_taken(
                owner_id, name, parent_category_id=parent_id, exclude_id=category_id
            ):
                raise ConflictError("Category", "A category with this name already exists")

            category = uow.categories.get_active(category_id)
            assert category is not None  # guarded above
            uow.categories.update(category, name=name, parent_category_id=parent_id)
            logger.info("Category updated", extra={"category_id": category_id})
            return category_to_out(category)

    def delete(self, dto: CategoryDeleteIn) -> str:
        """
        Archive a category and its direct children.

        :returns: Opaque id of the archived category.
        :raises ConflictError: When any exercise still references the category
            or one of its children.
        """
        owner_id = self.actor_id
        category_id = self.require_id(EntityKind.CATEGORY, dto.id, field="id")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.CATEGORY, category_id, owner_id)
            children = uow.categories.subcategories_by_parent([category_id], owner_id)[category_id]
            category_ids = [category_id, *(c.id for c in children)]

            if uow.exercises.any_in_categories(category_ids, owner_id):
                raise ConflictError(
                    "Category", "Cannot delete a category with associated exercises"
                )

            category = uow.categories.get_active(category_id)
            uow.categories.archive_many([*children, category])
            logger.info(
                "Category archived",
                extra={"category_id": category_id, "children": [c.id for c in children]},
            )
        return encode_id(EntityKind.CATEGORY, category_id)
