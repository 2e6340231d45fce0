from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class CategoryCreateIn:
    """
    Create a category, optionally under a parent.

    :param name: Category name (unique among active siblings).
    :param parent_category: Opaque ``CATEGORY-<id>`` of the parent, if any.
    """

    name: str
    parent_category: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryUpdateIn:
    id: str
    name: str
    parent_category: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryDeleteIn:
    id: str


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class CategoryOut:
    """Public projection of a category with its immediate children."""

    id: str
    name: str
    parent_category: str | None
    created_at: datetime | None
    updated_at: datetime | None
    subcategories: list[CategoryOut] = field(default_factory=list)
