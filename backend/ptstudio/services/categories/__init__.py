from .dto import CategoryCreateIn, CategoryDeleteIn, CategoryOut, CategoryUpdateIn
from .service import CategoryService, category_to_out

__all__ = [
    "CategoryService",
    "category_to_out",
    "CategoryCreateIn",
    "CategoryDeleteIn",
    "CategoryOut",
    "CategoryUpdateIn",
]
