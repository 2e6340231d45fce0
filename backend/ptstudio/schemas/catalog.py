"""Category, exercise and exercise-variable payloads."""

from __future__ import annotations

from marshmallow import fields, validate

from ptstudio.services.categories import CategoryCreateIn, CategoryUpdateIn
from ptstudio.services.exercises import (
    ExerciseCreateIn,
    ExerciseListIn,
    ExerciseUpdateIn,
    ExerciseVariableCreateIn,
    ExerciseVariableUpdateIn,
)

from .common import CamelCaseSchema, PageInSchema

_NAME = validate.Length(min=1, max=120)


class CategoryCreateSchema(CamelCaseSchema):
    dto = CategoryCreateIn

    name = fields.String(required=True, validate=_NAME)
    parent_category = fields.String(load_default=None)


class CategoryUpdateSchema(CategoryCreateSchema):
    dto = CategoryUpdateIn

    id = fields.String(required=True)


class CategorySchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    parent_category = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    subcategories = fields.List(fields.Nested(lambda: CategorySchema(exclude=("subcategories",))))


class ExerciseListSchema(PageInSchema):
    dto = ExerciseListIn

    category = fields.String(load_default=None)


class ExerciseCreateSchema(CamelCaseSchema):
    dto = ExerciseCreateIn

    name = fields.String(required=True, validate=_NAME)
    category = fields.String(required=True)
    url = fields.String(required=True, validate=validate.Length(min=1, max=500))


class ExerciseUpdateSchema(ExerciseCreateSchema):
    dto = ExerciseUpdateIn

    id = fields.String(required=True)


class ExerciseSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    url = fields.String()
    category = fields.String()
    category_name = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ExerciseVariableCreateSchema(CamelCaseSchema):
    dto = ExerciseVariableCreateIn

    name = fields.String(required=True, validate=validate.Length(min=1, max=80))
    unit = fields.String(required=True, validate=validate.Length(min=1, max=40))
    description = fields.String(load_default=None, allow_none=True)


class ExerciseVariableUpdateSchema(ExerciseVariableCreateSchema):
    dto = ExerciseVariableUpdateIn

    id = fields.String(required=True)


class ExerciseVariableSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    unit = fields.String()
    description = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
