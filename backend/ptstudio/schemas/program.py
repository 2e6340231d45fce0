"""Template and training payloads (nested exercise → set → variable trees)."""

from __future__ import annotations

from marshmallow import fields, validate

from ptstudio.services.programs import (
    PhotoRefIn,
    ProgramExerciseIn,
    SetIn,
    SetVariableIn,
    TemplateCreateIn,
    TemplateUpdateIn,
    TrainingCreateIn,
    TrainingEditIn,
)

from .common import CamelCaseSchema, PhotoSchema

_NAME = validate.Length(min=1, max=120)


class SetVariableInSchema(CamelCaseSchema):
    dto = SetVariableIn

    variable_id = fields.String(required=True)
    target_value = fields.String(load_default=None, allow_none=True)
    id = fields.String(load_default=None, allow_none=True)


class SetInSchema(CamelCaseSchema):
    dto = SetIn

    set_number = fields.Integer(required=True, validate=validate.Range(min=1))
    variables = fields.List(fields.Nested(SetVariableInSchema), load_default=list)


class ProgramExerciseInSchema(CamelCaseSchema):
    dto = ProgramExerciseIn

    exercise_id = fields.String(required=True)
    order_position = fields.Integer(required=True)
    sets = fields.List(fields.Nested(SetInSchema), load_default=list)


class PhotoRefInSchema(CamelCaseSchema):
    dto = PhotoRefIn

    url = fields.String(required=True)
    key = fields.String(required=True)


class TemplateCreateSchema(CamelCaseSchema):
    dto = TemplateCreateIn

    name = fields.String(required=True, validate=_NAME)
    description = fields.String(load_default=None, allow_none=True)
    exercises = fields.List(
        fields.Nested(ProgramExerciseInSchema), required=True, validate=validate.Length(min=1)
    )


class TemplateUpdateSchema(TemplateCreateSchema):
    dto = TemplateUpdateIn

    id = fields.String(required=True)


class TrainingCreateSchema(TemplateCreateSchema):
    dto = TrainingCreateIn

    training_target = fields.String(required=True)
    photo = fields.Nested(PhotoRefInSchema, load_default=None, allow_none=True)


class TrainingEditSchema(CamelCaseSchema):
    dto = TrainingEditIn

    training_id = fields.String(required=True)
    exercises = fields.List(
        fields.Nested(ProgramExerciseInSchema), required=True, validate=validate.Length(min=1)
    )


# ------------------------------- Output ---------------------------------


class ExerciseRefSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    url = fields.String()
    category = fields.String(allow_none=True)


class VariableRefSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    unit = fields.String()
    description = fields.String(allow_none=True)


class SetVariableSchema(CamelCaseSchema):
    id = fields.String(allow_none=True)
    variable = fields.Nested(VariableRefSchema, allow_none=True)
    target_value = fields.String(allow_none=True)


class SetSchema(CamelCaseSchema):
    set_number = fields.Integer()
    variables = fields.List(fields.Nested(SetVariableSchema))


class ProgramExerciseSchema(CamelCaseSchema):
    id = fields.String()
    order_position = fields.Integer()
    exercise = fields.Nested(ExerciseRefSchema, allow_none=True)
    sets = fields.List(fields.Nested(SetSchema))


class TemplateSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    exercises = fields.List(fields.Nested(ProgramExerciseSchema))
    photo = fields.Nested(PhotoSchema, allow_none=True)


class TrainingSchema(TemplateSchema):
    training_target = fields.String()
