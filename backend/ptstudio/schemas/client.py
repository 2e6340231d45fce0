"""Client account and profile payloads."""

from __future__ import annotations

from marshmallow import fields, validate

from ptstudio.services.clients import (
    ClientCreateIn,
    ClientListIn,
    ClientUpdateIn,
    ProfileUpsertIn,
)

from .common import CamelCaseSchema, PhotoSchema


class ClientListSchema(CamelCaseSchema):
    dto = ClientListIn

    first = fields.Integer(load_default=None, validate=validate.Range(min=0))
    after = fields.String(load_default=None)
    status = fields.String(load_default=None)
    search = fields.String(load_default=None)


class ClientCreateSchema(CamelCaseSchema):
    dto = ClientCreateIn

    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    email = fields.Email(required=True)


class ClientUpdateSchema(ClientCreateSchema):
    dto = ClientUpdateIn

    id = fields.String(required=True)


class ClientSchema(CamelCaseSchema):
    id = fields.String()
    name = fields.String()
    email = fields.String()
    status = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    deactivated_at = fields.DateTime(allow_none=True)
    photo = fields.Nested(PhotoSchema, allow_none=True)


class ProfileUpsertSchema(CamelCaseSchema):
    dto = ProfileUpsertIn

    user_id = fields.String(load_default=None)
    birthday = fields.Date(load_default=None, allow_none=True)
    height = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=0))
    weight = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=0))
    sex = fields.String(load_default=None, allow_none=True)


class ProfileSchema(CamelCaseSchema):
    id = fields.String()
    user_id = fields.String()
    birthday = fields.Date(allow_none=True)
    height = fields.Float(allow_none=True)
    weight = fields.Float(allow_none=True)
    sex = fields.String(allow_none=True)
    photo = fields.Nested(PhotoSchema, allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
