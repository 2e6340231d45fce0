"""Shared marshmallow plumbing: camelCase keys, DTO loading, connections."""

from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from ptstudio.services._shared.dto import PageIn
from ptstudio.services._shared.errors import InvalidArgumentError


def camelcase(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class CamelCaseSchema(Schema):
    """
    Snake-case attributes exposed as camelCase keys.

    Subclasses setting ``dto`` load straight into that dataclass.
    """

    dto: ClassVar[type | None] = None

    class Meta:
        unknown = EXCLUDE

    def on_bind_field(self, field_name: str, field_obj: fields.Field) -> None:
        field_obj.data_key = camelcase(field_obj.data_key or field_name)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> Any:
        return self.dto(**data) if self.dto is not None else data


def _flatten(messages: Any, prefix: str = "") -> list[str]:
    if isinstance(messages, dict):
        out: list[str] = []
        for key, value in messages.items():
            out.extend(_flatten(value, f"{prefix}{key}."))
        return out
    if isinstance(messages, list) and all(isinstance(m, str) for m in messages):
        return [f"{prefix.rstrip('.')}: {m}" if prefix else m for m in messages]
    return [f"{prefix.rstrip('.')}: {messages}"]


def load_dto(schema: Schema, payload: Any, **extra: Any) -> Any:
    """
    Validate ``payload`` and return the schema's DTO.

    ``extra`` fills fields that never travel as JSON (uploaded files).

    :raises InvalidArgumentError: With every field error joined in the message.
    """
    try:
        loaded = schema.load(payload)
    except ValidationError as exc:
        raise InvalidArgumentError("; ".join(_flatten(exc.messages))) from exc
    if extra:
        loaded = dataclasses.replace(loaded, **extra)
    return loaded


class PageInSchema(CamelCaseSchema):
    dto = PageIn

    first = fields.Integer(load_default=None, validate=validate.Range(min=0))
    after = fields.String(load_default=None)
    search_term = fields.String(load_default=None)


class PageInfoSchema(CamelCaseSchema):
    has_next_page = fields.Boolean()
    has_previous_page = fields.Boolean()
    start_cursor = fields.String(allow_none=True)
    end_cursor = fields.String(allow_none=True)


class PhotoSchema(CamelCaseSchema):
    url = fields.String()
    key = fields.String()


class SuccessSchema(CamelCaseSchema):
    success = fields.Boolean()


def connection_schema(node_schema: type[Schema]) -> Schema:
    """Dump schema for a :class:`~ptstudio.services._shared.dto.Connection` of ``node_schema``."""
    edge = CamelCaseSchema.from_dict(
        {"cursor": fields.String(), "node": fields.Nested(node_schema)},
        name=f"{node_schema.__name__}Edge",
    )
    connection = CamelCaseSchema.from_dict(
        {
            "edges": fields.List(fields.Nested(edge)),
            "page_info": fields.Nested(PageInfoSchema),
        },
        name=f"{node_schema.__name__}Connection",
    )
    return connection()
