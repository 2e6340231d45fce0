"""Opaque identifiers and pagination cursors exposed to API clients.

Entity IDs travel as ``"<KIND>-<numeric id>"`` strings (``"EXERCISE-42"``)
and cursors as the base64 text of the last row's numeric id. Both decoders
reject malformed input with :class:`InvalidArgumentError` instead of passing
a mangled value on to storage.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum

from ptstudio.services._shared.errors import InvalidArgumentError


class EntityKind(str, Enum):
    """Tag of an opaque identifier; the value is the wire prefix."""

    CATEGORY = "CATEGORY"
    EXERCISE = "EXERCISE"
    USER = "USER"
    TEMPLATE = "TEMPLATE"
    TEMPLATE_EXERCISES = "TEMPLATE-EXERCISES"
    USER_DETAILS = "USER-DETAILS"
    EXERCISE_VARIABLES = "EXERCISE-VARIABLES"
    TRAINING = "TRAINING"
    TRAINING_EXERCISES = "TRAINING-EXERCISES"
    TRAINING_SET_VARIABLES = "TRAINING-SET-VARIABLES"


def encode_id(kind: EntityKind, numeric_id: int) -> str:
    """Return the opaque form of ``numeric_id`` tagged with ``kind``."""
    return f"{kind.value}-{int(numeric_id)}"


def decode_id(kind: EntityKind, encoded: str | None) -> int | None:
    """
    Decode an opaque identifier of the expected ``kind``.

    :param kind: Expected tag.
    :param encoded: Opaque identifier as received from a client.
    :returns: Numeric id, or ``None`` when ``encoded`` is empty or absent.
    :raises InvalidArgumentError: On a tag mismatch or a non-numeric payload.
    """
    if encoded is None or encoded == "":
        return None
    prefix = f"{kind.value}-"
    if not encoded.startswith(prefix):
        raise InvalidArgumentError(f"Expected a {kind.value} identifier, got {encoded!r}")
    payload = encoded[len(prefix) :]
    # Longer prefixes share a stem ("TRAINING-" vs "TRAINING-EXERCISES-")
    if not payload.isdigit() or not payload.isascii():
        raise InvalidArgumentError(f"Malformed {kind.value} identifier: {encoded!r}")
    return int(payload)


@dataclass(frozen=True, slots=True)
class OpaqueId:
    """Tagged identifier: an :class:`EntityKind` plus its numeric payload."""

    kind: EntityKind
    value: int

    def encode(self) -> str:
        return encode_id(self.kind, self.value)

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def parse(cls, kind: EntityKind, raw: str | None) -> OpaqueId | None:
        value = decode_id(kind, raw)
        return None if value is None else cls(kind, value)


def encode_cursor(row_id: int) -> str:
    """Encode a row id as an opaque pagination cursor."""
    return base64.b64encode(str(int(row_id)).encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str | None) -> int | None:
    """
    Decode a pagination cursor back into a row id.

    :returns: Row id, or ``None`` for an empty or absent cursor.
    :raises InvalidArgumentError: When the cursor is not base64 of a number.
    """
    if cursor is None or cursor == "":
        return None
    try:
        text = base64.b64decode(cursor.encode("ascii"), validate=True).decode("utf-8")
    except ValueError as exc:  # binascii.Error and UnicodeError included
        raise InvalidArgumentError(f"Malformed cursor: {cursor!r}") from exc
    if not text.isdigit() or not text.isascii():
        raise InvalidArgumentError(f"Malformed cursor: {cursor!r}")
    return int(text)


__all__ = [
    "EntityKind",
    "OpaqueId",
    "decode_cursor",
    "decode_id",
    "encode_cursor",
    "encode_id",
]
