from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import BinaryIO

from ptstudio.services.media import PhotoOut


@dataclass(frozen=True, slots=True)
class ClientListIn:
    """
    Filters for the trainer's client list.

    :param status: Exact status (``pending``, ``active``, ``deactivated``).
    :param search: Case-insensitive match on name or email.
    """

    first: int | None = None
    after: str | None = None
    status: str | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class ClientCreateIn:
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class ClientUpdateIn:
    id: str
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class ClientOut:
    id: str
    name: str
    email: str
    status: str
    created_at: datetime | None
    updated_at: datetime | None
    deactivated_at: datetime | None = None
    photo: PhotoOut | None = None


@dataclass(frozen=True, slots=True)
class ProfileUpsertIn:
    """Only non-empty fields are written; ``user_id`` defaults to the caller."""

    user_id: str | None = None
    birthday: date | None = None
    height: float | None = None
    weight: float | None = None
    sex: str | None = None


@dataclass(frozen=True, slots=True)
class ProfilePhotoIn:
    file: BinaryIO | None
    user_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileOut:
    id: str
    user_id: str
    birthday: date | None
    height: float | None
    weight: float | None
    sex: str | None
    photo: PhotoOut | None
    created_at: datetime | None
    updated_at: datetime | None
