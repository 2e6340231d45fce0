"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the stable contract between repositories, guards and services.

The translation to HTTP responses (RFC 7807) is handled by
``ptstudio/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Database constraint name (e.g. ``uq_photos_model``).
    :returns: ``True`` when the driver message mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The boundary translates them to :class:`ptstudio.core.errors.APIError`.
    """


# --------------------------------------------------------------------------- #
# Taxonomy
# --------------------------------------------------------------------------- #


class InvalidArgumentError(ServiceError):
    """Missing or malformed input; raised before any write."""

    def __init__(self, message: str = "Invalid argument") -> None:
        super().__init__(message)
        self.message = message


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when a referenced entity does not exist (or is archived).

    :param entity: Entity name (e.g. "Category").
    :param key: Identifier or search key.
    :param message: Optional localized message overriding the default text.
    """

    entity: str
    key: str | int | None = None
    message: str | None = None

    def __str__(self) -> str:
        return self.message or f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class NotOwnerError(ServiceError):
    """
    Raised when the entity exists but belongs to another owner.

    :param entity: Entity name.
    :param message: Optional localized message.
    """

    entity: str
    message: str | None = None

    def __str__(self) -> str:
        return self.message or f"You do not own this {self.entity.lower()}"


# Kept under the name the service base and older call sites expect
AuthorizationError = NotOwnerError


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a duplicate name or a business rule blocks the write.

    :param entity: Entity name (e.g. "Exercise").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class UnauthenticatedError(ServiceError):
    """Raised when an operation is invoked without a caller identity."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)
        self.message = message
