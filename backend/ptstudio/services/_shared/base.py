from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flask import current_app, has_app_context

from ptstudio.core import errors as api_errors
from ptstudio.core.ids import EntityKind, decode_cursor, decode_id
from ptstudio.core.logger import bind_request_id
from ptstudio.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    NotOwnerError,
    ServiceError,
    UnauthenticatedError,
)
from ptstudio.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (caller identity, tracing).

    :param actor_id: Numeric id of the calling trainer (or client).
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Resolve the caller identity and decode opaque ids/cursors.
    * Centralize error translation for the HTTP boundary.

    Notes
    -----
    - Services never touch the global session directly; they go through a
      Unit of Work (an explicit ``session`` may be injected for tests/jobs).
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"
    DEFAULT_PAGE_SIZE = 10

    def __init__(self, *, ctx: ServiceContext | None = None, session: Any = None) -> None:
        """
        :param ctx: Request-scoped context (caller identity, tracing).
        :param session: Optional SQLAlchemy session shared by every UoW.
        """
        self.ctx = ctx or ServiceContext()
        self._session = session
        if self.ctx.request_id:
            bind_request_id(self.ctx.request_id)

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session=self._session)

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(
            session=self._session,
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # ------------------------- Caller & settings ----------------------------

    @property
    def actor_id(self) -> int:
        """
        Numeric id of the caller.

        :raises UnauthenticatedError: When no identity is attached to the context.
        """
        if self.ctx.actor_id is None:
            raise UnauthenticatedError()
        return int(self.ctx.actor_id)

    def setting(self, name: str, default: Any) -> Any:
        """Read an app config value, tolerating calls outside an app context."""
        if has_app_context():
            return current_app.config.get(name, default)
        return default

    # ----------------------- Validation utilities ---------------------------

    def require_id(self, kind: EntityKind, raw: str | None, *, field: str) -> int:
        """Decode a mandatory opaque id, failing with ``InvalidArgumentError``."""
        value = decode_id(kind, raw)
        if value is None:
            raise InvalidArgumentError(f"{field} is required")
        return value

    def optional_id(self, kind: EntityKind, raw: str | None) -> int | None:
        return decode_id(kind, raw)

    def require_text(self, value: str | None, *, field: str) -> str:
        text = (value or "").strip()
        if not text:
            raise InvalidArgumentError(f"{field} is required")
        return text

    def page_window(self, first: int | None, after: str | None) -> tuple[int, int | None]:
        """
        Validate keyset inputs.

        :param first: Requested page size; ``None`` uses ``DEFAULT_PAGE_SIZE``.
        :param after: Opaque cursor of the last row already seen.
        :returns: ``(first, after_id)``.
        :raises InvalidArgumentError: On a negative size or a malformed cursor.
        """
        size = self.setting("DEFAULT_PAGE_SIZE", self.DEFAULT_PAGE_SIZE) if first is None else first
        if int(size) < 0:
            raise InvalidArgumentError("first must be a non-negative integer")
        return int(size), decode_cursor(after)

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised.
        """
        if isinstance(exc, InvalidArgumentError):
            return api_errors.InvalidArgument(str(exc))
        if isinstance(exc, UnauthenticatedError):
            return api_errors.Unauthorized(str(exc))
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))
        if isinstance(exc, NotOwnerError):
            return api_errors.Forbidden(str(exc))
        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")
        # Fallback: untouched, the Flask handlers map it to a generic failure
        return exc
