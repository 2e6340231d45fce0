"""Generic repository base and query utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Forward-only keyset pagination on the primary key (``id > after``).
- Safe sorting with a whitelist mapping (prevents SQL injection).
- Safe update helpers with per-repository updatable-field whitelists.
- Owner scoping and soft deletion (``archived_at``) for trainer-owned rows.
- No business logic, no commit/rollback; Units of Work own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or authorization.
  - They never call commit/rollback.
* Listing queries always exclude archived rows.
* Keyset pages fetch ``first + 1`` rows; the extra row only signals
  ``has_next`` and is never returned.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from ptstudio.core.extensions import db
from ptstudio.models.base import utcnow

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class KeysetPage(Generic[E]):
    """One forward page of a keyset listing.

    :param items: Rows of the page, ascending by id, at most ``first``.
    :type items: Sequence[E]
    :param has_next: ``True`` when more rows exist past the last item.
    :type has_next: bool
    """

    items: Sequence[E]
    has_next: bool


def paginate_after(
    session: Session,
    stmt: Select[Any],
    *,
    pk_attr: InstrumentedAttribute[Any],
    first: int,
    after_id: int | None = None,
) -> KeysetPage[Any]:
    """Execute ``stmt`` as a keyset window after ``after_id``.

    Any existing ``ORDER BY`` is replaced by ascending ``pk_attr`` so that
    cursors (absolute ids) stay stable under concurrent inserts.

    :param session: Active SQLAlchemy session.
    :param stmt: Base select, already filtered.
    :param pk_attr: Primary-key attribute used for ordering and the window.
    :param first: Page size (``>= 0``, validated by the caller).
    :param after_id: Exclusive lower bound, or ``None`` for the first page.
    :returns: :class:`KeysetPage` with at most ``first`` items.
    """
    if after_id is not None:
        stmt = stmt.where(pk_attr > after_id)
    stmt = stmt.order_by(None).order_by(pk_attr.asc()).limit(int(first) + 1)
    rows = list(session.execute(stmt).scalars().all())
    has_next = len(rows) > first
    return KeysetPage(items=rows[:first], has_next=has_next)


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens (``["-updated_at", "name"]``) into ``(field, desc)``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply whitelisted ``ORDER BY`` clauses plus a primary-key tiebreaker.

    Unknown sort tokens are ignored silently.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())
    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    Subclasses MAY override:

    * ``_sortable_fields`` to expose safe sort keys.
    * ``_updatable_fields`` to whitelist keys allowed for updates.
    * ``_soft_delete`` to implement soft deletions.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``ptstudio.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _soft_delete(self, instance: E) -> bool:
        """Hook for soft deletion. Return ``True`` if deletion was handled."""
        return False

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return cast(InstrumentedAttribute[Any], self.model.id)  # type: ignore[attr-defined]

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        """Whitelist of keys that :meth:`assign_updates` may set."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _sanitize_update_fields(
        self, fields: Mapping[str, Any], *, strict: bool = True
    ) -> dict[str, Any]:
        """Return only whitelisted update keys.

        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key (archived rows included)."""
        stmt = select(self.model).where(self._pk_attr() == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Delete an entity (soft or hard) and flush changes."""
        if not self._soft_delete(instance):
            self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign only whitelisted keys to ``instance`` and optionally flush.

        The assignment uses ``setattr`` so SQLAlchemy ``@validates`` hooks run.
        """
        for k, v in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    def update(self, instance: E, **fields: Any) -> E:
        return self.assign_updates(instance, fields, strict=True, flush=True)


class OwnedRepository(BaseRepository[E]):
    """Repository for trainer-owned, soft-deletable rows.

    The model must carry ``created_by``, ``name`` and ``archived_at``.
    Every lookup here ignores archived rows.
    """

    def _active(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.where(self.model.archived_at.is_(None))  # type: ignore[attr-defined]

    def _owned_by(self, owner_id: int) -> Select[Any]:
        return self._active(select(self.model)).where(
            self.model.created_by == owner_id  # type: ignore[attr-defined]
        )

    def _search(self, stmt: Select[Any], search_term: str | None) -> Select[Any]:
        """Case-insensitive substring match on ``name`` (blank terms ignored)."""
        term = (search_term or "").strip()
        if not term:
            return stmt
        return stmt.where(self.model.name.icontains(term, autoescape=True))  # type: ignore[attr-defined]

    def _soft_delete(self, instance: E) -> bool:
        instance.archived_at = utcnow()  # type: ignore[attr-defined]
        return True

    def get_active(self, entity_id: int) -> E | None:
        """Return the row unless it is missing or archived."""
        stmt = self._active(select(self.model)).where(self._pk_attr() == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def archive(self, instance: E) -> E:
        self.delete(instance)
        return instance

    def name_taken(
        self,
        owner_id: int,
        name: str,
        *,
        exclude_id: int | None = None,
        **scope: Any,
    ) -> bool:
        """Whether a non-archived row of ``owner_id`` already uses ``name``.

        Extra keyword arguments narrow the sibling scope by equality
        (``parent_category_id=None`` matches ``IS NULL``).
        """
        stmt = select(func.count()).select_from(self.model).where(
            self.model.created_by == owner_id,  # type: ignore[attr-defined]
            self.model.name == name,  # type: ignore[attr-defined]
            self.model.archived_at.is_(None),  # type: ignore[attr-defined]
        )
        for key, value in scope.items():
            col = getattr(self.model, key)
            stmt = stmt.where(col.is_(None) if value is None else col == value)
        if exclude_id is not None:
            stmt = stmt.where(self._pk_attr() != exclude_id)
        return bool(self.session.execute(stmt).scalar())

    def paginate_owned(
        self,
        owner_id: int,
        *,
        first: int,
        after_id: int | None = None,
        search_term: str | None = None,
    ) -> KeysetPage[E]:
        """Keyset page of the owner's active rows, optionally name-filtered."""
        stmt = self._search(self._owned_by(owner_id), search_term)
        return cast(
            KeysetPage[E],
            paginate_after(
                self.session, stmt, pk_attr=self._pk_attr(), first=first, after_id=after_id
            ),
        )
