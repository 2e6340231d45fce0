"""Client (user) and client profile repositories."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import Select, func, or_, select

from ptstudio.models.user import User, UserDetails, UserStatus
from ptstudio.repositories.base import BaseRepository, KeysetPage, paginate_after


class UserRepository(BaseRepository[User]):
    """Persist client accounts managed by a trainer.

    Clients are never physically deleted: archiving sets ``archived_at`` and
    ``status = "archived"``, and archived clients are hidden from every
    lookup below.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        return {
            "name",
            "email",
            "status",
            "deactivated_at",
            "registration_token",
            "registration_token_expires_at",
        }

    def _soft_delete(self, instance: User) -> bool:
        instance.archive()
        instance.status = UserStatus.ARCHIVED.value
        return True

    def _clients_of(self, owner_id: int) -> Select[Any]:
        return select(self.model).where(
            self.model.created_by == owner_id,
            self.model.archived_at.is_(None),
            self.model.status != UserStatus.ARCHIVED.value,
        )

    def get_client(self, user_id: int, owner_id: int) -> User | None:
        stmt = self._clients_of(owner_id).where(self.model.id == user_id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def email_taken(self, owner_id: int, email: str, *, exclude_id: int | None = None) -> bool:
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(
                self.model.created_by == owner_id,
                self.model.email == email.strip().lower(),
                self.model.archived_at.is_(None),
            )
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return bool(self.session.execute(stmt).scalar())

    def paginate_clients(
        self,
        owner_id: int,
        *,
        first: int,
        after_id: int | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> KeysetPage[User]:
        """Keyset page of the trainer's clients, filtered by status and name/email."""
        stmt = self._clients_of(owner_id)
        if status:
            stmt = stmt.where(self.model.status == status)
        term = (search or "").strip()
        if term:
            stmt = stmt.where(
                or_(
                    self.model.name.icontains(term, autoescape=True),
                    self.model.email.icontains(term, autoescape=True),
                )
            )
        return cast(
            KeysetPage[User],
            paginate_after(
                self.session, stmt, pk_attr=self.model.id, first=first, after_id=after_id
            ),
        )


class UserDetailsRepository(BaseRepository[UserDetails]):
    """Persist one :class:`UserDetails` row per user (upsert semantics)."""

    model = UserDetails

    def _updatable_fields(self) -> set[str]:
        return {"birthday", "height", "weight", "sex", "photography_url", "photography_key"}

    def get_by_user(self, user_id: int) -> UserDetails | None:
        stmt = select(self.model).where(self.model.user_id == user_id)
        return cast(UserDetails | None, self.session.execute(stmt).scalars().first())

    def upsert(self, user_id: int, fields: Mapping[str, Any]) -> UserDetails:
        """Create the profile when missing, then assign only the given fields."""
        details = self.get_by_user(user_id)
        if details is None:
            details = self.add(UserDetails(user_id=user_id))
        return self.assign_updates(details, fields)
