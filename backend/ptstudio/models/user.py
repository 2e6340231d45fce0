"""Trainer and client accounts plus the client profile (``user_details``)."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from ptstudio.core.extensions import db

from .base import ArchivableMixin, PKMixin, ReprMixin, TimestampMixin


class UserStatus(str, Enum):
    """Lifecycle of a client account managed by a trainer."""

    PENDING = "pending"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"
    ARCHIVED = "archived"


class UserRole:
    """Numeric role identifiers stored in ``users.role_id``."""

    TRAINER = 1
    CLIENT = 2


class User(PKMixin, TimestampMixin, ArchivableMixin, ReprMixin, db.Model):
    """
    Account row for both trainers and their clients.

    Notes
    -----
    - Clients carry ``created_by`` pointing at the trainer who invited them;
      trainers have ``created_by`` unset.
    - Email uniqueness is enforced per owner by the service layer, so the
      same address may be invited by two different trainers.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    role_id: Mapped[int] = mapped_column(Integer, nullable=False, default=UserRole.CLIENT)
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserStatus.PENDING.value
    )
    registration_token: Mapped[str | None] = mapped_column(String(64), unique=True)
    registration_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )
    deactivated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    details: Mapped[UserDetails | None] = relationship(
        "UserDetails",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("email")
    def _normalize_email(self, _key: str, value: str) -> str:
        return value.strip().lower()

    @validates("name")
    def _strip_name(self, _key: str, value: str) -> str:
        return value.strip()


class UserDetails(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Client profile: biometrics and profile photo, one row per user."""

    __tablename__ = "user_details"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    birthday: Mapped[date | None] = mapped_column(Date)
    height: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    weight: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    sex: Mapped[str | None] = mapped_column(String(20))
    photography_url: Mapped[str | None] = mapped_column(String(500))
    photography_key: Mapped[str | None] = mapped_column(String(255))

    user: Mapped[User] = relationship("User", back_populates="details")
