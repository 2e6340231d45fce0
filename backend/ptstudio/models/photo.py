"""Photo references shared by templates, trainings and client profiles."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ptstudio.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class PhotoModel(str, Enum):
    """Owner kinds a photo row can be attached to (``photos.model``)."""

    TEMPLATE = "templates"
    TRAINING = "trainings"
    USER_DETAILS = "user_details"


class Photo(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """At most one photo per ``(model, model_id)`` key; writes are upserts."""

    __tablename__ = "photos"

    model: Mapped[str] = mapped_column(String(40), nullable=False)
    model_id: Mapped[int] = mapped_column(Integer, nullable=False)
    photography_url: Mapped[str] = mapped_column(String(500), nullable=False)
    photography_key: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (UniqueConstraint("model", "model_id", name="uq_photos_model_model_id"),)
