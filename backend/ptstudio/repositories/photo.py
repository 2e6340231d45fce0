"""Photo reference repository keyed by ``(model, model_id)``."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from ptstudio.models.photo import Photo
from ptstudio.repositories.base import BaseRepository


class PhotoRepository(BaseRepository[Photo]):
    """Persist :class:`Photo` rows; at most one per owner key."""

    model = Photo

    def _updatable_fields(self) -> set[str]:
        return {"photography_url", "photography_key"}

    def get_for(self, model: str, model_id: int) -> Photo | None:
        stmt = select(self.model).where(self.model.model == model, self.model.model_id == model_id)
        return cast(Photo | None, self.session.execute(stmt).scalars().first())

    def upsert(self, model: str, model_id: int, *, url: str, key: str) -> str | None:
        """Insert or replace the photo for the key.

        :returns: The previous asset key when a different one was replaced.
        """
        photo = self.get_for(model, model_id)
        if photo is None:
            self.add(
                Photo(model=model, model_id=model_id, photography_url=url, photography_key=key)
            )
            return None
        previous = photo.photography_key
        self.assign_updates(photo, {"photography_url": url, "photography_key": key})
        return previous if previous != key else None

    def remove_for(self, model: str, model_id: int) -> str | None:
        """Delete the photo row for the key, returning its asset key."""
        photo = self.get_for(model, model_id)
        if photo is None:
            return None
        key = photo.photography_key
        self.delete(photo)
        return key
