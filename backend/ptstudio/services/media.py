"""Photo references for templates and trainings.

Uploads and asset deletion talk to the external :class:`MediaStore`; callers
invoke them after their own transaction has committed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO

from ptstudio.models.photo import Photo, PhotoModel
from ptstudio.services._shared.base import BaseService, ServiceContext
from ptstudio.services._shared.ports import InMemoryMediaStore, MediaStore
from ptstudio.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PhotoOut:
    url: str
    key: str


def photo_to_out(row: Photo | None) -> PhotoOut | None:
    if row is None:
        return None
    return PhotoOut(url=row.photography_url, key=row.photography_key)


class PhotoService(BaseService):
    """Keep one photo per ``(model, model_id)`` in sync with the media store."""

    DEFAULT_FOLDER_PREFIX = "ptstudio"

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        media_store: MediaStore | None = None,
        session: Any = None,
    ) -> None:
        super().__init__(ctx=ctx, session=session)
        self.media_store = media_store or InMemoryMediaStore()

    def folder(self, segment: str, owner_id: int) -> str:
        """Media store folder ``<prefix>/<segment>/<owner_id>``."""
        prefix = self.setting("MEDIA_FOLDER_PREFIX", self.DEFAULT_FOLDER_PREFIX)
        return f"{prefix}/{segment}/{owner_id}"

    def folder_for(self, model: PhotoModel, model_id: int) -> str:
        return self.folder(model.value, model_id)

    def attach_upload(self, model: PhotoModel, model_id: int, file: BinaryIO) -> PhotoOut:
        """
        Upload ``file`` and make it the photo of ``(model, model_id)``.

        The replaced asset, if any, is destroyed once the row is committed.
        When the row cannot be written the fresh asset is destroyed instead
        and the error propagates.
        """
        result = self.media_store.upload(self.folder_for(model, model_id), file)
        try:
            with self.rw_uow() as uow:
                previous = uow.photos.upsert(
                    model.value, model_id, url=result.url, key=result.key
                )
        except Exception:
            self.destroy_quietly(result.key)
            raise

        if previous:
            self.destroy_quietly(previous)
        logger.info(
            "Photo attached",
            extra={"photo_model": model.value, "model_id": model_id, "key": result.key},
        )
        return PhotoOut(url=result.url, key=result.key)

    def attach_reference(
        self, uow: UnitOfWork, model: PhotoModel, model_id: int, *, url: str, key: str
    ) -> PhotoOut:
        """Record an already-uploaded asset inside the caller's unit of work."""
        uow.photos.upsert(model.value, model_id, url=url, key=key)
        return PhotoOut(url=url, key=key)

    def remove(self, model: PhotoModel, model_id: int) -> str | None:
        """Delete the photo row and its asset; returns the destroyed key."""
        with self.rw_uow() as uow:
            key = uow.photos.remove_for(model.value, model_id)
        if key:
            self.destroy_quietly(key)
            logger.info(
                "Photo removed", extra={"photo_model": model.value, "model_id": model_id}
            )
        return key

    def get(self, model: PhotoModel, model_id: int) -> PhotoOut | None:
        with self.ro_uow() as uow:
            return photo_to_out(uow.photos.get_for(model.value, model_id))

    def destroy_quietly(self, key: str) -> None:
        """Destroy an asset; store failures are logged at WARNING."""
        try:
            self.media_store.destroy(key)
        except Exception:
            logger.warning("Media asset could not be destroyed", extra={"key": key}, exc_info=True)
