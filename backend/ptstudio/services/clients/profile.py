from __future__ import annotations

import logging
from typing import Any

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.user import UserDetails
from ptstudio.services._shared.base import BaseService, ServiceContext
from ptstudio.services._shared.errors import InvalidArgumentError, NotFoundError
from ptstudio.services._shared.guards import ensure_owned
from ptstudio.services._shared.ports import MediaStore
from ptstudio.services.media import PhotoOut, PhotoService

from .dto import ProfileOut, ProfilePhotoIn, ProfileUpsertIn

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("birthday", "height", "weight", "sex")


def profile_to_out(row: UserDetails) -> ProfileOut:
    photo = None
    if row.photography_url:
        photo = PhotoOut(url=row.photography_url, key=row.photography_key or "")
    return ProfileOut(
        id=encode_id(EntityKind.USER_DETAILS, row.id),
        user_id=encode_id(EntityKind.USER, row.user_id),
        birthday=row.birthday,
        height=row.height,
        weight=row.weight,
        sex=row.sex,
        photo=photo,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ProfileService(BaseService):
    """
    Biometric profile (``user_details``) of the caller or of one of their clients.

    Without ``user_id`` every operation targets the caller. A trainer passing
    a client id must own that client.
    """

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        session: Any = None,
        media_store: MediaStore | None = None,
    ) -> None:
        super().__init__(ctx=ctx, session=session)
        self.photos = PhotoService(ctx=self.ctx, media_store=media_store, session=session)

    def _target(self, uow, raw_user_id: str | None) -> int:
        caller = self.actor_id
        user_id = self.optional_id(EntityKind.USER, raw_user_id)
        if user_id is None or user_id == caller:
            return caller
        ensure_owned(uow.session, EntityKind.USER, user_id, caller)
        return user_id

    def get(self, user_id: str | None = None) -> ProfileOut:
        with self.ro_uow() as uow:
            target = self._target(uow, user_id)
            details = uow.user_details.get_by_user(target)
            if details is None:
                raise NotFoundError("UserDetails", target, "Profile does not exist")
            return profile_to_out(details)

    def upsert(self, dto: ProfileUpsertIn) -> ProfileOut:
        """Create the profile on first write; fields left empty keep their value."""
        fields = {
            name: getattr(dto, name)
            for name in _PROFILE_FIELDS
            if getattr(dto, name) not in (None, "")
        }
        with self.rw_uow() as uow:
            target = self._target(uow, dto.user_id)
            details = uow.user_details.upsert(target, fields)
            logger.info(
                "Profile updated", extra={"user_id": target, "fields": sorted(fields)}
            )
            return profile_to_out(details)

    def upload_photo(self, dto: ProfilePhotoIn) -> ProfileOut:
        """
        Upload a new profile photo and destroy the one it replaces.

        :raises InvalidArgumentError: When no file is given.
        """
        if dto.file is None:
            raise InvalidArgumentError("Photo is required")

        with self.ro_uow() as uow:
            target = self._target(uow, dto.user_id)

        result = self.photos.media_store.upload(self.photos.folder("users", target), dto.file)
        try:
            with self.rw_uow() as uow:
                current = uow.user_details.get_by_user(target)
                previous = current.photography_key if current is not None else None
                details = uow.user_details.upsert(
                    target, {"photography_url": result.url, "photography_key": result.key}
                )
                out = profile_to_out(details)
        except Exception:
            self.photos.destroy_quietly(result.key)
            raise

        if previous and previous != result.key:
            self.photos.destroy_quietly(previous)
        logger.info("Profile photo uploaded", extra={"user_id": target, "key": result.key})
        return out
