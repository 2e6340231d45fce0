from __future__ import annotations

import io
import logging
from datetime import date

import pytest

from ptstudio.core.ids import EntityKind
from ptstudio.services._shared.errors import InvalidArgumentError, NotFoundError, NotOwnerError
from ptstudio.services._shared.ports import InMemoryMediaStore
from ptstudio.services.clients import ProfilePhotoIn, ProfileService, ProfileUpsertIn
from tests.factories.user import ClientFactory, TrainerFactory, UserDetailsFactory
from tests.helpers.utils import oid


class _StickyStore(InMemoryMediaStore):
    def destroy(self, key):
        raise ConnectionError("media store down")


class TestProfileService:
    @pytest.fixture()
    def media(self) -> InMemoryMediaStore:
        return InMemoryMediaStore()

    @pytest.fixture()
    def service(self, ctx, media) -> ProfileService:
        return ProfileService(ctx=ctx, media_store=media)

    def test_get_missing_profile(self, service):
        with pytest.raises(NotFoundError, match="Profile does not exist"):
            service.get()

    def test_upsert_creates_profile_for_caller(self, service, trainer):
        out = service.upsert(ProfileUpsertIn(birthday=date(1990, 5, 1), height=180.0))

        assert out.user_id == oid(EntityKind.USER, trainer)
        assert out.birthday == date(1990, 5, 1)
        assert out.height == 180.0
        assert out.weight is None
        assert service.get().id == out.id

    def test_upsert_keeps_fields_left_empty(self, service, trainer):
        client = ClientFactory(created_by=trainer.id)
        UserDetailsFactory(user_id=client.id, height=170.0, weight=60.0, sex="female")

        out = service.upsert(
            ProfileUpsertIn(user_id=oid(EntityKind.USER, client), weight=62.5, sex="")
        )

        assert (out.height, out.weight, out.sex) == (170.0, 62.5, "female")

    def test_foreign_client_profile_is_rejected(self, service):
        stranger = ClientFactory(created_by=TrainerFactory().id)
        with pytest.raises(NotOwnerError):
            service.upsert(ProfileUpsertIn(user_id=oid(EntityKind.USER, stranger), height=1.0))

    def test_upload_photo_requires_file(self, service):
        with pytest.raises(InvalidArgumentError, match="Photo is required"):
            service.upload_photo(ProfilePhotoIn(file=None))

    def test_upload_photo_replaces_previous_asset(self, service, media, trainer):
        first = service.upload_photo(ProfilePhotoIn(file=io.BytesIO(b"one")))
        second = service.upload_photo(ProfilePhotoIn(file=io.BytesIO(b"two")))

        assert first.photo.key.startswith(f"ptstudio-test/users/{trainer.id}/")
        assert second.photo.key != first.photo.key
        assert media.destroyed == [first.photo.key]
        assert list(media.assets.values()) == [b"two"]

    def test_stale_asset_cleanup_failure_is_only_logged(self, ctx, caplog):
        service = ProfileService(ctx=ctx, media_store=_StickyStore())
        service.upload_photo(ProfilePhotoIn(file=io.BytesIO(b"one")))

        with caplog.at_level(logging.WARNING):
            second = service.upload_photo(ProfilePhotoIn(file=io.BytesIO(b"two")))

        assert service.get().photo.key == second.photo.key
        assert any(r.message == "Media asset could not be destroyed" for r in caplog.records)
