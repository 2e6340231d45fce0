from __future__ import annotations

import io
import logging

import pytest

from ptstudio.models import PhotoModel
from ptstudio.services._shared.ports import InMemoryMediaStore
from ptstudio.services.media import PhotoService
from tests.factories.program import TemplateFactory


class _StickyStore(InMemoryMediaStore):
    """Uploads work; deleting assets always fails."""

    def destroy(self, key):
        raise ConnectionError("media store down")


class TestPhotoService:
    @pytest.fixture()
    def media(self) -> InMemoryMediaStore:
        return InMemoryMediaStore()

    @pytest.fixture()
    def service(self, ctx, media) -> PhotoService:
        return PhotoService(ctx=ctx, media_store=media)

    @pytest.fixture()
    def template(self, trainer):
        return TemplateFactory(created_by=trainer.id)

    def test_folder_uses_configured_prefix(self, service):
        assert service.folder_for(PhotoModel.TRAINING, 7) == "ptstudio-test/trainings/7"
        assert service.folder("users", 3) == "ptstudio-test/users/3"

    def test_attach_then_replace(self, service, media, template):
        first = service.attach_upload(PhotoModel.TEMPLATE, template.id, io.BytesIO(b"1"))
        second = service.attach_upload(PhotoModel.TEMPLATE, template.id, io.BytesIO(b"2"))

        assert service.get(PhotoModel.TEMPLATE, template.id) == second
        assert media.destroyed == [first.key]

    def test_remove_deletes_row_and_asset(self, service, media, template):
        photo = service.attach_upload(PhotoModel.TEMPLATE, template.id, io.BytesIO(b"1"))

        assert service.remove(PhotoModel.TEMPLATE, template.id) == photo.key

        assert service.get(PhotoModel.TEMPLATE, template.id) is None
        assert photo.key not in media.assets

    def test_remove_without_photo_is_a_no_op(self, service, media, template):
        assert service.remove(PhotoModel.TEMPLATE, template.id) is None
        assert media.destroyed == []

    def test_destroy_failure_is_logged(self, ctx, template, caplog):
        service = PhotoService(ctx=ctx, media_store=_StickyStore())
        service.attach_upload(PhotoModel.TEMPLATE, template.id, io.BytesIO(b"1"))

        with caplog.at_level(logging.WARNING):
            service.attach_upload(PhotoModel.TEMPLATE, template.id, io.BytesIO(b"2"))

        assert any(r.message == "Media asset could not be destroyed" for r in caplog.records)
