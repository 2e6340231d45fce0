from __future__ import annotations

import logging
from typing import Any, BinaryIO

from sqlalchemy.orm import Session

from ptstudio.core.ids import EntityKind
from ptstudio.services._shared.base import BaseService, ServiceContext
from ptstudio.services._shared.guards import ensure_all_owned
from ptstudio.services._shared.ports import MediaStore
from ptstudio.services.media import PhotoOut, PhotoService, photo_to_out

from .dto import LinkSpec, ProgramExerciseOut
from .kinds import ProgramKind
from .reader import ExerciseTreeReader
from .writer import ExerciseTreeWriter, SqlReplaceAllWriter

logger = logging.getLogger(__name__)


class ProgramService(BaseService):
    """
    Shared plumbing for template and training services.

    :param writer: Strategy persisting the exercise tree.
    :param reader: Loader for the exercise tree.
    :param media_store: External store used for photo uploads.
    """

    kind: ProgramKind

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        session: Any = None,
        writer: ExerciseTreeWriter | None = None,
        reader: ExerciseTreeReader | None = None,
        media_store: MediaStore | None = None,
    ) -> None:
        super().__init__(ctx=ctx, session=session)
        self.writer = writer or SqlReplaceAllWriter()
        self.reader = reader or ExerciseTreeReader()
        self.photos = PhotoService(ctx=self.ctx, media_store=media_store, session=session)

    def _write_tree(self, session: Session, parent_id: int, links: list[LinkSpec]) -> None:
        """Check every referenced exercise and variable, then replace the tree."""
        owner_id = self.actor_id
        ensure_all_owned(
            session, EntityKind.EXERCISE, (link.exercise_id for link in links), owner_id
        )
        ensure_all_owned(
            session,
            EntityKind.EXERCISE_VARIABLES,
            (row.variable_id for link in links for row in link.rows),
            owner_id,
        )
        self.writer.replace(session, self.kind, parent_id, links)

    def _tree(self, session: Session, parent_id: int) -> list[ProgramExerciseOut]:
        return self.reader.read(session, self.kind, parent_id)

    def _photo(self, uow: Any, parent_id: int) -> PhotoOut | None:
        return photo_to_out(uow.photos.get_for(self.kind.photo_model.value, parent_id))

    def _upload_after_commit(self, parent_id: int, file: BinaryIO | None) -> PhotoOut | None:
        """Photo upload side effect; failures are logged, never raised."""
        if file is None:
            return None
        try:
            return self.photos.attach_upload(self.kind.photo_model, parent_id, file)
        except Exception:
            logger.warning(
                "Photo upload failed",
                extra={"program": self.kind.name, "parent_id": parent_id},
                exc_info=True,
            )
            return None

    def _remove_photo_after_commit(self, parent_id: int) -> None:
        try:
            self.photos.remove(self.kind.photo_model, parent_id)
        except Exception:
            logger.warning(
                "Photo removal failed",
                extra={"program": self.kind.name, "parent_id": parent_id},
                exc_info=True,
            )
