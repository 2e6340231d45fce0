from __future__ import annotations

import logging

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.program import Training
from ptstudio.services._shared.errors import ConflictError
from ptstudio.services._shared.guards import ensure_owned

from . import kinds
from ._converters import to_link_specs, to_target_patch
from .base import ProgramService
from .dto import TrainingCreateIn, TrainingEditIn, TrainingOut

logger = logging.getLogger(__name__)

_DUPLICATE_TRAINING = "A training with this name already exists for this client"


class TrainingService(ProgramService):
    """
    Trainings assigned by the caller to their clients.

    Unlike templates, an existing training is only patched: ``edit`` changes
    target values of existing set rows and never touches exercises or order.
    """

    kind = kinds.TRAINING

    def _to_out(self, uow, row: Training) -> TrainingOut:
        return TrainingOut(
            id=encode_id(EntityKind.TRAINING, row.id),
            name=row.name,
            description=row.description,
            training_target=encode_id(EntityKind.USER, row.training_target_id),
            created_at=row.created_at,
            updated_at=row.updated_at,
            exercises=self._tree(uow.session, row.id),
            photo=self._photo(uow, row.id),
        )

    def list_for_target(self, target_id: str) -> list[TrainingOut]:
        """Active trainings the caller assigned to one of their clients."""
        owner_id = self.actor_id
        numeric_target = self.require_id(EntityKind.USER, target_id, field="trainingTarget")
        with self.ro_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, numeric_target, owner_id)
            rows = uow.trainings.list_for_target(owner_id, numeric_target)
            return [self._to_out(uow, row) for row in rows]

    def get(self, training_id: str) -> TrainingOut:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.TRAINING, training_id, field="id")
        with self.ro_uow() as uow:
            ensure_owned(uow.session, EntityKind.TRAINING, numeric_id, owner_id)
            return self._to_out(uow, uow.trainings.get_active(numeric_id))

    def create(self, dto: TrainingCreateIn) -> TrainingOut:
        """
        Insert the training, its exercise tree and an optional photo reference.

        A ``photo`` (already uploaded url + key) is recorded in the same
        transaction when no ``file`` is given; a ``file`` is uploaded after
        commit.
        """
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        target_id = self.require_id(EntityKind.USER, dto.training_target, field="trainingTarget")
        links = to_link_specs(dto.exercises)

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, target_id, owner_id)
            if uow.trainings.name_taken(owner_id, name, training_target_id=target_id):
                raise ConflictError("Training", _DUPLICATE_TRAINING)
            training = uow.trainings.add(
                Training(
                    name=name,
                    description=dto.description,
                    training_target_id=target_id,
                    created_by=owner_id,
                )
            )
            self._write_tree(uow.session, training.id, links)
            if dto.photo is not None and dto.file is None:
                self.photos.attach_reference(
                    uow, self.kind.photo_model, training.id, url=dto.photo.url, key=dto.photo.key
                )
            training_id = training.id
            logger.info(
                "Training created",
                extra={"training_id": training_id, "target_id": target_id, "exercises": len(links)},
            )

        self._upload_after_commit(training_id, dto.file)
        with self.ro_uow() as uow:
            return self._to_out(uow, uow.trainings.get(training_id))

    def edit(self, dto: TrainingEditIn) -> TrainingOut:
        """Patch ``target_value`` of the listed set rows by their row id."""
        owner_id = self.actor_id
        training_id = self.require_id(EntityKind.TRAINING, dto.training_id, field="trainingId")
        patch = to_target_patch(dto.exercises)

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.TRAINING, training_id, owner_id)
            updated = uow.trainings.patch_target_values(training_id, patch)
            logger.info(
                "Training targets updated",
                extra={"training_id": training_id, "rows": updated, "requested": len(patch)},
            )

        with self.ro_uow() as uow:
            return self._to_out(uow, uow.trainings.get(training_id))

    def delete(self, training_id: str) -> str:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.TRAINING, training_id, field="id")
        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.TRAINING, numeric_id, owner_id)
            uow.trainings.archive(uow.trainings.get_active(numeric_id))
            logger.info("Training archived", extra={"training_id": numeric_id})

        self._remove_photo_after_commit(numeric_id)
        return encode_id(EntityKind.TRAINING, numeric_id)
