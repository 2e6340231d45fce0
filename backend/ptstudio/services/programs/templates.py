from __future__ import annotations

import logging

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.program import Template
from ptstudio.services._shared.dto import Connection, PageIn, build_connection
from ptstudio.services._shared.errors import ConflictError
from ptstudio.services._shared.guards import ensure_owned

from . import kinds
from ._converters import to_link_specs
from .base import ProgramService
from .dto import TemplateCreateIn, TemplateOut, TemplateUpdateIn

logger = logging.getLogger(__name__)

_DUPLICATE_TEMPLATE = "A template with this name already exists"


class TemplateService(ProgramService):
    """Reusable workout templates of the caller."""

    kind = kinds.TEMPLATE

    def _to_out(self, uow, row: Template) -> TemplateOut:
        return TemplateOut(
            id=encode_id(EntityKind.TEMPLATE, row.id),
            name=row.name,
            description=row.description,
            created_at=row.created_at,
            updated_at=row.updated_at,
            exercises=self._tree(uow.session, row.id),
            photo=self._photo(uow, row.id),
        )

    def paginate(self, dto: PageIn) -> Connection[TemplateOut]:
        owner_id = self.actor_id
        first, after_id = self.page_window(dto.first, dto.after)
        with self.ro_uow() as uow:
            page = uow.templates.paginate_owned(
                owner_id, first=first, after_id=after_id, search_term=dto.search_term
            )
            return build_connection(page, lambda row: self._to_out(uow, row))

    def get(self, template_id: str) -> TemplateOut:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.TEMPLATE, template_id, field="id")
        with self.ro_uow() as uow:
            ensure_owned(uow.session, EntityKind.TEMPLATE, numeric_id, owner_id)
            return self._to_out(uow, uow.templates.get_active(numeric_id))

    def create(self, dto: TemplateCreateIn) -> TemplateOut:
        """
        Insert the template and its exercise tree in one transaction.

        The optional photo is uploaded after commit.
        """
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        links = to_link_specs(dto.exercises)

        with self.rw_uow() as uow:
            if uow.templates.name_taken(owner_id, name):
                raise ConflictError("Template", _DUPLICATE_TEMPLATE)
            template = uow.templates.add(
                Template(name=name, description=dto.description, created_by=owner_id)
            )
            self._write_tree(uow.session, template.id, links)
            template_id = template.id
            logger.info(
                "Template created", extra={"template_id": template_id, "exercises": len(links)}
            )

        return self._finish(template_id, dto.file)

    def update(self, dto: TemplateUpdateIn) -> TemplateOut:
        """Replace name, description and the whole exercise tree."""
        owner_id = self.actor_id
        template_id = self.require_id(EntityKind.TEMPLATE, dto.id, field="id")
        name = self.require_text(dto.name, field="name")
        links = to_link_specs(dto.exercises)

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.TEMPLATE, template_id, owner_id)
            if uow.templates.name_taken(owner_id, name, exclude_id=template_id):
                raise ConflictError("Template", _DUPLICATE_TEMPLATE)
            template = uow.templates.get_active(template_id)
            uow.templates.update(template, name=name, description=dto.description)
            self._write_tree(uow.session, template_id, links)
            logger.info(
                "Template updated", extra={"template_id": template_id, "exercises": len(links)}
            )

        return self._finish(template_id, dto.file)

    def delete(self, template_id: str) -> str:
        """Archive the template, then drop its photo."""
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.TEMPLATE, template_id, field="id")
        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.TEMPLATE, numeric_id, owner_id)
            uow.templates.archive(uow.templates.get_active(numeric_id))
            logger.info("Template archived", extra={"template_id": numeric_id})

        self._remove_photo_after_commit(numeric_id)
        return encode_id(EntityKind.TEMPLATE, numeric_id)

    def _finish(self, template_id: int, file) -> TemplateOut:
        self._upload_after_commit(template_id, file)
        with self.ro_uow() as uow:
            return self._to_out(uow, uow.templates.get(template_id))
