"""Writers for the exercise → set → variable tree of a program.

Callers run :meth:`ExerciseTreeWriter.replace` inside their unit of work; a
failure at any statement propagates and the UoW rolls the whole aggregate
back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from .dto import LinkSpec
from .kinds import ProgramKind

logger = logging.getLogger(__name__)


def normalize_target(value: object) -> str | None:
    """Targets are free text; blanks mean "no target" rather than zero."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ExerciseTreeWriter(ABC):
    """Persist the full child tree of one program parent."""

    @abstractmethod
    def replace(
        self, session: Session, kind: ProgramKind, parent_id: int, links: Sequence[LinkSpec]
    ) -> list[int]:
        """
        Make ``links`` the complete child tree of ``parent_id``.

        :returns: Ids of the exercise-link rows, in ``links`` order.
        """


class SqlReplaceAllWriter(ExerciseTreeWriter):
    """
    Delete every existing link of the parent, then bulk insert the new tree.

    No diffing: link and set-variable ids change on every write.
    """

    def replace(
        self, session: Session, kind: ProgramKind, parent_id: int, links: Sequence[LinkSpec]
    ) -> list[int]:
        link_model, set_model = kind.link_model, kind.set_model

        existing = select(link_model.id).where(kind.link_parent_col == parent_id)
        session.execute(
            delete(set_model)
            .where(kind.set_link_col.in_(existing))
            .execution_options(synchronize_session=False)
        )
        session.execute(
            delete(link_model)
            .where(kind.link_parent_col == parent_id)
            .execution_options(synchronize_session=False)
        )
        if not links:
            return []

        link_ids = list(
            session.scalars(
                insert(link_model).returning(link_model.id, sort_by_parameter_order=True),
                [
                    {
                        kind.link_parent_fk: parent_id,
                        "exercise_id": link.exercise_id,
                        "order_position": link.order_position,
                    }
                    for link in links
                ],
            )
        )

        set_rows = [
            {
                kind.set_link_fk: link_id,
                "set_number": row.set_number,
                "exercise_variable_id": row.variable_id,
                "target_value": normalize_target(row.target_value),
            }
            for link_id, link in zip(link_ids, links)
            for row in link.rows
        ]
        if set_rows:
            session.execute(insert(set_model), set_rows)

        logger.debug(
            "Exercise tree replaced",
            extra={"program": kind.name, "parent_id": parent_id, "links": len(link_ids)},
        )
        return link_ids
