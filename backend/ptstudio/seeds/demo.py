"""Idempotent demo data: one trainer with a small catalog and a template."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from ptstudio.models import (
    Category,
    Exercise,
    ExerciseVariable,
    Template,
    User,
    UserRole,
    UserStatus,
)
from ptstudio.services.programs import TEMPLATE, SqlReplaceAllWriter
from ptstudio.services.programs.dto import LinkSpec, SetRowSpec

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

TRAINER = {"email": "demo.trainer@ptstudio.local", "name": "Demo Trainer"}
CLIENTS = [
    {"email": "ana.silva@example.com", "name": "Ana Silva"},
    {"email": "joao.costa@example.com", "name": "Joao Costa"},
]

# root name -> subcategory names
CATEGORY_TREE: dict[str, list[str]] = {
    "Strength": ["Upper body", "Lower body"],
    "Conditioning": [],
}

VARIABLES = [
    {"name": "Reps", "unit": "reps", "description": "Repetitions per set"},
    {"name": "Weight", "unit": "kg", "description": None},
    {"name": "Rest", "unit": "s", "description": "Rest after the set"},
]

EXERCISES = [
    {"name": "Bench press", "category": "Upper body", "url": "https://example.com/bench-press"},
    {"name": "Back squat", "category": "Lower body", "url": "https://example.com/back-squat"},
    {"name": "Deadlift", "category": "Lower body", "url": "https://example.com/deadlift"},
    {"name": "Rowing", "category": "Conditioning", "url": "https://example.com/rowing"},
]

# (exercise, [(set_number, variable, target)])
TEMPLATE_NAME = "Full body A"
TEMPLATE_TREE = [
    ("Back squat", [(1, "Reps", "8"), (1, "Weight", "60"), (2, "Reps", "8"), (2, "Weight", "60")]),
    ("Bench press", [(1, "Reps", "10"), (1, "Weight", None), (2, "Reps", "10")]),
    ("Rowing", []),
]


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    entry["created" if created else "existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch an active ``model`` row by ``filters`` or create it using ``defaults``."""
    stmt = select(model).filter_by(**filters)
    if hasattr(model, "archived_at"):
        stmt = stmt.filter_by(archived_at=None)
    instance = session.execute(stmt).scalars().first()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    session.flush()
    return instance, True


def seed_demo(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Create (or find) the demo trainer, clients, catalog and template."""
    if verbose:
        LOGGER.info("Seeding demo trainer...")
    session = cast(Session, database.session)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        trainer, created = _get_or_create(
            session,
            User,
            email=TRAINER["email"],
            defaults={
                "name": TRAINER["name"],
                "role_id": UserRole.TRAINER,
                "status": UserStatus.ACTIVE.value,
            },
        )
        _touch(summary, "users", created)

        for client in CLIENTS:
            _, created = _get_or_create(
                session,
                User,
                email=client["email"],
                created_by=trainer.id,
                defaults={
                    "name": client["name"],
                    "role_id": UserRole.CLIENT,
                    "status": UserStatus.PENDING.value,
                },
            )
            _touch(summary, "users", created)

        categories: dict[str, Category] = {}
        for root_name, children in CATEGORY_TREE.items():
            root, created = _get_or_create(
                session, Category, name=root_name, created_by=trainer.id, parent_category_id=None
            )
            categories[root_name] = root
            _touch(summary, "categories", created)
            for child_name in children:
                child, created = _get_or_create(
                    session,
                    Category,
                    name=child_name,
                    created_by=trainer.id,
                    parent_category_id=root.id,
                )
                categories[child_name] = child
                _touch(summary, "categories", created)

        variables: dict[str, ExerciseVariable] = {}
        for fixture in VARIABLES:
            variable, created = _get_or_create(
                session,
                ExerciseVariable,
                name=fixture["name"],
                created_by=trainer.id,
                defaults={"unit": fixture["unit"], "description": fixture["description"]},
            )
            variables[variable.name] = variable
            _touch(summary, "exercise_variables", created)

        exercises: dict[str, Exercise] = {}
        for fixture in EXERCISES:
            exercise, created = _get_or_create(
                session,
                Exercise,
                name=fixture["name"],
                created_by=trainer.id,
                defaults={"url": fixture["url"], "category_id": categories[fixture["category"]].id},
            )
            exercises[exercise.name] = exercise
            _touch(summary, "exercises", created)

        template, created = _get_or_create(
            session,
            Template,
            name=TEMPLATE_NAME,
            created_by=trainer.id,
            defaults={"description": "Demo template"},
        )
        _touch(summary, "templates", created)
        if created:
            links = [
                LinkSpec(
                    exercise_id=exercises[exercise_name].id,
                    order_position=position,
                    rows=[
                        SetRowSpec(
                            set_number=set_number,
                            variable_id=variables[variable_name].id,
                            target_value=target,
                        )
                        for set_number, variable_name, target in rows
                    ],
                )
                for position, (exercise_name, rows) in enumerate(TEMPLATE_TREE, start=1)
            ]
            SqlReplaceAllWriter().replace(session, TEMPLATE, template.id, links)

    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    return seed_demo(database, verbose=verbose)


__all__ = ["seed_demo", "run_all"]
