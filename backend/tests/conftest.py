"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction on a shared in-memory SQLite
connection. The session joins it with SAVEPOINTs, so service commits and
rollbacks behave as in production while nothing leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from ptstudio import create_app
from ptstudio.core.config import TestingConfig
from ptstudio.core.extensions import db as _db
from ptstudio.services._shared.base import ServiceContext


class TestConfig(TestingConfig):
    """Testing configuration with fixed side-effect settings."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"
    APP_URL = "https://app.test/"
    EMAIL_FROM = "noreply@app.test"
    REGISTRATION_TOKEN_TTL_DAYS = 7
    MEDIA_FOLDER_PREFIX = "ptstudio-test"
    DEFAULT_PAGE_SIZE = 10


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session (app context stays pushed)."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """
    Provide a scoped session joined to a per-test outer transaction.

    Notes
    -----
    ``join_transaction_mode="create_savepoint"`` makes ``commit()`` release a
    SAVEPOINT and ``rollback()`` roll back to it, while the outer transaction
    is always rolled back at teardown.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection, join_transaction_mode="create_savepoint", autoflush=False
    )
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Callers --------------------------------------------------------------------
@pytest.fixture()
def trainer():
    from tests.factories.user import TrainerFactory

    return TrainerFactory()


@pytest.fixture()
def ctx(trainer) -> ServiceContext:
    """Service context acting as the ``trainer`` fixture."""
    return ServiceContext(actor_id=trainer.id, request_id="test-request")
