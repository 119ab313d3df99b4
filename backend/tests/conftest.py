"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Tests marked
``threaded`` opt out and build their own file-backed database instead.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from waitlist.core.config import TestingConfig
from waitlist.core.extensions import db as _db  # Flask-SQLAlchemy instance
from waitlist.factory import create_app  # application factory under test
from waitlist.infra import get_collaborators
from waitlist.services._shared.ports import InMemoryNotifier, InMemoryPhotoStore, StubRenderer
from waitlist.services._shared.settings import WaitlistSettings

from tests.helpers.utils import EARLY, FrozenClock


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Pins event dates so tests never depend on today's date.
    - Avoids hitting external services.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    LATE_REGISTRATION_START = "2025-07-01T00:00:00+00:00"
    CERTIFICATE_RELEASE_DATE = "2025-08-09T00:00:00+00:00"
    MAIL_ENABLED = False
    SEED_CODES_ON_STARTUP = False


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    TestConfig.UPLOAD_FOLDER = str(tmp_path_factory.mktemp("uploads"))
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. Units of work committing
    through ``db.session`` only release their own SAVEPOINT.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
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


# -- Service collaborators ------------------------------------------------------
@pytest.fixture()
def clock():
    """Mutable wall clock pinned before every event deadline."""
    return FrozenClock(EARLY)


@pytest.fixture()
def settings(app):
    """Event settings as loaded from :class:`TestConfig`."""
    return WaitlistSettings.from_mapping(app.config)


@pytest.fixture()
def renderer():
    return StubRenderer()


@pytest.fixture()
def notifier():
    return InMemoryNotifier()


@pytest.fixture()
def photo_store():
    return InMemoryPhotoStore()


@pytest.fixture()
def collaborators(app, clock, renderer, notifier, photo_store):
    """Swap the app's adapters for in-memory doubles during one test."""
    deps = get_collaborators(app)
    original = (deps.renderer, deps.notifier, deps.photo_store, deps.clock)
    deps.renderer = renderer
    deps.notifier = notifier
    deps.photo_store = photo_store
    deps.clock = clock
    try:
        yield deps
    finally:
        deps.renderer, deps.notifier, deps.photo_store, deps.clock = original


@pytest.fixture()
def client(app, collaborators):
    """Flask test client wired to in-memory collaborators."""
    return app.test_client()


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    if request.node.get_closest_marker("threaded"):
        yield
        return

    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
