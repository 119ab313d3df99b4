"""factory_boy base wired to the per-test SAVEPOINT session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holds the session the ``session`` fixture hands out for the current test."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered session.

        Raises
        ------
        RuntimeError
            When a factory persists outside a test using the ``session``
            fixture (threaded tests build their rows through services).
        """
        if cls._session is None:
            raise RuntimeError("No factory session registered; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flushes (never commits) through the registered test session."""

    class Meta:
        abstract = True
        # Resolved lazily on every create, after the fixture has swapped sessions.
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
