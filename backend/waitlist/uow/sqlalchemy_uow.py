"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from waitlist.core.extensions import db
from waitlist.repositories import RegistrantRepository, RegistrationCodeRepository
from waitlist.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.registrants = RegistrantRepository(session=self.session)
        self.registration_codes = RegistrationCodeRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW over the Flask-scoped session.

    Everything staged inside the ``with`` block (registrant row, counter bump,
    code deletions) is committed together or not at all.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session autobegins on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only UoW used by query paths (count, lookups, artifact rendering).

    On entry it tries to own a fresh transaction; when one is already open
    (tests wrapping everything in a SAVEPOINT) it attaches to it instead.
    Write guards are installed in both cases:

    * a ``before_flush`` hook rejects pending ORM changes;
    * a ``before_cursor_execute`` hook rejects DML/DDL statements.

    ``SET TRANSACTION READ ONLY`` is issued only on PostgreSQL and MySQL and
    only when the transaction is owned. The scope always rolls back on exit.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
    )
    _READ_ONLY_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(self, *, enforce_db_readonly: bool = True) -> None:
        super().__init__(session=db.session)
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._guards: tuple | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            # Already inside a transaction: attach, guards only.
            pass

        self._conn = self.session.connection()
        self._install_guards()

        if (
            self._txn_ctx is not None
            and self.enforce_db_readonly
            and self._conn.dialect.name in self._READ_ONLY_DIALECTS
        ):
            try:
                self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("SET TRANSACTION READ ONLY failed (%s); guards only.", exc)

        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                with suppress(Exception):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        """
        :raises RuntimeError: always; read-only scopes never commit.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards -----------------------------

    def _thread_session(self) -> Session:
        """Return the concrete session behind the Flask scoped proxy."""
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    def _install_guards(self) -> None:
        if self._guards is not None:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        target = self._conn if self._conn is not None else self.session.get_bind()
        # Listening on the scoped proxy would hit every thread's session.
        owner = self._thread_session()
        event.listen(owner, "before_flush", _before_flush)
        event.listen(target, "before_cursor_execute", _before_cursor_execute)
        self._guards = (owner, target, _before_flush, _before_cursor_execute)

    def _remove_guards(self) -> None:
        if self._guards is None:
            return
        owner, target, before_flush, before_cursor_execute = self._guards
        with suppress(Exception):
            event.remove(owner, "before_flush", before_flush)
        with suppress(Exception):
            event.remove(target, "before_cursor_execute", before_cursor_execute)
        self._guards = None
