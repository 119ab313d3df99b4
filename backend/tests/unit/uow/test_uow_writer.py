"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from waitlist.models import CodePool, Registrant
from waitlist.uow import SQLAlchemyUnitOfWork
from tests.factories.registrant import RegistrantFactory
from tests.factories.registration_code import RegistrationCodeFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN we add a registrant via the repo and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = db.session.query(Registrant).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.registrants.add(RegistrantFactory.build())

        after = db.session.query(Registrant).count()
        assert after == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = db.session.query(Registrant).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.registrants.add(RegistrantFactory.build())
            raise RuntimeError("boom")

        after = db.session.query(Registrant).count()
        assert after == initial

    def test_counter_and_consumption_roll_back_together(self, app, db, session):
        """
        GIVEN a seeded code
        WHEN a unit of work allocates a number, consumes the code, then fails
        THEN neither the allocation nor the consumption survives.
        """
        RegistrationCodeFactory(code="A1")
        session.commit()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            assert uow.registrants.next_event_number() == 1
            assert uow.registration_codes.consume(CodePool.STANDARD, "A1")
            raise RuntimeError("boom")

        with SQLAlchemyUnitOfWork() as uow:
            assert uow.registration_codes.is_valid(CodePool.STANDARD, "A1")
            assert uow.registrants.next_event_number() == 1

    def test_repositories_share_the_session(self, app, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.registrants.session is uow.session
            assert uow.registration_codes.session is uow.session
