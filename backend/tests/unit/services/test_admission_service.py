"""Unit tests for AdmissionService wired to in-memory doubles."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from waitlist.models import EVENT_ID_COUNTER, CodePool, EventIdCounter, Registrant
from waitlist.repositories import RegistrantRepository, RegistrationCodeRepository
from waitlist.services import (
    AdmissionIn,
    AdmissionService,
    AdmissionState,
    DeliveryStatus,
    PhotoUpload,
)
from waitlist.services._shared.errors import (
    AdmissionRejected,
    AdmissionTimeoutError,
    AllocationExhaustedError,
    RejectionReason,
    UpstreamError,
)
from waitlist.services._shared.ports import InMemoryNotifier, StubRenderer
from tests.factories.registrant import RegistrantFactory
from tests.factories.registration_code import RegistrationCodeFactory
from tests.helpers.utils import StepMonotonic

AFTER_CUTOFF = datetime(2025, 7, 2, 12, 0, tzinfo=timezone.utc)


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def codes(session):
    """Standard codes A1..A3 and late codes L1..L2, committed."""
    for code in ("A1", "A2", "A3"):
        RegistrationCodeFactory(code=code)
    for code in ("L1", "L2"):
        RegistrationCodeFactory(code=code, pool=CodePool.LATE)
    session.commit()


@pytest.fixture()
def service(settings, clock, renderer, notifier, photo_store):
    return AdmissionService(
        renderer=renderer,
        notifier=notifier,
        photo_store=photo_store,
        settings=settings,
        clock=clock,
    )


def submission(email="jane@example.com", code="A1", late=None, **overrides) -> AdmissionIn:
    data = {
        "name": "Jane Doe",
        "email": email,
        "phone_number": "08030000000",
        "state": "Edo",
        "submitted_code": code,
        "late_code": late,
    }
    data.update(overrides)
    return AdmissionIn(**data)


def code_valid(pool: CodePool, code: str) -> bool:
    return RegistrationCodeRepository().is_valid(pool, code)


def registrant_count() -> int:
    return RegistrantRepository().count()


# --------------------------- Successful admission -------------------------- #
class TestAdmissionSucceeds:
    def test_first_admission_gets_first_identifier(self, service, codes, notifier, clock):
        """
        GIVEN seeded codes and an empty waitlist
        WHEN Jane Doe submits code A1
        THEN she is admitted as edo-ahapn-0001, the code is consumed and the
        identity card is emailed.
        """
        out = service.admit(submission())

        assert out.event_id == "edo-ahapn-0001"
        assert out.registrant.email == "jane@example.com"
        assert out.registrant.created_at == clock.now
        assert out.attempts == 1
        assert out.state is AdmissionState.COMPLETED
        assert out.delivery.status is DeliveryStatus.SENT
        assert out.delivery.delivered
        assert not code_valid(CodePool.STANDARD, "A1")

        [mail] = notifier.outbox
        assert mail.to == "jane@example.com"
        assert mail.subject == "Welcome to AHAPN Edo 2025 Waitlist"
        assert "Your Event ID: edo-ahapn-0001" in mail.body
        assert mail.attachments[0].filename == "event_id_jane@example.com.pdf"

    def test_identifiers_are_sequential(self, service, codes):
        first = service.admit(submission(email="a@example.com", code="A1"))
        second = service.admit(submission(email="b@example.com", code="A2"))
        third = service.admit(submission(email="c@example.com", code="A3"))

        assert [first.event_id, second.event_id, third.event_id] == [
            "edo-ahapn-0001",
            "edo-ahapn-0002",
            "edo-ahapn-0003",
        ]

    def test_registrant_row_is_persisted(self, service, codes, session):
        service.admit(submission(email="  Jane@Example.COM ", code=" A1 "))

        row = session.query(Registrant).filter_by(email="jane@example.com").one()
        assert row.event_id == "edo-ahapn-0001"
        assert row.submitted_code == "A1"
        assert row.late_code is None

    def test_completion_is_logged(self, service, codes, caplog):
        with caplog.at_level(logging.INFO, logger="waitlist.services.admission.service"):
            service.admit(submission())

        [record] = [r for r in caplog.records if r.getMessage() == "admission.completed"]
        assert record.event_id == "edo-ahapn-0001"
        assert record.delivery_status == "sent"


# ------------------------------- Rejections -------------------------------- #
class TestAdmissionRejected:
    def test_unknown_code(self, service, codes):
        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(code="NOPE"))

        assert err.value.reason is RejectionReason.INVALID_CODE
        assert err.value.message == "Invalid Registration Code"
        assert err.value.last_state == AdmissionState.RECEIVED.value
        assert err.value.terminal_state == AdmissionState.REJECTED.value
        assert registrant_count() == 0

    def test_blank_code(self, service, codes):
        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(code="  "))
        assert err.value.reason is RejectionReason.INVALID_CODE

    def test_code_is_single_use(self, service, codes):
        """
        GIVEN code A1 consumed by a first admission
        WHEN another person submits A1
        THEN the submission is rejected and nothing else is persisted.
        """
        service.admit(submission(email="first@example.com", code="A1"))

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(email="second@example.com", code="A1"))

        assert err.value.reason is RejectionReason.INVALID_CODE
        assert registrant_count() == 1

    def test_duplicate_email_with_valid_code(self, service, codes):
        """
        GIVEN jane@example.com already on the waitlist
        WHEN she submits again with the unused code A2
        THEN the rejection is DUPLICATE_EMAIL and A2 stays redeemable.
        """
        service.admit(submission(email="jane@example.com", code="A1"))

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(email="JANE@example.com ", code="A2"))

        assert err.value.reason is RejectionReason.DUPLICATE_EMAIL
        assert err.value.message == "Email already registered on the waitlist."
        assert err.value.last_state == AdmissionState.LATE_PERIOD_CHECKED.value
        assert code_valid(CodePool.STANDARD, "A2")
        assert registrant_count() == 1

    @pytest.mark.parametrize("code", ["A1", "NOPE", ""])
    def test_codes_are_checked_before_email(self, service, codes, code):
        """
        GIVEN jane@example.com already admitted with A1
        WHEN she resubmits with the spent, an unknown or an empty code
        THEN the rejection is INVALID_CODE.
        """
        service.admit(submission(email="jane@example.com", code="A1"))

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(email="jane@example.com", code=code))

        assert err.value.reason is RejectionReason.INVALID_CODE
        assert code_valid(CodePool.STANDARD, "A2")

    def test_duplicate_email_inside_write_transaction(self, service, codes, monkeypatch):
        """
        GIVEN a concurrent admission that inserted the same email after the
        pre-check
        WHEN the insert hits the unique constraint
        THEN the admission is rejected as DUPLICATE_EMAIL without retrying.
        """
        RegistrantFactory(email="jane@example.com")
        monkeypatch.setattr(RegistrantRepository, "exists_by_email", lambda self, email: False)

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(email="jane@example.com", code="A1"))

        assert err.value.reason is RejectionReason.DUPLICATE_EMAIL
        assert code_valid(CodePool.STANDARD, "A1")

    def test_lost_consumption_race_rolls_back(self, service, codes, photo_store, monkeypatch):
        """
        GIVEN another admission deleted the code between validation and commit
        WHEN consumption finds no row
        THEN the registrant, the identifier and the stored photo are discarded.
        """
        monkeypatch.setattr(RegistrationCodeRepository, "consume", lambda self, pool, code: False)

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(photo=PhotoUpload("me.png", b"png-bytes")))

        assert err.value.reason is RejectionReason.INVALID_CODE
        assert err.value.last_state == AdmissionState.PERSISTED.value
        assert registrant_count() == 0
        assert len(photo_store) == 0

        monkeypatch.undo()
        assert service.admit(submission()).event_id == "edo-ahapn-0001"

    def test_invalid_photo(self, service, codes):
        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(photo=PhotoUpload("empty.png", b"")))

        assert err.value.reason is RejectionReason.INVALID_PHOTO
        assert err.value.message == "Image file is empty."
        assert code_valid(CodePool.STANDARD, "A1")

    def test_rejection_is_logged(self, service, codes, caplog):
        with caplog.at_level(logging.INFO, logger="waitlist.services.admission.service"):
            with pytest.raises(AdmissionRejected):
                service.admit(submission(code="NOPE"))

        [record] = [r for r in caplog.records if r.getMessage() == "admission.rejected"]
        assert record.reason == "invalid_code"


# ------------------------------ Late period -------------------------------- #
class TestLatePeriod:
    def test_late_code_ignored_before_cutoff(self, service, codes, session):
        out = service.admit(submission(late="L1"))

        assert out.event_id == "edo-ahapn-0001"
        assert code_valid(CodePool.LATE, "L1")
        row = session.query(Registrant).filter_by(email="jane@example.com").one()
        assert row.late_code is None

    def test_late_code_required_after_cutoff(self, service, codes, clock):
        clock.set(AFTER_CUTOFF)

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission())

        assert err.value.reason is RejectionReason.LATE_CODE_REQUIRED
        assert err.value.last_state == AdmissionState.CODE_VALIDATED.value
        assert code_valid(CodePool.STANDARD, "A1")

    @pytest.mark.parametrize("late", ["NOPE", "A2"])
    def test_invalid_late_code_after_cutoff(self, service, codes, clock, late):
        clock.set(AFTER_CUTOFF)

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission(late=late))

        assert err.value.reason is RejectionReason.INVALID_LATE_CODE
        assert err.value.message == "Invalid Late Registration Code"

    def test_both_codes_consumed_after_cutoff(self, service, codes, clock, session):
        clock.set(AFTER_CUTOFF)

        out = service.admit(submission(late="L1"))

        assert out.event_id == "edo-ahapn-0001"
        assert not code_valid(CodePool.STANDARD, "A1")
        assert not code_valid(CodePool.LATE, "L1")
        assert code_valid(CodePool.LATE, "L2")
        row = session.query(Registrant).filter_by(email="jane@example.com").one()
        assert row.late_code == "L1"

    def test_cutoff_instant_is_inclusive(self, service, codes, clock, settings):
        clock.set(settings.late_registration_start)
        assert service.late_period_active()

        with pytest.raises(AdmissionRejected) as err:
            service.admit(submission())
        assert err.value.reason is RejectionReason.LATE_CODE_REQUIRED


# ------------------------------- Delivery ---------------------------------- #
class TestDelivery:
    def test_render_failure_keeps_admission(self, settings, clock, notifier, codes):
        service = AdmissionService(
            renderer=StubRenderer(fail=True), notifier=notifier, settings=settings, clock=clock
        )

        out = service.admit(submission())

        assert out.event_id == "edo-ahapn-0001"
        assert out.delivery.status is DeliveryStatus.FAILED
        assert out.delivery.stage == "render"
        assert out.state is AdmissionState.CODE_CONSUMED
        assert notifier.outbox == []
        assert registrant_count() == 1
        assert not code_valid(CodePool.STANDARD, "A1")

    def test_notify_failure_keeps_admission(self, settings, clock, renderer, codes):
        notifier = InMemoryNotifier(fail_for={"jane@example.com"})
        service = AdmissionService(
            renderer=renderer, notifier=notifier, settings=settings, clock=clock
        )

        out = service.admit(submission())

        assert out.delivery.status is DeliveryStatus.FAILED
        assert out.delivery.stage == "notify"
        assert out.state is AdmissionState.ARTIFACT_RENDERED
        assert registrant_count() == 1

    def test_photo_reaches_the_card(self, service, codes, photo_store, renderer):
        out = service.admit(submission(photo=PhotoUpload("me.png", b"png-bytes")))

        assert out.registrant.photo_reference is not None
        assert photo_store.load(out.registrant.photo_reference) == b"png-bytes"
        assert renderer.rendered == [("event_pass", "edo-ahapn-0001")]

    def test_unreadable_photo_does_not_undo_admission(
        self, service, codes, photo_store, renderer, monkeypatch
    ):
        """
        GIVEN a stored photo that can no longer be read after commit
        WHEN the identity card is rendered
        THEN the card is rendered without it and the admission completes.
        """

        def broken_load(reference):
            raise UpstreamError("upload folder unavailable")

        monkeypatch.setattr(photo_store, "load", broken_load)

        out = service.admit(submission(photo=PhotoUpload("me.png", b"png-bytes")))

        assert out.delivery.status is DeliveryStatus.SENT
        assert out.state is AdmissionState.COMPLETED
        assert renderer.rendered == [("event_pass", "edo-ahapn-0001")]
        assert registrant_count() == 1


# ------------------------- Retries and deadline ---------------------------- #
class TestAllocationRetries:
    def test_collision_is_retried(self, service, codes, monkeypatch):
        """
        GIVEN an identifier allocation that collides once
        WHEN the admission runs
        THEN it retries and succeeds on the second attempt.
        """
        original = RegistrantRepository.next_event_number
        calls = {"n": 0}

        def flaky(self, counter=EVENT_ID_COUNTER):
            calls["n"] += 1
            if calls["n"] == 1:
                raise IntegrityError(
                    "INSERT", {}, Exception("UNIQUE constraint failed: event_id_counters.name")
                )
            return original(self, counter)

        monkeypatch.setattr(RegistrantRepository, "next_event_number", flaky)

        out = service.admit(submission())

        assert out.attempts == 2
        assert out.event_id == "edo-ahapn-0001"

    def test_exhausted_after_max_attempts(self, service, codes, session, settings):
        """
        GIVEN a counter lagging behind an existing event number
        WHEN every attempt collides on the registrant's unique number
        THEN the admission fails with AllocationExhaustedError and the code
        stays redeemable.
        """
        session.add(EventIdCounter(name=EVENT_ID_COUNTER, value=0))
        RegistrantFactory(event_number=1, event_id="edo-ahapn-0001")
        session.commit()

        with pytest.raises(AllocationExhaustedError) as err:
            service.admit(submission())

        assert err.value.attempts == settings.max_attempts
        assert err.value.last_state == AdmissionState.LATE_PERIOD_CHECKED.value
        assert err.value.terminal_state == AdmissionState.FAILED.value
        assert code_valid(CodePool.STANDARD, "A1")


class TestDeadline:
    @pytest.fixture()
    def timed(self, settings, clock, renderer, notifier):
        def build(step: float) -> AdmissionService:
            return AdmissionService(
                renderer=renderer,
                notifier=notifier,
                settings=dataclasses.replace(settings, timeout_seconds=30),
                clock=clock,
                monotonic=StepMonotonic(step=step),
            )

        return build

    def test_timeout_before_commit_persists_nothing(self, timed, codes):
        with pytest.raises(AdmissionTimeoutError):
            timed(15).admit(submission())

        assert registrant_count() == 0
        assert code_valid(CodePool.STANDARD, "A1")

    def test_timeout_after_commit_skips_render(self, timed, codes, renderer):
        out = timed(10).admit(submission())

        assert out.event_id == "edo-ahapn-0001"
        assert out.delivery.status is DeliveryStatus.SKIPPED
        assert out.delivery.stage == "render"
        assert out.delivery.detail == "timeout"
        assert renderer.rendered == []

    def test_timeout_after_render_skips_notify(self, timed, codes, notifier):
        out = timed(8).admit(submission())

        assert out.delivery.status is DeliveryStatus.SKIPPED
        assert out.delivery.stage == "notify"
        assert notifier.outbox == []
