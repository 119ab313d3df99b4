"""Unit tests for WaitlistQueryService."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from waitlist.services import WaitlistQueryService
from waitlist.services._shared.errors import ForbiddenError, NotFoundError, RenderError
from waitlist.services._shared.ports import StubRenderer
from tests.factories.registrant import RegistrantFactory

RELEASED = datetime(2025, 8, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def service(settings, clock, renderer, photo_store):
    return WaitlistQueryService(
        renderer=renderer, photo_store=photo_store, settings=settings, clock=clock
    )


class TestLookups:
    def test_count(self, service, session):
        assert service.count() == 0
        RegistrantFactory.create_batch(3)
        assert service.count() == 3

    def test_event_id_for_email(self, service, session):
        RegistrantFactory(email="jane@example.com", event_number=1, event_id="edo-ahapn-0001")

        assert service.event_id_for_email("Jane@Example.com") == "edo-ahapn-0001"

    def test_unknown_email(self, service, session):
        with pytest.raises(NotFoundError) as err:
            service.event_id_for_email("ghost@example.com")
        assert str(err.value) == "User not found"


class TestEventPass:
    def test_renders_card_for_event_id(self, service, session, renderer):
        RegistrantFactory(event_number=7, event_id="edo-ahapn-0007")

        doc = service.render_event_pass("edo-ahapn-0007")

        assert doc.filename == "event_id_edo-ahapn-0007.pdf"
        assert doc.mimetype == "application/pdf"
        assert doc.content.startswith(b"%PDF")
        assert renderer.rendered == [("event_pass", "edo-ahapn-0007")]

    def test_card_includes_stored_photo(self, settings, clock, photo_store, session):
        reference = photo_store.save("me.png", b"photo")
        RegistrantFactory(event_number=8, event_id="edo-ahapn-0008", photo_reference=reference)
        seen = []

        class Recorder(StubRenderer):
            def render_event_pass(self, card):
                seen.append(card.photo)
                return super().render_event_pass(card)

        service = WaitlistQueryService(
            renderer=Recorder(), photo_store=photo_store, settings=settings, clock=clock
        )
        service.render_event_pass("edo-ahapn-0008")

        assert seen == [b"photo"]

    def test_unknown_event_id(self, service, session):
        with pytest.raises(NotFoundError):
            service.render_event_pass("edo-ahapn-9999")

    def test_render_failure_propagates(self, settings, clock, session):
        RegistrantFactory(event_number=9, event_id="edo-ahapn-0009")
        service = WaitlistQueryService(
            renderer=StubRenderer(fail=True), settings=settings, clock=clock
        )
        with pytest.raises(RenderError):
            service.render_event_pass("edo-ahapn-0009")


class TestCertificate:
    def test_forbidden_before_release(self, service, session):
        """
        GIVEN a registrant and a clock before the release date
        WHEN the certificate is requested
        THEN access is refused with the release date in the message.
        """
        RegistrantFactory(email="jane@example.com")

        with pytest.raises(ForbiddenError) as err:
            service.render_certificate("jane@example.com")

        assert str(err.value) == "Certificates available after 2025-08-09"

    def test_available_from_release_instant(self, service, session, clock, renderer):
        RegistrantFactory(email="jane@example.com", name="Jane Doe")
        clock.set(RELEASED)

        doc = service.render_certificate("jane@example.com")

        assert doc.filename == "certificate_Jane Doe.pdf"
        assert renderer.rendered == [("certificate", "Jane Doe")]

    def test_unknown_email_is_not_found_even_before_release(self, service, session):
        with pytest.raises(NotFoundError):
            service.render_certificate("ghost@example.com")
