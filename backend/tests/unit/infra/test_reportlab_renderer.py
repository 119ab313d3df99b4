"""Smoke tests for the ReportLab renderer."""

from __future__ import annotations

import pytest

from waitlist.infra.pdf import ReportLabRenderer
from waitlist.infra.pdf.reportlab_renderer import CardBranding
from waitlist.services._shared.errors import RenderError
from waitlist.services._shared.ports import EventPass
from tests.helpers.utils import tiny_png


@pytest.fixture()
def renderer():
    # Artwork paths that do not exist are skipped.
    return ReportLabRenderer(
        CardBranding(logo_path="missing.png", accent_image_path=None, certificate_template_path=None)
    )


class TestReportLabRenderer:
    def test_event_pass_is_a_pdf(self, renderer):
        pdf = renderer.render_event_pass(
            EventPass(name="Jane Doe", state="Edo", event_id="edo-ahapn-0001")
        )
        assert pdf.startswith(b"%PDF")

    def test_event_pass_with_photo(self, renderer):
        pdf = renderer.render_event_pass(
            EventPass(name="Jane Doe", state="Edo", event_id="edo-ahapn-0001", photo=tiny_png())
        )
        assert pdf.startswith(b"%PDF")

    def test_certificate_is_a_pdf(self, renderer):
        assert renderer.render_certificate("Jane Doe").startswith(b"%PDF")

    def test_corrupt_photo_raises_render_error(self, renderer):
        with pytest.raises(RenderError):
            renderer.render_event_pass(
                EventPass(name="Jane", state="Edo", event_id="edo-ahapn-0002", photo=b"garbage")
            )

    def test_from_config_reads_branding(self):
        renderer = ReportLabRenderer.from_config(
            {"EVENT_TITLE": "EDO 2026", "EVENT_DATE_RANGE": "Aug 3-8, 2026"}
        )
        assert renderer.branding.title == "EDO 2026"
        assert renderer.branding.date_range == "Aug 3-8, 2026"
