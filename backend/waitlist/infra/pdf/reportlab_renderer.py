"""ReportLab implementation of :class:`ArtifactRenderer`."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from reportlab.graphics.barcode import code128
from reportlab.lib.colors import HexColor, white
from reportlab.lib.pagesizes import A4, A6, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from waitlist.services._shared.errors import RenderError
from waitlist.services._shared.ports.renderer import ArtifactRenderer, EventPass

log = logging.getLogger(__name__)

GRADIENT_TOP = HexColor("#e6ffe6")
GRADIENT_BOTTOM = HexColor("#b3ffb3")
BRAND_GREEN = HexColor("#006400")
INK = HexColor("#1a1a1a")

PHOTO_WIDTH = 80
PHOTO_HEIGHT = 100


@dataclass(frozen=True, slots=True)
class CardBranding:
    """Text and artwork printed on every document."""

    title: str = "EDO 2025"
    subtitle: str = "26TH ANNUAL NATIONAL SCIENTIFIC CONFERENCE"
    date_range: str = "Aug 4-9, 2025"
    footer: str = "AHAPN | ahapn2021@gmail.com | 08079238160"
    logo_path: str | None = None
    accent_image_path: str | None = None
    certificate_template_path: str | None = None


def _existing(path: str | None) -> str | None:
    if path and os.path.isfile(path):
        return path
    if path:
        log.debug("renderer.asset_missing path=%s", path)
    return None


class ReportLabRenderer(ArtifactRenderer):
    """
    Draws the identity card (A6 portrait) and certificate (A4 landscape).

    Missing artwork files are skipped; the documents stay valid without them.
    Any ReportLab or image decoding failure is raised as :class:`RenderError`.
    """

    def __init__(self, branding: CardBranding | None = None) -> None:
        self.branding = branding or CardBranding()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ReportLabRenderer:
        defaults = CardBranding()
        return cls(
            CardBranding(
                title=config.get("EVENT_TITLE", defaults.title),
                subtitle=config.get("EVENT_SUBTITLE", defaults.subtitle),
                date_range=config.get("EVENT_DATE_RANGE", defaults.date_range),
                footer=config.get("ORGANISATION_FOOTER", defaults.footer),
                logo_path=config.get("LOGO_PATH"),
                accent_image_path=config.get("ACCENT_IMAGE_PATH"),
                certificate_template_path=config.get("CERTIFICATE_TEMPLATE_PATH"),
            )
        )

    # ------------------------------------------------------------------ #
    # Identity card
    # ------------------------------------------------------------------ #

    def render_event_pass(self, card: EventPass) -> bytes:
        try:
            return self._draw_event_pass(card)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"event pass rendering failed: {exc}") from exc

    def _draw_event_pass(self, card: EventPass) -> bytes:
        buf = io.BytesIO()
        width, height = A6
        c = canvas.Canvas(buf, pagesize=A6)
        c.setTitle(f"Event ID {card.event_id}")

        # Background gradient and border
        c.saveState()
        path = c.beginPath()
        path.rect(0, 0, width, height)
        c.clipPath(path, stroke=0, fill=0)
        c.linearGradient(0, height, 0, 0, (GRADIENT_TOP, GRADIENT_BOTTOM), extend=True)
        c.restoreState()
        c.setStrokeColor(BRAND_GREEN)
        c.setLineWidth(2)
        c.roundRect(4, 4, width - 8, height - 8, 10, stroke=1, fill=0)

        # Header bar
        header_h = 26 * mm
        c.setFillColor(BRAND_GREEN)
        c.rect(4, height - 4 - header_h, width - 8, header_h, stroke=0, fill=1)
        logo = _existing(self.branding.logo_path)
        if logo:
            c.drawImage(
                ImageReader(logo),
                8,
                height - 4 - header_h + 3 * mm,
                width=20 * mm,
                height=20 * mm,
                preserveAspectRatio=True,
                mask="auto",
            )
        c.setFillColor(white)
        c.setFont("Helvetica-Bold", 16)
        c.drawCentredString(width / 2, height - 4 - 11 * mm, self.branding.title)
        c.setFont("Helvetica", 6.5)
        c.drawCentredString(width / 2, height - 4 - 17 * mm, self.branding.subtitle)

        # Photo
        photo_top = height - 4 - header_h - 6 * mm
        photo_x = (width - PHOTO_WIDTH) / 2
        photo_y = photo_top - PHOTO_HEIGHT
        if card.photo:
            c.drawImage(
                ImageReader(io.BytesIO(card.photo)),
                photo_x,
                photo_y,
                width=PHOTO_WIDTH,
                height=PHOTO_HEIGHT,
                preserveAspectRatio=True,
                mask="auto",
            )
        c.setStrokeColor(BRAND_GREEN)
        c.setLineWidth(1)
        c.rect(photo_x, photo_y, PHOTO_WIDTH, PHOTO_HEIGHT, stroke=1, fill=0)

        accent = _existing(self.branding.accent_image_path)
        if accent:
            c.drawImage(
                ImageReader(accent),
                width - 8 - 18 * mm,
                photo_y,
                width=18 * mm,
                height=18 * mm,
                preserveAspectRatio=True,
                mask="auto",
            )

        # Registrant details
        c.setFillColor(INK)
        y = photo_y - 8 * mm
        for label, value in (
            ("NAME", card.name),
            ("STATE", card.state),
            ("ID", card.event_id),
        ):
            c.setFont("Helvetica-Bold", 10)
            c.drawCentredString(width / 2, y, f"{label}: {value.upper()}")
            y -= 5.5 * mm
        c.setFont("Helvetica", 8)
        c.drawCentredString(width / 2, y, f"Valid: {self.branding.date_range}")

        # Barcode
        barcode = code128.Code128(card.event_id, barHeight=10 * mm, barWidth=0.8)
        barcode.drawOn(c, (width - barcode.width) / 2, 14 * mm)

        # Footer
        c.setFillColor(BRAND_GREEN)
        c.setFont("Helvetica", 6)
        c.drawCentredString(width / 2, 8 * mm, self.branding.footer)

        c.showPage()
        c.save()
        return buf.getvalue()

    # ------------------------------------------------------------------ #
    # Certificate
    # ------------------------------------------------------------------ #

    def render_certificate(self, name: str) -> bytes:
        try:
            return self._draw_certificate(name)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"certificate rendering failed: {exc}") from exc

    def _draw_certificate(self, name: str) -> bytes:
        buf = io.BytesIO()
        pagesize = landscape(A4)
        width, height = pagesize
        c = canvas.Canvas(buf, pagesize=pagesize)
        c.setTitle(f"Certificate {name}")

        template = _existing(self.branding.certificate_template_path)
        if template:
            c.drawImage(ImageReader(template), 0, 0, width=width, height=height)
        else:
            c.setStrokeColor(BRAND_GREEN)
            c.setLineWidth(4)
            c.rect(15 * mm, 15 * mm, width - 30 * mm, height - 30 * mm, stroke=1, fill=0)
            c.setFillColor(BRAND_GREEN)
            c.setFont("Helvetica-Bold", 32)
            c.drawCentredString(width / 2, height - 55 * mm, "CERTIFICATE OF ATTENDANCE")
            c.setFont("Helvetica", 14)
            c.drawCentredString(width / 2, height - 70 * mm, self.branding.subtitle)

        c.setFillColor(INK)
        c.setFont("Helvetica-Bold", 28)
        c.drawCentredString(width / 2, height * 0.48, name.upper())

        c.showPage()
        c.save()
        return buf.getvalue()
