"""Composition of the emails sent to registrants."""

from __future__ import annotations

from waitlist.services._shared.ports.notifier import Attachment, OutgoingMail
from waitlist.services._shared.settings import WaitlistSettings


def _event_label(settings: WaitlistSettings) -> str:
    # "AHAPN" + "EDO 2025" -> "AHAPN Edo 2025"
    return f"{settings.organisation_name} {settings.event_title.title()}"


def event_pass_mail(
    settings: WaitlistSettings, *, name: str, email: str, event_id: str, pdf: bytes
) -> OutgoingMail:
    """Welcome email carrying the identity card."""
    return OutgoingMail(
        to=email,
        subject=f"Welcome to {_event_label(settings)} Waitlist",
        body=(
            f"Dear {name},\n\n"
            f"Your Event ID: {event_id}\n\n"
            f"Best regards,\n{settings.organisation_name} Team"
        ),
        attachments=(Attachment(filename=f"event_id_{email}.pdf", content=pdf),),
    )


def certificate_mail(
    settings: WaitlistSettings, *, name: str, email: str, pdf: bytes
) -> OutgoingMail:
    """Certificate of attendance email."""
    return OutgoingMail(
        to=email,
        subject=f"Your {_event_label(settings)} Certificate",
        body=(
            f"Dear {name},\n\n"
            f"Thank you for attending {_event_label(settings)}. "
            f"Your certificate of attendance is attached.\n\n"
            f"Best regards,\n{settings.organisation_name} Team"
        ),
        attachments=(Attachment(filename=f"certificate_{name}.pdf", content=pdf),),
    )
