"""Waitlist endpoints: admission, lookups and PDF downloads."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from waitlist.api.deps import (
    admission_service,
    json_response,
    pdf_response,
    query_service,
    timing,
    translate_service_errors,
)
from waitlist.schemas import (
    AdmissionResponseSchema,
    EventIdSchema,
    WaitlistCountSchema,
    WaitlistSubmissionSchema,
)
from waitlist.services import AdmissionIn, PhotoUpload

bp = Blueprint("waitlist", __name__)

submission_schema = WaitlistSubmissionSchema()
admission_response_schema = AdmissionResponseSchema()
count_schema = WaitlistCountSchema()
event_id_schema = EventIdSchema()

CREATED_MESSAGE = "Waitlist entry created!"
CREATED_UNDELIVERED_MESSAGE = "Waitlist entry created, but the event ID email could not be sent."


def _read_photo() -> PhotoUpload | None:
    """Return the uploaded ``image`` file, reading at most one byte past the limit."""
    upload = request.files.get("image")
    if upload is None or not upload.filename:
        return None
    max_bytes = int(current_app.config.get("MAX_PHOTO_BYTES", 5 * 1024 * 1024))
    return PhotoUpload(filename=upload.filename, content=upload.stream.read(max_bytes + 1))


@bp.post("/waitlist")
@timing
@translate_service_errors
def join_waitlist():
    """Admit a registrant and email the identity card."""

    form = submission_schema.load(request.form.to_dict())
    out = admission_service().admit(
        AdmissionIn(
            name=form["name"],
            email=form["email"],
            phone_number=form["phone_number"],
            state=form["state"],
            submitted_code=form["reg_id"],
            late_code=form["late_reg_id"],
            photo=_read_photo(),
        )
    )
    message = CREATED_MESSAGE if out.delivery.delivered else CREATED_UNDELIVERED_MESSAGE
    body = admission_response_schema.dump(
        {"message": message, "event_id": out.event_id, "delivery": out.delivery}
    )
    return json_response(body, status=201)


@bp.get("/waitlist/count")
@timing
def waitlist_count():
    """Return the number of registrants."""

    return json_response(count_schema.dump({"count": query_service().count()}))


@bp.get("/waitlist/<string:email>")
@timing
@translate_service_errors
def event_id_by_email(email: str):
    """Return the event identifier issued to ``email``."""

    event_id = query_service().event_id_for_email(email)
    return json_response(event_id_schema.dump({"event_id": event_id}))


@bp.get("/event-id-pdf/<string:event_id>")
@timing
@translate_service_errors
def event_id_pdf(event_id: str):
    """Re-render and download the identity card."""

    return pdf_response(query_service().render_event_pass(event_id))


@bp.get("/download-certificate/<string:email>")
@timing
@translate_service_errors
def download_certificate(email: str):
    """Download the attendance certificate once certificates are released."""

    return pdf_response(query_service().render_certificate(email))
