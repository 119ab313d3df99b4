"""Administrative endpoints (JWT with the ``admin`` scope)."""

from __future__ import annotations

from flask import Blueprint, current_app
from flask_jwt_extended import get_jwt_identity

from waitlist.api.deps import (
    json_response,
    require_scope,
    sweep_service,
    timing,
    translate_service_errors,
)
from waitlist.schemas import SweepSummarySchema

bp = Blueprint("admin", __name__)

summary_schema = SweepSummarySchema()


@bp.post("/send-certificates")
@require_scope("admin")
@timing
@translate_service_errors
def send_certificates():
    """Email certificates to every registrant; failures are counted, not raised."""

    summary = sweep_service().send_certificates()
    current_app.logger.info(
        "admin.send_certificates by=%s", get_jwt_identity(), extra={"total": summary.total}
    )
    message = (
        "Certificates sent to all users!"
        if summary.failed == 0
        else f"Certificates sent with {summary.failed} failure(s)."
    )
    body = summary_schema.dump(
        {
            "message": message,
            "total": summary.total,
            "sent": summary.sent,
            "failed": summary.failed,
            "failures": summary.failures,
        }
    )
    return json_response(body)
