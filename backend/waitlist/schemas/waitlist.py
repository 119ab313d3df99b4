"""Waitlist resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, pre_load, validate

DOTTED_DOMAIN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class WaitlistSubmissionSchema(Schema):
    """Multipart form fields of a waitlist submission.

    ``regId`` is optional at this level: a missing code is reported by the
    admission workflow as an invalid code rather than a malformed form.
    """

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    email = fields.Email(
        required=True,
        validate=[
            validate.Length(max=254),
            # Registrant rows require a dotted domain.
            validate.Regexp(DOTTED_DOMAIN, error="Email domain must contain a dot."),
        ],
    )
    phone_number = fields.String(
        required=True, data_key="phoneNumber", validate=validate.Length(min=1, max=32)
    )
    state = fields.String(required=True, validate=validate.Length(min=1, max=64))
    reg_id = fields.String(load_default="", data_key="regId", validate=validate.Length(max=64))
    late_reg_id = fields.String(
        load_default=None,
        allow_none=True,
        data_key="lateRegId",
        validate=validate.Length(max=64),
    )

    @pre_load
    def strip_strings(self, data: Any, **_: Any) -> dict[str, Any]:
        cleaned = {k: v.strip() if isinstance(v, str) else v for k, v in dict(data).items()}
        if cleaned.get("lateRegId") == "":
            cleaned["lateRegId"] = None
        return cleaned

    @post_load
    def normalize_email(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["email"] = data["email"].lower()
        return data


class DeliverySchema(Schema):
    """Identity-card delivery outcome."""

    status = fields.Function(lambda obj: obj.status.value)
    stage = fields.String(allow_none=True)
    detail = fields.String(allow_none=True)


class AdmissionResponseSchema(Schema):
    """Body of a successful ``POST /waitlist``."""

    message = fields.String(required=True)
    event_id = fields.String(required=True, data_key="eventId")
    delivery = fields.Nested(DeliverySchema, required=True)


class WaitlistCountSchema(Schema):
    count = fields.Integer(required=True)


class EventIdSchema(Schema):
    event_id = fields.String(required=True, data_key="eventId")


class SweepSummarySchema(Schema):
    """Result of the certificate sweep."""

    message = fields.String(required=True)
    total = fields.Integer(required=True)
    sent = fields.Integer(required=True)
    failed = fields.Integer(required=True)
    failures = fields.List(fields.String(), required=True)
