"""Registrant model: an accepted waitlist entry holding its event identifier."""

from __future__ import annotations

from sqlalchemy import BigInteger, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from waitlist.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

DEFAULT_EVENT_ID_PREFIX = "edo-ahapn-"
DEFAULT_EVENT_ID_WIDTH = 4


def format_event_id(
    number: int,
    *,
    prefix: str = DEFAULT_EVENT_ID_PREFIX,
    width: int = DEFAULT_EVENT_ID_WIDTH,
) -> str:
    """
    Render an event number as a human-readable identifier.

    :param number: Positive sequence number.
    :param prefix: Constant identifier prefix.
    :param width: Zero-padding width; wider numbers are never truncated.
    :returns: e.g. ``"edo-ahapn-0001"``.
    :raises ValueError: If ``number`` is not positive.
    """
    if number < 1:
        raise ValueError("Event numbers start at 1.")
    return f"{prefix}{number:0{width}d}"


def parse_event_number(event_id: str, *, prefix: str = DEFAULT_EVENT_ID_PREFIX) -> int | None:
    """Return the numeric suffix of ``event_id`` or ``None`` when it does not parse."""
    if not event_id or not event_id.startswith(prefix):
        return None
    suffix = event_id[len(prefix) :]
    return int(suffix) if suffix.isdigit() else None


class Registrant(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    Accepted waitlist registration.

    Rows are written once by the admission workflow and never updated.

    Fields
    ------
    name, phone_number, state : str
        Contact details printed on the identity card.
    email : str
        Contact address, stored normalized (lowercase, trimmed). Unique.
    photo_reference : str | None
        Opaque pointer returned by the photo store.
    event_number : int
        Sequence number allocated from the atomic counter. Unique.
    event_id : str
        ``event_number`` rendered with the configured prefix. Unique.
    submitted_code : str
        Standard registration code consumed by this admission.
    late_code : str | None
        Late registration code consumed by this admission, if one was required.
    """

    __tablename__ = "registrants"
    __repr_key__ = "event_id"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)
    state: Mapped[str] = mapped_column(String(64), nullable=False)
    photo_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False)
    submitted_code: Mapped[str] = mapped_column(String(64), nullable=False)
    late_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_registrants_email"),
        UniqueConstraint("event_id", name="uq_registrants_event_id"),
        UniqueConstraint("event_number", name="uq_registrants_event_number"),
        Index("ix_registrants_created_at", "created_at"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :param value: Email to normalize.
        :returns: Normalized email (lowercased/trimmed).
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name", "phone_number", "state")
    def _strip_required(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()
