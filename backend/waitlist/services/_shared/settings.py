"""Framework-agnostic settings consumed by the waitlist services."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from waitlist.core.config import parse_instant

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current aware UTC instant."""
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class WaitlistSettings:
    """
    Event-level knobs read once from the Flask config.

    :ivar event_id_prefix: Constant prefix of issued event identifiers.
    :ivar event_id_width: Zero-padding width of the numeric suffix.
    :ivar late_registration_start: From this instant a late code is mandatory.
    :ivar certificate_release_date: From this instant certificates are served.
    :ivar max_attempts: Identifier allocation attempts per admission.
    :ivar timeout_seconds: Execution budget of one admission.
    """

    event_id_prefix: str = "edo-ahapn-"
    event_id_width: int = 4
    late_registration_start: datetime = datetime(2025, 7, 1, tzinfo=UTC)
    certificate_release_date: datetime = datetime(2025, 8, 9, tzinfo=UTC)
    max_attempts: int = 3
    timeout_seconds: float = 30.0
    organisation_name: str = "AHAPN"
    event_title: str = "EDO 2025"

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> WaitlistSettings:
        """Build settings from a Flask ``app.config``-like mapping."""
        defaults = cls()
        return cls(
            event_id_prefix=config.get("EVENT_ID_PREFIX", defaults.event_id_prefix),
            event_id_width=int(config.get("EVENT_ID_WIDTH", defaults.event_id_width)),
            late_registration_start=parse_instant(
                config.get("LATE_REGISTRATION_START", defaults.late_registration_start)
            ),
            certificate_release_date=parse_instant(
                config.get("CERTIFICATE_RELEASE_DATE", defaults.certificate_release_date)
            ),
            max_attempts=max(1, int(config.get("ADMISSION_MAX_ATTEMPTS", defaults.max_attempts))),
            timeout_seconds=float(
                config.get("ADMISSION_TIMEOUT_SECONDS", defaults.timeout_seconds)
            ),
            organisation_name=config.get("ORGANISATION_NAME", defaults.organisation_name),
            event_title=config.get("EVENT_TITLE", defaults.event_title),
        )

    @property
    def certificate_release_label(self) -> str:
        """Release date as printed in client messages (``2025-08-09``)."""
        return self.certificate_release_date.date().isoformat()
