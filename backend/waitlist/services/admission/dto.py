"""
DTOs for AdmissionService.

Data Transfer Objects isolate the service layer from ORM models, ensuring
clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# --------------------------------------------------------------------------- #
# Workflow vocabulary
# --------------------------------------------------------------------------- #


class AdmissionState(str, Enum):
    """States an admission moves through, in order, plus two terminals."""

    RECEIVED = "received"
    CODE_VALIDATED = "code_validated"
    LATE_PERIOD_CHECKED = "late_period_checked"
    IDENTIFIER_ALLOCATED = "identifier_allocated"
    PERSISTED = "persisted"
    CODE_CONSUMED = "code_consumed"
    ARTIFACT_RENDERED = "artifact_rendered"
    NOTIFIED = "notified"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PhotoUpload:
    """
    Raw uploaded photo.

    :param filename: Client-supplied file name.
    :type filename: str
    :param content: File bytes.
    :type content: bytes
    """

    filename: str
    content: bytes


@dataclass(frozen=True, slots=True)
class AdmissionIn:
    """
    Input DTO for a waitlist submission.

    :param name: Registrant name.
    :type name: str
    :param email: Contact address (normalized to lowercase).
    :type email: str
    :param phone_number: Contact phone number.
    :type phone_number: str
    :param state: Registrant state of residence.
    :type state: str
    :param submitted_code: Standard registration code.
    :type submitted_code: str
    :param late_code: Late registration code, mandatory after the cutoff.
    :type late_code: str | None
    :param photo: Optional photo for the identity card.
    :type photo: PhotoUpload | None
    """

    name: str
    email: str
    phone_number: str
    state: str
    submitted_code: str
    late_code: str | None = None
    photo: PhotoUpload | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegistrantPublicOut:
    """
    Public view of a registrant.

    :param event_id: Issued event identifier.
    :type event_id: str
    :param created_at: Persistence timestamp.
    :type created_at: datetime | None
    """

    name: str
    email: str
    phone_number: str
    state: str
    event_id: str
    photo_reference: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class DeliveryOutcome:
    """
    What happened to the identity card after the registrant was committed.

    :param status: ``sent``, ``failed`` or ``skipped``.
    :type status: DeliveryStatus
    :param stage: ``render`` or ``notify`` when not sent.
    :type stage: str | None
    :param detail: Short reason, e.g. ``timeout`` or the collaborator error.
    :type detail: str | None
    """

    status: DeliveryStatus
    stage: str | None = None
    detail: str | None = None

    @property
    def delivered(self) -> bool:
        return self.status is DeliveryStatus.SENT


@dataclass(frozen=True, slots=True)
class AdmissionOut:
    """
    Result of a successful admission.

    The registrant is persisted and its codes consumed whatever ``delivery``
    says.

    :param registrant: Persisted registrant.
    :type registrant: RegistrantPublicOut
    :param event_id: Issued identifier (same as ``registrant.event_id``).
    :type event_id: str
    :param delivery: Identity-card delivery outcome.
    :type delivery: DeliveryOutcome
    :param attempts: Allocation attempts used (``1`` without a race).
    :type attempts: int
    :param state: Last state reached.
    :type state: AdmissionState
    """

    registrant: RegistrantPublicOut
    event_id: str
    delivery: DeliveryOutcome
    attempts: int
    state: AdmissionState
