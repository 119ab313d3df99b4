"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are stable contracts between repositories, collaborators
(renderer, notifier, photo store) and application services.

The translation to HTTP responses (RFC 7807) is handled by
``waitlist/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, *needles: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL and MySQL quote the constraint name in the driver message,
    SQLite names the offending ``table.column`` instead, so callers pass both.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    *needles : str
        Constraint names (``"uq_registrants_email"``) or qualified columns
        (``"registrants.email"``) to look for.

    Returns
    -------
    bool
        True if any needle appears in the driver message.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return any(needle.lower() in message for needle in needles)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them through ``BaseService``.
    - Workflow services stamp ``last_state`` with the state reached when
      the error was raised and ``terminal_state`` with the terminal state
      the workflow ended in.
    """

    last_state: str | None = None
    terminal_state: str | None = None


# --------------------------------------------------------------------------- #
# Lookups and access
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Registrant").
    :param key: Identifier or search key.
    :param message: Client-facing message overriding the default.
    """

    entity: str
    key: str | int
    message: str | None = None

    def __str__(self) -> str:
        return self.message or f"{self.entity} not found: {self.key}"


class ForbiddenError(ServiceError):
    """Raised when an artifact is requested before it is released."""


# --------------------------------------------------------------------------- #
# Admission
# --------------------------------------------------------------------------- #


class RejectionReason(str, Enum):
    """Why a submission was turned away. Values double as API error codes."""

    INVALID_CODE = "invalid_code"
    LATE_CODE_REQUIRED = "late_code_required"
    INVALID_LATE_CODE = "invalid_late_code"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_PHOTO = "invalid_photo"


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.INVALID_CODE: "Invalid Registration Code",
    RejectionReason.LATE_CODE_REQUIRED: "Late Registration Code required",
    RejectionReason.INVALID_LATE_CODE: "Invalid Late Registration Code",
    RejectionReason.DUPLICATE_EMAIL: "Email already registered on the waitlist.",
    RejectionReason.INVALID_PHOTO: "Invalid image upload.",
}


class AdmissionRejected(ServiceError):
    """
    Submission rejected; nothing was persisted and no code was consumed.

    :param reason: Machine-readable reason.
    :param message: Optional client-facing override.
    """

    def __init__(self, reason: RejectionReason, message: str | None = None) -> None:
        self.reason = reason
        self.message = message or REJECTION_MESSAGES[reason]
        super().__init__(self.message)


class AllocationExhaustedError(ServiceError):
    """Identifier allocation kept colliding after the configured attempts."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not allocate an event ID after {attempts} attempts.")


class AdmissionTimeoutError(ServiceError):
    """The admission ran out of time before the registrant was committed."""

    def __init__(self, budget_seconds: float) -> None:
        self.budget_seconds = budget_seconds
        super().__init__(f"Registration did not complete within {budget_seconds:g}s.")


# --------------------------------------------------------------------------- #
# Collaborators
# --------------------------------------------------------------------------- #


class UpstreamError(ServiceError):
    """A collaborator (renderer, notifier, photo store) failed."""


class RenderError(UpstreamError):
    """Document rendering failed."""


class DeliveryError(UpstreamError):
    """The notifier could not hand a message to the mail transport."""


class PhotoRejected(ServiceError):
    """Uploaded photo is not an acceptable image (type, size, or content)."""
