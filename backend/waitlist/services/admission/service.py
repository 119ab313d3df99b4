"""
AdmissionService
================

Turns a waitlist submission into a persisted registrant:

- Validates the standard code and (after the late-registration cutoff) the
  late code, then rejects emails that are already on the waitlist.
- Allocates the next event number, inserts the registrant and consumes the
  code(s) in **one** transaction. A code consumed concurrently by another
  admission rolls everything back; identifier collisions are retried.
- Renders and emails the identity card after commit. Delivery problems are
  reported on the result and never undo the admission.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from waitlist.models import CodePool, Registrant, format_event_id
from waitlist.services._shared.base import BaseService
from waitlist.services._shared.errors import (
    AdmissionRejected,
    AdmissionTimeoutError,
    AllocationExhaustedError,
    PhotoRejected,
    RejectionReason,
    ServiceError,
    UpstreamError,
    violates,
)
from waitlist.services._shared.mail import event_pass_mail
from waitlist.services._shared.ports import ArtifactRenderer, EventPass, Notifier, PhotoStore
from waitlist.services._shared.settings import Clock, WaitlistSettings
from waitlist.services.admission.dto import (
    AdmissionIn,
    AdmissionOut,
    AdmissionState,
    DeliveryOutcome,
    DeliveryStatus,
    PhotoUpload,
    RegistrantPublicOut,
)

log = logging.getLogger(__name__)

EMAIL_CONSTRAINTS = ("uq_registrants_email", "registrants.email")


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def to_public(registrant: Registrant) -> RegistrantPublicOut:
    return RegistrantPublicOut(
        name=registrant.name,
        email=registrant.email,
        phone_number=registrant.phone_number,
        state=registrant.state,
        event_id=registrant.event_id,
        photo_reference=registrant.photo_reference,
        created_at=registrant.created_at,
    )


class _Deadline:
    """Monotonic execution budget checked between workflow steps."""

    def __init__(self, budget_seconds: float, monotonic: Callable[[], float]) -> None:
        self.budget_seconds = budget_seconds
        self._monotonic = monotonic
        self._expires_at = monotonic() + budget_seconds

    @property
    def expired(self) -> bool:
        return self._monotonic() >= self._expires_at


class _Progress:
    """Tracks the state reached by one admission."""

    def __init__(self) -> None:
        self.state = AdmissionState.RECEIVED

    def advance(self, state: AdmissionState) -> None:
        self.state = state
        log.debug("admission.state", extra={"admission_state": state.value})

    def stamp(self, exc: ServiceError, terminal: AdmissionState) -> ServiceError:
        exc.last_state = self.state.value
        exc.terminal_state = terminal.value
        self.advance(terminal)
        return exc


class AdmissionService(BaseService):
    """
    Orchestrates a single admission.

    Collaborators are injected so the workflow can be exercised without
    SMTP, PDF generation or a filesystem.

    :param renderer: Builds the identity-card PDF.
    :param notifier: Emails the identity card.
    :param photo_store: Validates and keeps uploaded photos; uploads are
        ignored when ``None``.
    :param settings: Event settings (cutoff, prefix, retry bound, timeout).
    :param clock: Wall clock used for late-period gating.
    :param monotonic: Clock used for the execution deadline.
    """

    def __init__(
        self,
        *,
        renderer: ArtifactRenderer,
        notifier: Notifier,
        photo_store: PhotoStore | None = None,
        settings: WaitlistSettings | None = None,
        clock: Clock | None = None,
        monotonic: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(settings=settings, clock=clock)
        self.renderer = renderer
        self.notifier = notifier
        self.photo_store = photo_store
        self._monotonic = monotonic or time.monotonic

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def late_period_active(self) -> bool:
        """``True`` once the clock reaches the late-registration cutoff."""
        return self.clock() >= self.settings.late_registration_start

    def admit(self, dto: AdmissionIn) -> AdmissionOut:
        """
        Run the admission workflow.

        :param dto: Submission.
        :type dto: :class:`AdmissionIn`
        :returns: Persisted registrant, identifier and delivery outcome.
        :rtype: :class:`AdmissionOut`
        :raises AdmissionRejected: On a validation failure (nothing persisted).
        :raises AllocationExhaustedError: When identifier allocation keeps racing.
        :raises AdmissionTimeoutError: When the budget runs out before commit.
        """
        deadline = _Deadline(self.settings.timeout_seconds, self._monotonic)
        progress = _Progress()
        email = normalize_email(dto.email)
        submitted_code = (dto.submitted_code or "").strip()
        late_code = (dto.late_code or "").strip() or None

        try:
            late_required = self._validate(submitted_code, late_code, progress)
            photo_reference = self._store_photo(dto.photo)
            try:
                registrant, attempts = self._commit(
                    dto,
                    email=email,
                    submitted_code=submitted_code,
                    late_code=late_code if late_required else None,
                    photo_reference=photo_reference,
                    deadline=deadline,
                    progress=progress,
                )
            except Exception:
                if photo_reference and self.photo_store is not None:
                    self.photo_store.discard(photo_reference)
                raise
        except AdmissionRejected as exc:
            progress.stamp(exc, AdmissionState.REJECTED)
            log.info(
                "admission.rejected",
                extra={"reason": exc.reason.value, "admission_state": exc.last_state},
            )
            raise
        except ServiceError as exc:
            progress.stamp(exc, AdmissionState.FAILED)
            log.error(
                "admission.failed: %s",
                exc,
                extra={"admission_state": exc.last_state},
            )
            raise

        delivery = self._deliver(registrant, deadline, progress)
        log.info(
            "admission.completed",
            extra={
                "event_id": registrant.event_id,
                "attempt": attempts,
                "delivery_status": delivery.status.value,
                "admission_state": progress.state.value,
            },
        )
        return AdmissionOut(
            registrant=registrant,
            event_id=registrant.event_id,
            delivery=delivery,
            attempts=attempts,
            state=progress.state,
        )

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _validate(
        self,
        submitted_code: str,
        late_code: str | None,
        progress: _Progress,
    ) -> bool:
        """Code and late-period checks. Returns whether a late code applies."""
        with self.ro_uow() as uow:
            if not uow.registration_codes.is_valid(CodePool.STANDARD, submitted_code):
                raise AdmissionRejected(RejectionReason.INVALID_CODE)
            progress.advance(AdmissionState.CODE_VALIDATED)

            late_required = self.late_period_active()
            if late_required:
                if not late_code:
                    raise AdmissionRejected(RejectionReason.LATE_CODE_REQUIRED)
                if not uow.registration_codes.is_valid(CodePool.LATE, late_code):
                    raise AdmissionRejected(RejectionReason.INVALID_LATE_CODE)
            progress.advance(AdmissionState.LATE_PERIOD_CHECKED)
        return late_required

    def _store_photo(self, photo: PhotoUpload | None) -> str | None:
        if photo is None or self.photo_store is None:
            return None
        try:
            return self.photo_store.save(photo.filename, photo.content)
        except PhotoRejected as exc:
            raise AdmissionRejected(RejectionReason.INVALID_PHOTO, str(exc)) from exc

    def _commit(
        self,
        dto: AdmissionIn,
        *,
        email: str,
        submitted_code: str,
        late_code: str | None,
        photo_reference: str | None,
        deadline: _Deadline,
        progress: _Progress,
    ) -> tuple[RegistrantPublicOut, int]:
        """Allocate, persist and consume atomically, retrying identifier races."""
        max_attempts = self.settings.max_attempts
        for attempt in range(1, max_attempts + 1):
            if deadline.expired:
                raise AdmissionTimeoutError(deadline.budget_seconds)
            try:
                with self.rw_uow() as uow:
                    # Duplicate emails are caught here, after the codes were validated.
                    if uow.registrants.exists_by_email(email):
                        raise AdmissionRejected(RejectionReason.DUPLICATE_EMAIL)

                    number = uow.registrants.next_event_number()
                    event_id = format_event_id(
                        number,
                        prefix=self.settings.event_id_prefix,
                        width=self.settings.event_id_width,
                    )
                    progress.advance(AdmissionState.IDENTIFIER_ALLOCATED)

                    registrant = uow.registrants.add(
                        Registrant(
                            name=dto.name,
                            email=email,
                            phone_number=dto.phone_number,
                            state=dto.state,
                            photo_reference=photo_reference,
                            event_number=number,
                            event_id=event_id,
                            submitted_code=submitted_code,
                            late_code=late_code,
                            created_at=self.clock(),
                        )
                    )
                    progress.advance(AdmissionState.PERSISTED)

                    # A concurrent admission that already deleted the code wins.
                    if not uow.registration_codes.consume(CodePool.STANDARD, submitted_code):
                        raise AdmissionRejected(RejectionReason.INVALID_CODE)
                    if late_code and not uow.registration_codes.consume(CodePool.LATE, late_code):
                        raise AdmissionRejected(RejectionReason.INVALID_LATE_CODE)
                    progress.advance(AdmissionState.CODE_CONSUMED)

                    if deadline.expired:
                        raise AdmissionTimeoutError(deadline.budget_seconds)
                    public = to_public(registrant)
            except IntegrityError as exc:
                if violates(exc, *EMAIL_CONSTRAINTS):
                    raise AdmissionRejected(RejectionReason.DUPLICATE_EMAIL) from exc
                log.warning(
                    "admission.identifier_collision",
                    extra={"attempt": attempt},
                )
                progress.advance(AdmissionState.LATE_PERIOD_CHECKED)
                continue
            return public, attempt

        raise AllocationExhaustedError(max_attempts)

    def _deliver(
        self,
        registrant: RegistrantPublicOut,
        deadline: _Deadline,
        progress: _Progress,
    ) -> DeliveryOutcome:
        """Render and email the identity card; never raises for collaborator failures."""
        if deadline.expired:
            return DeliveryOutcome(DeliveryStatus.SKIPPED, stage="render", detail="timeout")

        photo = None
        if registrant.photo_reference and self.photo_store is not None:
            try:
                photo = self.photo_store.load(registrant.photo_reference)
            except UpstreamError:
                # The card is still useful without the photo.
                log.warning(
                    "admission.photo_unavailable",
                    extra={"event_id": registrant.event_id},
                    exc_info=True,
                )

        try:
            pdf = self.renderer.render_event_pass(
                EventPass(
                    name=registrant.name,
                    state=registrant.state,
                    event_id=registrant.event_id,
                    photo=photo,
                )
            )
        except UpstreamError as exc:
            log.warning(
                "admission.render_failed",
                extra={"event_id": registrant.event_id, "delivery_status": "failed"},
                exc_info=True,
            )
            return DeliveryOutcome(DeliveryStatus.FAILED, stage="render", detail=str(exc))
        progress.advance(AdmissionState.ARTIFACT_RENDERED)

        if deadline.expired:
            return DeliveryOutcome(DeliveryStatus.SKIPPED, stage="notify", detail="timeout")

        mail = event_pass_mail(
            self.settings,
            name=registrant.name,
            email=registrant.email,
            event_id=registrant.event_id,
            pdf=pdf,
        )
        try:
            self.notifier.send(mail)
        except UpstreamError as exc:
            log.error(
                "admission.notify_failed",
                extra={"event_id": registrant.event_id, "delivery_status": "failed"},
                exc_info=True,
            )
            return DeliveryOutcome(DeliveryStatus.FAILED, stage="notify", detail=str(exc))
        progress.advance(AdmissionState.NOTIFIED)
        progress.advance(AdmissionState.COMPLETED)
        return DeliveryOutcome(DeliveryStatus.SENT)
