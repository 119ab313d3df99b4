# waitlist/services/_shared/base.py
from __future__ import annotations

from waitlist.core import errors as api_errors
from waitlist.services._shared.errors import (
    AdmissionRejected,
    AdmissionTimeoutError,
    AllocationExhaustedError,
    ForbiddenError,
    NotFoundError,
    PhotoRejected,
    ServiceError,
    UpstreamError,
)
from waitlist.services._shared.settings import Clock, WaitlistSettings, utc_now
from waitlist.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Carry the event settings and an injectable clock.

    Notes
    -----
    - Services never touch the global session; they always go through a UoW.
    - Collaborators (renderer, notifier, photo store) are injected by the
      caller so services stay free of Flask and transport details.
    """

    def __init__(
        self,
        *,
        settings: WaitlistSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        :param settings: Event settings; defaults match the 2025 edition.
        :param clock: Callable returning the current aware UTC instant.
        """
        self.settings = settings or WaitlistSettings()
        self.clock: Clock = clock or utc_now

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, enforce_db_readonly: bool = True) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work."""
        return SQLAlchemyReadOnlyUnitOfWork(enforce_db_readonly=enforce_db_readonly)

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised.
        """
        if isinstance(exc, AdmissionRejected):
            # → 400, code names the reason
            return api_errors.BadRequest(exc.message, code=exc.reason.value)

        if isinstance(exc, PhotoRejected):
            return api_errors.BadRequest(str(exc), code="invalid_photo")

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ForbiddenError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, AllocationExhaustedError):
            return api_errors.InternalError(str(exc), code="allocation_exhausted")

        if isinstance(exc, AdmissionTimeoutError):
            return api_errors.InternalError(str(exc), code="admission_timeout")

        if isinstance(exc, UpstreamError):
            # → 502; the collaborator's own message stays in the logs
            return api_errors.UpstreamFailure()

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
