"""
WaitlistQueryService
====================

Side-effect free reads: registrant count, identifier lookup and on-demand
re-rendering of the identity card and certificate.
"""

from __future__ import annotations

from waitlist.services._shared.base import BaseService
from waitlist.services._shared.errors import ForbiddenError, NotFoundError
from waitlist.services._shared.ports import ArtifactRenderer, EventPass, PhotoStore
from waitlist.services._shared.settings import Clock, WaitlistSettings
from waitlist.services.admission.service import normalize_email
from waitlist.services.waitlist.dto import RenderedDocument

USER_NOT_FOUND = "User not found"


class WaitlistQueryService(BaseService):
    """
    Query-side operations.

    Lookups run in read-only units of work; rendering happens after the
    unit of work closed, on a plain snapshot of the registrant.
    """

    def __init__(
        self,
        *,
        renderer: ArtifactRenderer | None = None,
        photo_store: PhotoStore | None = None,
        settings: WaitlistSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(settings=settings, clock=clock)
        self.renderer = renderer
        self.photo_store = photo_store

    def count(self) -> int:
        """Number of registrants on the waitlist."""
        with self.ro_uow() as uow:
            return uow.registrants.count()

    def event_id_for_email(self, email: str) -> str:
        """
        Return the event identifier issued to ``email``.

        :raises NotFoundError: When nobody registered with that address.
        """
        with self.ro_uow() as uow:
            registrant = uow.registrants.get_by_email(email)
            if registrant is None:
                raise NotFoundError("Registrant", normalize_email(email), USER_NOT_FOUND)
            return registrant.event_id

    def render_event_pass(self, event_id: str) -> RenderedDocument:
        """
        Re-render the identity card for ``event_id``.

        :raises NotFoundError: Unknown identifier.
        :raises RenderError: When the renderer fails.
        """
        with self.ro_uow() as uow:
            registrant = uow.registrants.get_by_event_id(event_id)
            if registrant is None:
                raise NotFoundError("Registrant", event_id, USER_NOT_FOUND)
            card = EventPass(
                name=registrant.name,
                state=registrant.state,
                event_id=registrant.event_id,
            )
            photo_reference = registrant.photo_reference

        if photo_reference and self.photo_store is not None:
            card = EventPass(
                name=card.name,
                state=card.state,
                event_id=card.event_id,
                photo=self.photo_store.load(photo_reference),
            )
        content = self._renderer().render_event_pass(card)
        return RenderedDocument(filename=f"event_id_{card.event_id}.pdf", content=content)

    def render_certificate(self, email: str) -> RenderedDocument:
        """
        Render the attendance certificate of the registrant with ``email``.

        :raises NotFoundError: Unknown email.
        :raises ForbiddenError: Before the certificate release date.
        :raises RenderError: When the renderer fails.
        """
        with self.ro_uow() as uow:
            registrant = uow.registrants.get_by_email(email)
            if registrant is None:
                raise NotFoundError("Registrant", normalize_email(email), USER_NOT_FOUND)
            name = registrant.name

        if self.clock() < self.settings.certificate_release_date:
            raise ForbiddenError(
                f"Certificates available after {self.settings.certificate_release_label}"
            )
        content = self._renderer().render_certificate(name)
        return RenderedDocument(filename=f"certificate_{name}.pdf", content=content)

    def _renderer(self) -> ArtifactRenderer:
        if self.renderer is None:
            raise RuntimeError("WaitlistQueryService was built without a renderer.")
        return self.renderer
