from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from waitlist.services._shared.errors import RenderError


@dataclass(frozen=True, slots=True)
class EventPass:
    """
    Data printed on a registrant's identity card.

    :ivar name: Registrant name.
    :ivar state: Registrant state.
    :ivar event_id: Issued event identifier (also encoded as a barcode).
    :ivar photo: Raw image bytes, or ``None`` when no photo is available.
    """

    name: str
    state: str
    event_id: str
    photo: bytes | None = None


class ArtifactRenderer(Protocol):
    """
    Produces the PDF documents handed to registrants.

    Implementations raise :class:`RenderError` when a document cannot be built.
    """

    def render_event_pass(self, card: EventPass) -> bytes: ...
    def render_certificate(self, name: str) -> bytes: ...


class StubRenderer(ArtifactRenderer):
    """Deterministic renderer for unit tests; can be told to fail."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.rendered: list[tuple[str, str]] = []

    def render_event_pass(self, card: EventPass) -> bytes:
        if self.fail:
            raise RenderError("stub renderer failure")
        self.rendered.append(("event_pass", card.event_id))
        return f"%PDF-stub event-pass {card.event_id}".encode()

    def render_certificate(self, name: str) -> bytes:
        if self.fail:
            raise RenderError("stub renderer failure")
        self.rendered.append(("certificate", name))
        return f"%PDF-stub certificate {name.upper()}".encode()
