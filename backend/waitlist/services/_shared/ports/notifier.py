from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol

from waitlist.services._shared.errors import DeliveryError


@dataclass(frozen=True, slots=True)
class Attachment:
    filename: str
    content: bytes
    mimetype: str = "application/pdf"


@dataclass(frozen=True, slots=True)
class OutgoingMail:
    """
    One email addressed to a single recipient.

    :ivar to: Recipient address.
    :ivar subject: Subject line.
    :ivar body: Plain-text body.
    :ivar attachments: Files attached to the message.
    """

    to: str
    subject: str
    body: str
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)


class Notifier(Protocol):
    """
    Delivers email to registrants.

    ``send`` returns once the transport accepted the message and raises
    :class:`DeliveryError` otherwise. Delivery is at-most-once from the
    caller's point of view: failures are reported, never retried here.
    """

    def send(self, mail: OutgoingMail) -> None: ...


class InMemoryNotifier(Notifier):
    """Thread-safe outbox used by tests and when mail is disabled."""

    def __init__(self, *, fail_for: set[str] | None = None) -> None:
        self.outbox: list[OutgoingMail] = []
        self.fail_for = {addr.lower() for addr in (fail_for or set())}
        self._lock = threading.Lock()

    def send(self, mail: OutgoingMail) -> None:
        if mail.to.lower() in self.fail_for:
            raise DeliveryError(f"delivery to {mail.to} refused")
        with self._lock:
            self.outbox.append(mail)

    def sent_to(self, address: str) -> list[OutgoingMail]:
        return [m for m in self.outbox if m.to.lower() == address.lower()]
