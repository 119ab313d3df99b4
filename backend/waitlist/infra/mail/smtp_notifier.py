"""SMTP implementation of :class:`Notifier`."""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Mapping
from email.message import EmailMessage
from typing import Any

from waitlist.services._shared.errors import DeliveryError
from waitlist.services._shared.ports.notifier import Notifier, OutgoingMail

log = logging.getLogger(__name__)


def build_message(mail: OutgoingMail, *, sender: str) -> EmailMessage:
    """Convert an :class:`OutgoingMail` into a MIME message."""
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = mail.to
    msg["Subject"] = mail.subject
    msg.set_content(mail.body)
    for attachment in mail.attachments:
        maintype, _, subtype = attachment.mimetype.partition("/")
        msg.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return msg


class SmtpNotifier(Notifier):
    """
    Sends one message per SMTP connection.

    :param host: SMTP server.
    :param port: SMTP port (587 for STARTTLS).
    :param username: Login; authentication is skipped when empty.
    :param password: Password or app password.
    :param sender: ``From`` address; defaults to ``username``.
    :param use_tls: Upgrade the connection with STARTTLS.
    :param timeout: Socket timeout in seconds.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 20.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SmtpNotifier:
        return cls(
            host=config["MAIL_SERVER"],
            port=int(config.get("MAIL_PORT", 587)),
            username=config.get("MAIL_USERNAME", ""),
            password=config.get("MAIL_PASSWORD", ""),
            sender=config.get("MAIL_DEFAULT_SENDER") or None,
            use_tls=bool(config.get("MAIL_USE_TLS", True)),
            timeout=float(config.get("MAIL_TIMEOUT", 20)),
        )

    def send(self, mail: OutgoingMail) -> None:
        msg = build_message(mail, sender=self.sender)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"SMTP delivery failed: {exc}") from exc
        log.info("mail.sent subject=%s", mail.subject)
