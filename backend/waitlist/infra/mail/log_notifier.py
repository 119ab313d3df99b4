"""Notifier that only logs; used when ``MAIL_ENABLED`` is off."""

from __future__ import annotations

import logging

from waitlist.services._shared.ports.notifier import Notifier, OutgoingMail

log = logging.getLogger(__name__)


class LogOnlyNotifier(Notifier):
    def send(self, mail: OutgoingMail) -> None:
        log.info(
            "mail.suppressed subject=%s attachments=%s",
            mail.subject,
            [a.filename for a in mail.attachments],
        )
