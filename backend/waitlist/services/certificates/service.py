"""
CertificateSweepService
=======================

Sequentially renders and emails a certificate to every registrant. One
failing registrant is logged and counted; the loop always runs to the end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from waitlist.services._shared.base import BaseService
from waitlist.services._shared.errors import UpstreamError
from waitlist.services._shared.mail import certificate_mail
from waitlist.services._shared.ports import ArtifactRenderer, Notifier
from waitlist.services._shared.settings import Clock, WaitlistSettings

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SweepSummary:
    """
    Outcome of a sweep.

    :ivar total: Registrants in the snapshot.
    :ivar sent: Certificates handed to the mail transport.
    :ivar failed: Registrants whose certificate was not sent.
    :ivar failures: Email addresses of the failed registrants.
    """

    total: int = 0
    sent: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)


class CertificateSweepService(BaseService):
    """Administrator-triggered bulk certificate delivery."""

    def __init__(
        self,
        *,
        renderer: ArtifactRenderer,
        notifier: Notifier,
        settings: WaitlistSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(settings=settings, clock=clock)
        self.renderer = renderer
        self.notifier = notifier

    def send_certificates(self) -> SweepSummary:
        """
        Email a certificate to each registrant in event-number order.

        The registrant list is a snapshot taken before the first send;
        registrants admitted while the sweep runs are not included.

        :returns: Counts of sent and failed deliveries.
        :rtype: :class:`SweepSummary`
        """
        with self.ro_uow() as uow:
            recipients = [
                (r.name, r.email) for r in uow.registrants.all_by_event_number()
            ]

        summary = SweepSummary(total=len(recipients))
        for name, email in recipients:
            try:
                pdf = self.renderer.render_certificate(name)
                self.notifier.send(
                    certificate_mail(self.settings, name=name, email=email, pdf=pdf)
                )
            except UpstreamError:
                summary.failed += 1
                summary.failures.append(email)
                log.error("certificates.delivery_failed", exc_info=True)
                continue
            summary.sent += 1

        log.info(
            "certificates.sweep_finished",
            extra={"total": summary.total, "sent": summary.sent, "failed": summary.failed},
        )
        return summary
