"""Best-effort certificate delivery to every registrant."""

from .service import CertificateSweepService, SweepSummary

__all__ = ["CertificateSweepService", "SweepSummary"]
