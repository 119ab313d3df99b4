"""Service layer public API.

This package exposes the building blocks of the service layer so that callers
can import from :mod:`waitlist.services` without knowing internal structure.

Re-exports
----------
- Base primitives: :class:`BaseService`, :class:`WaitlistSettings`
- Admission workflow: :class:`AdmissionService` and its DTOs
- Read paths: :class:`WaitlistQueryService`, :class:`RenderedDocument`
- Certificate sweep: :class:`CertificateSweepService`, :class:`SweepSummary`
- Code pools: :class:`CodeSeedService`
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.settings import WaitlistSettings
from .admission import (
    AdmissionIn,
    AdmissionOut,
    AdmissionService,
    AdmissionState,
    DeliveryOutcome,
    DeliveryStatus,
    PhotoUpload,
    RegistrantPublicOut,
)
from .certificates import CertificateSweepService, SweepSummary
from .codes import CodeSeedService
from .waitlist import RenderedDocument, WaitlistQueryService

__all__ = [
    # Base
    "BaseService",
    "WaitlistSettings",
    # Admission
    "AdmissionService",
    "AdmissionIn",
    "AdmissionOut",
    "AdmissionState",
    "DeliveryOutcome",
    "DeliveryStatus",
    "PhotoUpload",
    "RegistrantPublicOut",
    # Reads
    "WaitlistQueryService",
    "RenderedDocument",
    # Sweep
    "CertificateSweepService",
    "SweepSummary",
    # Codes
    "CodeSeedService",
]
