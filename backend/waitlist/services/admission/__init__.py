"""Admission workflow: code validation, identifier allocation and delivery."""

from .dto import (
    AdmissionIn,
    AdmissionOut,
    AdmissionState,
    DeliveryOutcome,
    DeliveryStatus,
    PhotoUpload,
    RegistrantPublicOut,
)
from .service import AdmissionService

__all__ = [
    "AdmissionService",
    "AdmissionIn",
    "AdmissionOut",
    "AdmissionState",
    "DeliveryOutcome",
    "DeliveryStatus",
    "PhotoUpload",
    "RegistrantPublicOut",
]
