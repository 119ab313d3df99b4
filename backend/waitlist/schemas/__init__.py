"""Convenience exports for application schemas."""

from __future__ import annotations

from .waitlist import (
    AdmissionResponseSchema,
    DeliverySchema,
    EventIdSchema,
    SweepSummarySchema,
    WaitlistCountSchema,
    WaitlistSubmissionSchema,
)

__all__ = [
    "WaitlistSubmissionSchema",
    "AdmissionResponseSchema",
    "DeliverySchema",
    "WaitlistCountSchema",
    "EventIdSchema",
    "SweepSummarySchema",
]
