"""Repository package exposing persistence-layer access for the waitlist models."""

from __future__ import annotations

from waitlist.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from waitlist.repositories.registrant import RegistrantRepository
from waitlist.repositories.registration_code import RegistrationCodeRepository

__all__ = [
    # Base
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    # Domain
    "RegistrantRepository",
    "RegistrationCodeRepository",
]
