"""Single-use registration codes grouped in standard and late pools."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from waitlist.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class CodePool(str, Enum):
    """Pool a registration code belongs to."""

    STANDARD = "standard"
    LATE = "late"


class RegistrationCode(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    An unredeemed one-time registration code.

    Rows exist only while a code is redeemable: consuming a code deletes its
    row, so a consumed code can never validate again.

    Fields
    ------
    code : str
        The secret string handed to a member. Unique across both pools.
    pool : CodePool
        ``STANDARD`` gates every admission; ``LATE`` is additionally required
        once the late-registration period has started.
    """

    __tablename__ = "registration_codes"
    __repr_key__ = "code"

    code: Mapped[str] = mapped_column(String(64), nullable=False)
    pool: Mapped[CodePool] = mapped_column(
        SAEnum(CodePool, name="code_pool", native_enum=False, length=16),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("code", name="uq_registration_codes_code"),
        Index("ix_registration_codes_pool_code", "pool", "code"),
    )

    @validates("code")
    def _normalize_code(self, key: str, value: str) -> str:
        """
        Strip surrounding whitespace and reject empty codes.

        :param key: Field name (``code``).
        :param value: Raw code.
        :returns: Trimmed code.
        :raises ValueError: If the code is blank.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Registration code is required.")
        return value.strip()
