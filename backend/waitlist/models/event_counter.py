"""Atomic counters backing sequential identifier allocation."""

from __future__ import annotations

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from waitlist.core.extensions import db

from .base import ReprMixin

EVENT_ID_COUNTER = "event_id"


class EventIdCounter(ReprMixin, db.Model):
    """
    Named monotonically increasing counter.

    A single row per counter name; allocation is ``UPDATE value = value + 1``
    followed by a read inside the same transaction, so the row lock (or the
    SQLite write lock) serialises concurrent allocators.
    """

    __tablename__ = "event_id_counters"
    __repr_key__ = "name"

    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
