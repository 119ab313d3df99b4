"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class CreatedAtMixin:
    """Provide a ``created_at`` timestamp column.

    Waitlist rows are write-once, so there is no ``updated_at`` companion.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp. Services pass the admission clock value;
        the database default covers rows inserted by seeds and migrations.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class PKMixin:
    """Expose an integer surrogate primary key column named ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and natural key.

    Subclasses set ``__repr_key__`` to the attribute that identifies a row for
    humans (``event_id``, ``code``); ``id`` is used otherwise.
    """

    __repr_key__ = "id"

    def __repr__(self) -> str:
        """Return a short and useful string representation.

        :returns: Debug-friendly ``<ClassName key=...>``.
        :rtype: str
        """
        cls = self.__class__.__name__
        key = self.__repr_key__
        return f"<{cls} {key}={getattr(self, key, None)}>"
