"""Registrant Ledger: persisted registrants and the event-number counter."""

from __future__ import annotations

from sqlalchemy import func, select, update

from waitlist.models.event_counter import EVENT_ID_COUNTER, EventIdCounter
from waitlist.models.registrant import Registrant
from waitlist.repositories.base import BaseRepository


def _norm_email(value: str) -> str:
    return (value or "").strip().lower()


class RegistrantRepository(BaseRepository[Registrant]):
    """Persistence-only repository for :class:`Registrant`.

    Besides the usual lookups it owns the event-number counter, because the
    counter exists only to number registrants.
    """

    model = Registrant

    def _sortable_fields(self):
        return {
            "event_number": Registrant.event_number,
            "created_at": Registrant.created_at,
            "email": Registrant.email,
        }

    def _filterable_fields(self):
        return {
            "email": Registrant.email,
            "event_id": Registrant.event_id,
            "state": Registrant.state,
        }

    # ---------------------------- Lookups ----------------------------

    def get_by_email(self, email: str) -> Registrant | None:
        """Return the registrant with ``email`` (case/whitespace-insensitive)."""
        return self.find_one(email=_norm_email(email))

    def exists_by_email(self, email: str) -> bool:
        return self.exists(email=_norm_email(email))

    def get_by_event_id(self, event_id: str) -> Registrant | None:
        return self.find_one(event_id=(event_id or "").strip())

    def all_by_event_number(self) -> list[Registrant]:
        """Snapshot of every registrant ordered by ascending event number."""
        return self.list(sort=["event_number"])

    def max_event_number(self) -> int:
        """Highest event number in use, ``0`` for an empty ledger."""
        stmt = select(func.coalesce(func.max(Registrant.event_number), 0))
        return int(self.session.execute(stmt).scalar_one())

    # ---------------------------- Counter ----------------------------

    def next_event_number(self, counter: str = EVENT_ID_COUNTER) -> int:
        """Increment the named counter and return its new value.

        Must run inside the caller's write transaction: the ``UPDATE`` takes
        the row (or database) lock, which is held until commit/rollback, so no
        two committed transactions ever observe the same value.

        The counter row is created lazily from the current maximum event
        number. Two transactions creating it at the same time collide on the
        primary key and the loser raises ``IntegrityError``.

        :returns: Freshly allocated event number (``>= 1``).
        :raises sqlalchemy.exc.IntegrityError: On a counter-creation race.
        """
        stmt = (
            update(EventIdCounter)
            .where(EventIdCounter.name == counter)
            .values(value=EventIdCounter.value + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            value = self.max_event_number() + 1
            self.session.add(EventIdCounter(name=counter, value=value))
            self.flush()
            return value

        stmt_value = select(EventIdCounter.value).where(EventIdCounter.name == counter)
        return int(self.session.execute(stmt_value).scalar_one())
