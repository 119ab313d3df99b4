"""Code Store: persistence of unredeemed registration codes."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select

from waitlist.models.registration_code import CodePool, RegistrationCode
from waitlist.repositories.base import BaseRepository

log = logging.getLogger(__name__)


class RegistrationCodeRepository(BaseRepository[RegistrationCode]):
    """Persistence-only repository for :class:`RegistrationCode`.

    Membership checks and consumption are single statements against the
    table; a pool is never loaded into memory to test one code.
    """

    model = RegistrationCode

    def _filterable_fields(self):
        return {"pool": RegistrationCode.pool, "code": RegistrationCode.code}

    def _sortable_fields(self):
        return {"code": RegistrationCode.code, "created_at": RegistrationCode.created_at}

    # ---------------------------- Lookups ----------------------------

    def is_valid(self, pool: CodePool, code: str | None) -> bool:
        """Return ``True`` when ``code`` is currently redeemable in ``pool``.

        :param pool: Pool to look in.
        :param code: Submitted code; blank or ``None`` is never valid.
        """
        if not code or not code.strip():
            return False
        stmt = select(RegistrationCode.id).where(
            RegistrationCode.pool == pool,
            RegistrationCode.code == code.strip(),
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    def count_pool(self, pool: CodePool) -> int:
        """Number of unredeemed codes left in ``pool``."""
        return self.count(pool=pool)

    # ---------------------------- Mutations ----------------------------

    def consume(self, pool: CodePool, code: str) -> bool:
        """Remove ``code`` from ``pool``.

        The removal is one ``DELETE`` statement, so of several transactions
        consuming the same code at most one sees a deleted row; the others
        get ``False`` (after the winner commits, or immediately on engines
        that serialise writers).

        :returns: ``True`` when this call removed the code, ``False`` when it
            was already consumed or never existed.
        """
        stmt = (
            delete(RegistrationCode)
            .where(RegistrationCode.pool == pool, RegistrationCode.code == code.strip())
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def seed(self, pool: CodePool, codes: Iterable[str]) -> int:
        """Bulk-load ``codes`` into ``pool`` if, and only if, the pool is empty.

        Blank entries and duplicates are dropped. Codes already present in the
        other pool are skipped so a code never belongs to two pools.

        :returns: Number of inserted codes (``0`` when the pool was not empty).
        """
        if self.count_pool(pool) > 0:
            return 0

        unique: list[str] = []
        seen: set[str] = set()
        for raw in codes:
            code = (raw or "").strip()
            if code and code not in seen:
                seen.add(code)
                unique.append(code)
        if not unique:
            return 0

        taken = set(
            self.session.execute(
                select(RegistrationCode.code).where(RegistrationCode.code.in_(unique))
            ).scalars()
        )
        if taken:
            log.warning(
                "seed.codes_in_other_pool pool=%s skipped=%d", pool.value, len(taken)
            )

        fresh = [RegistrationCode(code=c, pool=pool) for c in unique if c not in taken]
        self.session.add_all(fresh)
        self.flush()
        return len(fresh)
