"""
CodeSeedService
===============

One-time bulk load of the registration code pools. Running it again on a
populated pool changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError

from waitlist.models import CodePool
from waitlist.services._shared.base import BaseService

log = logging.getLogger(__name__)


class CodeSeedService(BaseService):
    """Seeds and reports on the code pools."""

    def seed_pool(self, pool: CodePool, codes: Iterable[str]) -> int:
        """
        Load ``codes`` into ``pool`` unless the pool already holds codes.

        Two processes seeding the same empty pool at once collide on the
        unique code constraint; the loser rolls back and reports ``0``.

        :returns: Number of inserted codes.
        """
        try:
            with self.rw_uow() as uow:
                inserted = uow.registration_codes.seed(pool, codes)
        except IntegrityError:
            log.warning("seed.concurrent_seed pool=%s", pool.value, extra={"pool": pool.value})
            return 0
        log.info("seed.pool", extra={"pool": pool.value, "inserted": inserted})
        return inserted

    def seed(
        self, *, standard: Iterable[str], late: Iterable[str] = ()
    ) -> dict[CodePool, int]:
        """Seed both pools; standard first so it wins codes listed in both."""
        return {
            CodePool.STANDARD: self.seed_pool(CodePool.STANDARD, standard),
            CodePool.LATE: self.seed_pool(CodePool.LATE, late),
        }

    def remaining(self) -> dict[CodePool, int]:
        """Unredeemed codes left per pool."""
        with self.ro_uow() as uow:
            return {pool: uow.registration_codes.count_pool(pool) for pool in CodePool}
