"""Factory Boy factory for :class:`RegistrationCode`."""

from __future__ import annotations

import factory

from waitlist.models import CodePool, RegistrationCode

from . import BaseFactory


class RegistrationCodeFactory(BaseFactory):
    """Build an unredeemed standard-pool code."""

    class Meta:
        model = RegistrationCode

    code = factory.Sequence(lambda n: f"CODE{n:05d}")
    pool = CodePool.STANDARD

    class Params:
        late = factory.Trait(
            pool=CodePool.LATE,
            code=factory.Sequence(lambda n: f"LATE{n:05d}"),
        )
