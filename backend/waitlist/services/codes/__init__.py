"""Registration code pools: seeding and inspection."""

from .service import CodeSeedService

__all__ = ["CodeSeedService"]
