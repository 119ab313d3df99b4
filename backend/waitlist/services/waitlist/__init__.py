"""Read paths over the registrant ledger."""

from .dto import RenderedDocument
from .service import WaitlistQueryService

__all__ = ["WaitlistQueryService", "RenderedDocument"]
