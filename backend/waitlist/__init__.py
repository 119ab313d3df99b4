"""Event waitlist registration backend.

Expose the application factory at package level so callers can
``from waitlist import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
