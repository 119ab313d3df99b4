"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .admin import bp as admin_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .waitlist import bp as waitlist_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1/health
    (waitlist_bp, ""),  # -> /api/v1/waitlist, /api/v1/event-id-pdf, ...
    (admin_bp, "/admin"),  # -> /api/v1/admin/send-certificates
]
