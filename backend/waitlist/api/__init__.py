"""HTTP surface: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Register blueprints beneath a common version prefix.

    Parameters
    ----------
    app:
        Application instance receiving the blueprints.
    base_prefix:
        Version root such as ``"/api/v1"``.
    entries:
        ``(blueprint, relative_prefix)`` pairs. An empty relative prefix
        mounts the blueprint directly at the version root, which is how the
        waitlist routes keep their flat paths (``/waitlist``,
        ``/event-id-pdf/<id>``).
    """

    root = "/" + base_prefix.strip("/")
    for bp, rel_prefix in entries:
        rel = rel_prefix.strip("/")
        app.register_blueprint(bp, url_prefix=f"{root}/{rel}" if rel else root)


def init_app(app: Flask) -> None:
    """Register the available API versions on the Flask app."""

    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from waitlist.api.v1 import API_VERSION as V1
    from waitlist.api.v1 import REGISTRY as V1_REGISTRY

    register_blueprint_group(app, base_prefix=f"{api_base}/{V1}", entries=V1_REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
