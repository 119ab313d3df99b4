"""Concrete adapters for the service-layer ports and their wiring.

``init_app`` builds one set of collaborators per application and stores it
under ``app.extensions["waitlist"]``; request handlers read it from there,
tests replace individual members with in-memory doubles.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from flask import Flask

from waitlist.services._shared.ports import ArtifactRenderer, Notifier, PhotoStore
from waitlist.services._shared.settings import Clock, WaitlistSettings, utc_now

EXTENSION_KEY = "waitlist"


@dataclass(slots=True)
class Collaborators:
    """Per-application service dependencies."""

    settings: WaitlistSettings
    renderer: ArtifactRenderer
    notifier: Notifier
    photo_store: PhotoStore
    clock: Clock = utc_now


def build_collaborators(config: Mapping[str, Any]) -> Collaborators:
    """Instantiate the production adapters from a Flask config mapping."""
    from waitlist.infra.mail import LogOnlyNotifier, SmtpNotifier
    from waitlist.infra.pdf import ReportLabRenderer
    from waitlist.infra.storage import LocalPhotoStore

    notifier: Notifier
    if config.get("MAIL_ENABLED", False):
        notifier = SmtpNotifier.from_config(config)
    else:
        notifier = LogOnlyNotifier()

    return Collaborators(
        settings=WaitlistSettings.from_mapping(config),
        renderer=ReportLabRenderer.from_config(config),
        notifier=notifier,
        photo_store=LocalPhotoStore(
            config.get("UPLOAD_FOLDER", "uploads"),
            max_bytes=int(config.get("MAX_PHOTO_BYTES", 5 * 1024 * 1024)),
        ),
    )


def init_app(app: Flask) -> None:
    app.extensions[EXTENSION_KEY] = build_collaborators(app.config)


def get_collaborators(app: Flask) -> Collaborators:
    return app.extensions[EXTENSION_KEY]
