"""
waitlist.services._shared.ports
===============================

*Ports* (hexagonal interfaces) for the collaborators of the admission
workflow. Services depend on these protocols only; concrete adapters live
under ``waitlist.infra``.

Modules
-------
- :mod:`renderer`:
    :class:`~.ArtifactRenderer` builds the identity card and certificate PDFs.
- :mod:`notifier`:
    :class:`~.Notifier` delivers email with attachments.
- :mod:`photo_store`:
    :class:`~.PhotoStore` validates and keeps registrant photos.

Each port ships an in-memory double used by the unit tests.
"""

from __future__ import annotations

from .notifier import Attachment, InMemoryNotifier, Notifier, OutgoingMail
from .photo_store import InMemoryPhotoStore, PhotoStore
from .renderer import ArtifactRenderer, EventPass, StubRenderer

__all__ = [
    "ArtifactRenderer",
    "EventPass",
    "StubRenderer",
    "Notifier",
    "OutgoingMail",
    "Attachment",
    "InMemoryNotifier",
    "PhotoStore",
    "InMemoryPhotoStore",
]
