from __future__ import annotations

import threading
from typing import Protocol
from uuid import uuid4

from waitlist.services._shared.errors import PhotoRejected


class PhotoStore(Protocol):
    """
    Keeps registrant photos and hands back opaque references.

    ``save`` validates the upload and raises :class:`PhotoRejected` for
    anything that is not an acceptable image. ``load`` returns ``None`` for an
    unknown reference and raises :class:`UpstreamError` when the backing
    storage cannot be read.
    """

    def save(self, filename: str, content: bytes) -> str: ...
    def load(self, reference: str) -> bytes | None: ...
    def discard(self, reference: str) -> None: ...


class InMemoryPhotoStore(PhotoStore):
    """Dictionary-backed photo store for unit tests."""

    def __init__(self, *, max_bytes: int = 5 * 1024 * 1024) -> None:
        self.max_bytes = max_bytes
        self._items: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def save(self, filename: str, content: bytes) -> str:
        if not content:
            raise PhotoRejected("Image file is empty.")
        if len(content) > self.max_bytes:
            raise PhotoRejected("Image file too large. Maximum size is 5 MB.")
        reference = f"{uuid4().hex}-{filename}"
        with self._lock:
            self._items[reference] = content
        return reference

    def load(self, reference: str) -> bytes | None:
        return self._items.get(reference)

    def discard(self, reference: str) -> None:
        with self._lock:
            self._items.pop(reference, None)

    def __len__(self) -> int:
        return len(self._items)
