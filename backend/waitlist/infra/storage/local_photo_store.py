"""Filesystem photo store with Pillow-based validation."""

from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from uuid import uuid4

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from waitlist.services._shared.errors import PhotoRejected, UpstreamError
from waitlist.services._shared.ports.photo_store import PhotoStore

log = logging.getLogger(__name__)

ALLOWED_FORMATS = frozenset({"JPEG", "PNG", "GIF", "WEBP", "BMP"})


def validate_image(content: bytes, *, max_bytes: int) -> str:
    """
    Check that ``content`` is a decodable image of an allowed format.

    :returns: Pillow format name (``"JPEG"``, ``"PNG"``...).
    :raises PhotoRejected: Empty, oversized, undecodable or disallowed input.
    """
    if not content:
        raise PhotoRejected("Image file is empty.")
    if len(content) > max_bytes:
        raise PhotoRejected(
            f"Image file too large. Maximum size is {max_bytes // (1024 * 1024)} MB."
        )
    try:
        with Image.open(io.BytesIO(content)) as image:
            image.verify()
            fmt = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as exc:
        raise PhotoRejected("Only image files are allowed.") from exc
    if fmt not in ALLOWED_FORMATS:
        raise PhotoRejected(f"Unsupported image format: {fmt}")
    return fmt


class LocalPhotoStore(PhotoStore):
    """
    Stores photos under ``root`` as ``<millis>-<hex>-<secure name>``.

    References are bare file names; anything that would resolve outside
    ``root`` is treated as unknown.
    """

    def __init__(self, root: str | Path, *, max_bytes: int = 5 * 1024 * 1024) -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes

    def save(self, filename: str, content: bytes) -> str:
        validate_image(content, max_bytes=self.max_bytes)
        safe_name = secure_filename(filename or "") or "photo"
        reference = f"{int(time.time() * 1000)}-{uuid4().hex[:8]}-{safe_name}"
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / reference).write_bytes(content)
        log.debug("photo.saved reference=%s", reference)
        return reference

    def load(self, reference: str) -> bytes | None:
        path = self._path(reference)
        if path is None or not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise UpstreamError(f"Could not read stored photo {reference!r}.") from exc

    def discard(self, reference: str) -> None:
        path = self._path(reference)
        if path is not None:
            path.unlink(missing_ok=True)

    def _path(self, reference: str) -> Path | None:
        if not reference or Path(reference).name != reference:
            return None
        return self.root / reference
