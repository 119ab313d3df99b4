"""DTOs for WaitlistQueryService."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    """
    A PDF produced on demand.

    :param filename: Suggested download name.
    :type filename: str
    :param content: PDF bytes.
    :type content: bytes
    :param mimetype: Media type of ``content``.
    :type mimetype: str
    """

    filename: str
    content: bytes
    mimetype: str = "application/pdf"
