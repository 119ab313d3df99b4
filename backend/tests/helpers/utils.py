"""Tiny helpers shared across test modules."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

#: Before the late-registration cutoff and the certificate release.
EARLY = datetime(2025, 6, 15, 9, 0, tzinfo=timezone.utc)


@contextmanager
def not_raises(exception: type[BaseException]):
    """Context manager asserting that an exception is *not* raised.

    Parameters
    ----------
    exception: type[BaseException]
        Exception type that should not be raised within the context.
    """
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Did raise {exception}: {exc}") from exc


class FrozenClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


class StepMonotonic:
    """Monotonic clock advancing ``step`` seconds on every read."""

    def __init__(self, step: float = 0.0, start: float = 1000.0) -> None:
        self.step = step
        self.value = start

    def __call__(self) -> float:
        current = self.value
        self.value += self.step
        return current

    def jump(self, seconds: float) -> None:
        self.value += seconds


def tiny_png() -> bytes:
    """Return a valid 2x2 PNG encoded with Pillow."""
    import io

    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (2, 2), color=(0, 100, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


def plus_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)
