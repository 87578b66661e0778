"""
Clock abstraction
Injected into every time-validating factory so tests can pin "now"
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current UTC time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class SystemClock:
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Controllable clock for deterministic tests and replays.

    Attributes:
        current: The instant returned by ``now()``
    """

    def __init__(self, current: datetime) -> None:
        ensure_aware(current, "current")
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta

    def set(self, current: datetime) -> None:
        ensure_aware(current, "current")
        self.current = current


def ensure_aware(value: datetime, name: str) -> datetime:
    """Reject naive datetimes; the core only compares UTC-aware instants."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (use UTC)")
    return value
