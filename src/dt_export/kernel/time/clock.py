"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

import time
from datetime import UTC, date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock so progress estimates are deterministic in tests."""

    def now(self) -> datetime: ...
    def today(self) -> date: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock: wall time from ``datetime.now(UTC)``, elapsed time from
    :func:`time.monotonic`."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return datetime.now(UTC).date()

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    ``monotonic()`` starts at ``0.0`` and only moves when :meth:`advance` is
    called, together with the wall time.
    """

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed
        self._elapsed = 0.0

    def now(self) -> datetime:
        return self._fixed

    def today(self) -> date:
        return self._fixed.date()

    def monotonic(self) -> float:
        return self._elapsed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        delta = timedelta(**kwargs)
        self._fixed += delta
        self._elapsed += delta.total_seconds()


__all__ = ["Clock", "FrozenClock", "SystemClock"]
