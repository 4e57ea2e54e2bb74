"""Application export – ProgressTracker."""
from __future__ import annotations

import math
from dataclasses import dataclass

from dt_export.kernel.time import Clock, SystemClock

__all__ = ["ProgressSnapshot", "ProgressTracker", "percentage"]


@dataclass(frozen=True)
class ProgressSnapshot:
    processed: int
    total: int
    percentage: int
    eta_seconds: float | None = None


def percentage(processed: int, total: int | None) -> int:
    """``processed / total`` as a whole percentage, rounded half up and clamped to [0, 100]."""
    if not total:
        return 0
    value = math.floor(processed / total * 100 + 0.5)
    return max(0, min(100, value))


class ProgressTracker:
    """Derives percentage and ETA from processed counts.

    Format agnostic: the denominator is whatever :meth:`start` was given,
    usually the count probe result or the run ceiling.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._started: float | None = None
        self._total = 0
        self._last: ProgressSnapshot | None = None

    @property
    def total(self) -> int:
        return self._total

    @property
    def last(self) -> ProgressSnapshot | None:
        return self._last

    def start(self, estimated_total: int) -> None:
        self._started = self._clock.monotonic()
        self._total = max(0, estimated_total)
        self._last = None

    def update(self, processed: int) -> ProgressSnapshot:
        if self._started is None:
            raise RuntimeError("ProgressTracker.update() called before start()")
        eta: float | None = None
        if processed > 0:
            elapsed = self._clock.monotonic() - self._started
            eta = max(0.0, elapsed / processed * (self._total - processed))
        snapshot = ProgressSnapshot(
            processed=processed,
            total=self._total,
            percentage=percentage(processed, self._total),
            eta_seconds=eta,
        )
        self._last = snapshot
        return snapshot
