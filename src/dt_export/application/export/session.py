"""Application export – ExportSession and Chunk."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dt_export.application.export.assembler import ArtifactAssembler
from dt_export.application.export.errors import CANCELLED_MESSAGE, InvalidStateTransitionError
from dt_export.application.export.request import ExportFormat, ExportRequest, Row
from dt_export.application.export.result import ExportState
from dt_export.kernel.time import Clock, SystemClock
from dt_export.resilience.cancellation import CancellationToken

__all__ = ["Chunk", "ExportSession"]

_TRANSITIONS: dict[ExportState, frozenset[ExportState]] = {
    ExportState.IDLE: frozenset({ExportState.RUNNING}),
    ExportState.RUNNING: frozenset(
        {ExportState.COMPLETED, ExportState.CANCELLED, ExportState.FAILED}
    ),
    ExportState.COMPLETED: frozenset(),
    ExportState.CANCELLED: frozenset(),
    ExportState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class Chunk:
    """One page of raw rows; lives for a single loop iteration."""

    page: int
    request_size: int
    rows: list[Row]

    @property
    def is_short(self) -> bool:
        return len(self.rows) < self.request_size


class ExportSession:
    """Mutable state of one export run.

    ``processed`` only grows while the session is active.  :meth:`reset`
    drops the partial artifact so nothing of a finished run is retained.
    """

    def __init__(
        self,
        request: ExportRequest,
        assembler: ArtifactAssembler,
        *,
        clock: Clock | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.request = request
        self.assembler: ArtifactAssembler | None = assembler
        self.token = CancellationToken(CANCELLED_MESSAGE)
        self.state = ExportState.IDLE
        self.active = False
        self.processed = 0
        self.total_estimate: int | None = None
        self.started_at: datetime | None = None
        self.truncated = False
        self._clock = clock or SystemClock()

    @property
    def format(self) -> ExportFormat:
        return self.request.format

    def begin(self) -> None:
        self.transition(ExportState.RUNNING)
        self.active = True
        self.started_at = self._clock.now()

    def record(self, rows: int) -> int:
        if rows < 0:
            raise ValueError("rows must be >= 0")
        self.processed += rows
        return self.processed

    def transition(self, to_state: ExportState) -> None:
        if to_state not in _TRANSITIONS[self.state]:
            raise InvalidStateTransitionError(self.state.value, to_state.value)
        self.state = to_state

    def finish(self, to_state: ExportState) -> None:
        self.transition(to_state)
        self.active = False

    def cancel(self) -> None:
        self.token.cancel()

    def reset(self) -> None:
        self.active = False
        if self.assembler is not None:
            self.assembler.discard()
            self.assembler = None

    def describe(self) -> dict[str, Any]:
        return {
            "export_id": self.id,
            "format": self.format.value,
            "state": self.state.value,
            "processed": self.processed,
            "total_estimate": self.total_estimate,
            "truncated": self.truncated,
        }
