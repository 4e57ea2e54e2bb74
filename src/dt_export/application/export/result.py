"""Application export – ExportState, Artifact, RunSummary and ExportResult."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from dt_export.application.export.request import ExportFormat

__all__ = ["Artifact", "ExportResult", "ExportState", "RunSummary"]


class ExportState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.COMPLETED, ExportState.CANCELLED, ExportState.FAILED)


@dataclass(frozen=True)
class RunSummary:
    """What the retrieval loop observed; drives artifact decorations."""

    processed: int
    truncated: bool
    total_estimate: int | None
    generated_at: datetime
    pages_requested: int = 0


@dataclass(frozen=True)
class Artifact:
    """A finished, deliverable export."""

    file_name: str
    media_type: str
    content: bytes
    row_count: int
    truncated: bool = False
    is_fallback: bool = False

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of :meth:`ExportService.export`.

    ``artifact`` is ``None`` for cancelled runs and for failed runs of formats
    without a fallback; a failed csv run carries the reduced fallback artifact.
    """

    state: ExportState
    format: ExportFormat
    artifact: Artifact | None
    processed: int
    truncated: bool = False
    message: str = ""
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.state is ExportState.COMPLETED

    @property
    def empty(self) -> bool:
        return self.ok and self.processed == 0
