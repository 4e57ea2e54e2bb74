"""Application export – CurrentPageFallback.

When a full export fails, a reduced artifact can still be offered from the
rows the caller currently has on screen.  No remote call is made.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable

from dt_export.application.export.assembler import assembler_for
from dt_export.application.export.request import ExportFormat, ExportRequest, Row
from dt_export.application.export.result import Artifact, RunSummary
from dt_export.application.export.transform import transformer_for
from dt_export.kernel.time import Clock, SystemClock

__all__ = ["FALLBACK_UNAVAILABLE", "FALLBACK_WARNING", "CurrentPageFallback"]

FALLBACK_WARNING = "Only current page data was exported due to an error with the full export."
FALLBACK_UNAVAILABLE = "Unable to export data. Please try again later."


class CurrentPageFallback:
    """Builds ``current-page-data-YYYY-MM-DD.<ext>`` from caller-supplied rows."""

    def __init__(
        self,
        formats: Iterable[ExportFormat | str] = (ExportFormat.CSV,),
        *,
        clock: Clock | None = None,
        **engines: Any,
    ) -> None:
        self._formats = frozenset(ExportFormat(f) for f in formats)
        self._clock = clock or SystemClock()
        self._engines = engines

    @property
    def formats(self) -> frozenset[ExportFormat]:
        return self._formats

    def supports(self, fmt: ExportFormat | str) -> bool:
        return ExportFormat(fmt) in self._formats

    def file_name(self) -> str:
        return f"current-page-data-{self._clock.today():%Y-%m-%d}"

    def build(self, request: ExportRequest, rows: Iterable[Row]) -> Artifact:
        reduced = dataclasses.replace(request, file_name=self.file_name())
        assembler = assembler_for(reduced, **self._engines)
        transformer = transformer_for(reduced.format, reduced.visible_columns)
        try:
            for row in rows:
                assembler.add_row(transformer(row))
            summary = RunSummary(
                processed=assembler.row_count,
                truncated=False,
                total_estimate=assembler.row_count,
                generated_at=self._clock.now(),
            )
            artifact = assembler.finalize(summary)
        finally:
            assembler.discard()
        return dataclasses.replace(artifact, is_fallback=True)
