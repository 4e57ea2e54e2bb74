"""Application export – JsonAssembler."""
from __future__ import annotations

import json
from typing import Any

from dt_export.application.export.request import ExportRequest
from dt_export.application.export.result import Artifact, RunSummary

__all__ = ["JsonAssembler"]


class JsonAssembler:
    """Collects ``key -> value`` rows and serialises them as one JSON array."""

    def __init__(self, request: ExportRequest, *, indent: int | None = 2) -> None:
        self._request = request
        self._indent = indent
        self._rows: list[dict[str, Any]] = []

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def add_row(self, row: dict[str, Any]) -> None:
        self._rows.append(row)

    def finalize(self, summary: RunSummary) -> Artifact:
        payload = json.dumps(self._rows, default=str, ensure_ascii=False, indent=self._indent)
        return Artifact(
            file_name=self._request.output_file_name,
            media_type=self._request.format.media_type,
            content=payload.encode("utf-8"),
            row_count=len(self._rows),
            truncated=summary.truncated,
        )

    def discard(self) -> None:
        self._rows = []
