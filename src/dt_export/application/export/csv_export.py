"""Application export – CsvAssembler."""
from __future__ import annotations

import io
from typing import Sequence

from dt_export.application.export.request import ExportRequest
from dt_export.application.export.result import Artifact, RunSummary
from dt_export.application.export.transform import escape_delimited

__all__ = ["CsvAssembler", "LINE_TERMINATOR"]

LINE_TERMINATOR = "\r\n"


class CsvAssembler:
    """Appends already-escaped cells to an in-memory text buffer.

    The header line is written once, at construction, from the column labels.
    """

    def __init__(self, request: ExportRequest, *, delimiter: str = ",") -> None:
        self._request = request
        self._delimiter = delimiter
        self._buf = io.StringIO()
        self._rows = 0
        if request.bom:
            self._buf.write("\ufeff")  # BOM for Excel compatibility
        self._write([escape_delimited(c.label) for c in request.visible_columns])

    @property
    def row_count(self) -> int:
        return self._rows

    def add_row(self, row: Sequence[str]) -> None:
        self._write(row)
        self._rows += 1

    def _write(self, cells: Sequence[str]) -> None:
        # Cells arrive quoted by escape_delimited; a csv.writer would quote them again.
        self._buf.write(self._delimiter.join(cells))
        self._buf.write(LINE_TERMINATOR)

    def finalize(self, summary: RunSummary) -> Artifact:
        return Artifact(
            file_name=self._request.output_file_name,
            media_type=self._request.format.media_type,
            content=self._buf.getvalue().encode("utf-8"),
            row_count=self._rows,
            truncated=summary.truncated,
        )

    def discard(self) -> None:
        self._buf.close()
