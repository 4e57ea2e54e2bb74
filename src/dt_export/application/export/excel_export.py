"""Application export – ExcelAssembler and the openpyxl spreadsheet engine."""
from __future__ import annotations

import io
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Mapping, Protocol, Sequence

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from dt_export.application.export.customization import CustomText, Position
from dt_export.application.export.request import ExportRequest
from dt_export.application.export.result import Artifact, RunSummary

__all__ = ["ExcelAssembler", "OpenpyxlSpreadsheetEngine", "SpreadsheetEngine"]

_SHEET_TITLE_RE = re.compile(r"[\[\]:*?/\\]")
_SCALARS = (str, int, float, bool, Decimal, datetime, date, time)


class SpreadsheetEngine(Protocol):
    """Port: places rows into a workbook and returns the finished bytes.

    ``append`` receives one ``label -> value`` mapping per row and lays the
    values out in the header order given to ``open``.  ``discard`` releases
    an unfinished workbook; it is a no-op after ``close``.
    """

    def open(self, title: str, headers: Sequence[str], preamble: Sequence[CustomText] = ()) -> None: ...

    def append(self, row: Mapping[str, Any]) -> None: ...

    def append_text(self, element: CustomText) -> None: ...

    def close(self) -> bytes: ...

    def discard(self) -> None: ...


def _cell_value(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, _SCALARS):
        value = str(value)
    if isinstance(value, str):
        value = ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


class OpenpyxlSpreadsheetEngine:
    """Streams rows into a write-only ``openpyxl`` workbook (bounded memory).

    Write-only worksheets spool to a temporary file until saved, so every
    opened workbook must end in :meth:`close` or :meth:`discard`.
    """

    def __init__(self, *, max_column_width: int = 50) -> None:
        self._max_width = max_column_width
        self._wb: Workbook | None = None
        self._ws: Any = None
        self._headers: list[str] = []

    def open(self, title: str, headers: Sequence[str], preamble: Sequence[CustomText] = ()) -> None:
        self._wb = Workbook(write_only=True)
        self._headers = list(headers)
        sheet_title = _SHEET_TITLE_RE.sub("_", title)[:31] or "Sheet1"  # sheet name limit
        self._ws = self._wb.create_sheet(title=sheet_title)
        # Column widths must be set before the first row in write-only mode.
        for idx, header in enumerate(self._headers, start=1):
            width = min(max(len(header) + 2, 10), self._max_width)
            self._ws.column_dimensions[get_column_letter(idx)].width = width

        for element in preamble:
            self.append_text(element)

        bold = Font(bold=True)
        header_cells = []
        for header in self._headers:
            cell = WriteOnlyCell(self._ws, value=_cell_value(header))
            cell.font = bold
            header_cells.append(cell)
        self._ws.append(header_cells)

    def append(self, row: Mapping[str, Any]) -> None:
        if self._ws is None:
            raise RuntimeError("Spreadsheet engine used before open()")
        self._ws.append([_cell_value(row.get(header)) for header in self._headers])

    def append_text(self, element: CustomText) -> None:
        if self._ws is None:
            raise RuntimeError("Spreadsheet engine used before open()")
        cell = WriteOnlyCell(self._ws, value=_cell_value(element.text))
        cell.font = Font(
            size=element.font_size,
            bold=element.bold,
            italic=element.italic,
            color=element.color.lstrip("#"),
        )
        cell.alignment = Alignment(horizontal=element.position.align)
        self._ws.append([cell])

    def close(self) -> bytes:
        if self._wb is None:
            raise RuntimeError("Spreadsheet engine used before open()")
        buf = io.BytesIO()
        wb, self._wb, self._ws = self._wb, None, None
        wb.save(buf)
        return buf.getvalue()

    def discard(self) -> None:
        if self._wb is None:
            return
        wb, self._wb, self._ws = self._wb, None, None
        # Saving is the public way to flush and remove the sheet's spool file.
        wb.save(io.BytesIO())


class ExcelAssembler:
    """Supplies the header row and ordered rows to a :class:`SpreadsheetEngine`.

    Custom text in the top and centre bands goes above the header row, the
    bottom band below the data.
    """

    def __init__(self, request: ExportRequest, *, engine: SpreadsheetEngine | None = None) -> None:
        self._request = request
        self._labels = [c.label for c in request.visible_columns]
        self._engine = engine or OpenpyxlSpreadsheetEngine()
        self._trailer = [e for e in request.elements if e.position.vertical == "bottom"]
        preamble = [e for e in request.elements if e.position.vertical != "bottom"]
        self._engine.open(request.file_name, self._labels, preamble)
        self._rows = 0

    @property
    def row_count(self) -> int:
        return self._rows

    def add_row(self, row: Mapping[str, Any]) -> None:
        self._engine.append(row)
        self._rows += 1

    def finalize(self, summary: RunSummary) -> Artifact:
        if summary.truncated:
            self._engine.append_text(
                CustomText(
                    f"Export truncated: only the first {summary.processed} records are included.",
                    position=Position.BOTTOM_LEFT,
                    italic=True,
                    font_size=10,
                )
            )
        for element in self._trailer:
            self._engine.append_text(element)
        return Artifact(
            file_name=self._request.output_file_name,
            media_type=self._request.format.media_type,
            content=self._engine.close(),
            row_count=self._rows,
            truncated=summary.truncated,
        )

    def discard(self) -> None:
        self._engine.discard()
