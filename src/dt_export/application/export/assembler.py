"""Application export – ArtifactAssembler contract and per-format factory."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from dt_export.application.export.request import ExportFormat, ExportRequest
from dt_export.application.export.result import Artifact, RunSummary

if TYPE_CHECKING:
    from dt_export.application.export.excel_export import SpreadsheetEngine
    from dt_export.application.export.pdf_export import DocumentEngine

__all__ = ["ArtifactAssembler", "assembler_for"]


class ArtifactAssembler(Protocol):
    """Accepts transformed rows in order, then produces the finished artifact once.

    Every assembler is discarded when its session is reset, whether or not
    the run reached :meth:`finalize`.
    """

    @property
    def row_count(self) -> int: ...

    def add_row(self, row: Any) -> None: ...

    def finalize(self, summary: RunSummary) -> Artifact: ...

    def discard(self) -> None:
        """Release buffered output; safe to call more than once and after finalize."""


def assembler_for(
    request: ExportRequest,
    *,
    spreadsheet_engine: "SpreadsheetEngine | None" = None,
    document_engine: "DocumentEngine | None" = None,
) -> ArtifactAssembler:
    """Return a fresh assembler for ``request.format``."""
    fmt = request.format
    if fmt is ExportFormat.CSV:
        from dt_export.application.export.csv_export import CsvAssembler  # noqa: PLC0415
        return CsvAssembler(request)
    if fmt is ExportFormat.XLSX:
        from dt_export.application.export.excel_export import ExcelAssembler  # noqa: PLC0415
        return ExcelAssembler(request, engine=spreadsheet_engine)
    if fmt is ExportFormat.PDF:
        from dt_export.application.export.pdf_export import PdfAssembler  # noqa: PLC0415
        return PdfAssembler(request, engine=document_engine)
    if fmt is ExportFormat.PRINT:
        from dt_export.application.export.print_export import PrintAssembler  # noqa: PLC0415
        return PrintAssembler(request)
    if fmt is ExportFormat.JSON:
        from dt_export.application.export.json_export import JsonAssembler  # noqa: PLC0415
        return JsonAssembler(request)
    raise ValueError(f"Unsupported export format: {fmt!r}")
