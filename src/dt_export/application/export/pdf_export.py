"""Application export – PdfAssembler and the reportlab document engine."""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A3, A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from dt_export.application.export.customization import CustomText, Orientation, PageLayout
from dt_export.application.export.request import ExportRequest
from dt_export.application.export.result import Artifact, RunSummary

__all__ = ["DocumentEngine", "PageDecorations", "PdfAssembler", "ReportLabDocumentEngine"]

_PAGE_SIZES: dict[str, tuple[float, float]] = {
    "a3": A3,
    "a4": A4,
    "a5": A5,
    "letter": LETTER,
    "legal": LEGAL,
}


@dataclass(frozen=True)
class PageDecorations:
    """Per-document text and layout computed from run metadata."""

    title: str = ""
    subtitle: str = ""
    record_count: int = 0
    show_page_numbers: bool = False
    note: str = ""
    elements: tuple[CustomText, ...] = ()
    layout: PageLayout = PageLayout()

    def footer_text(self, page: int, pages: int) -> str:
        return f"Page {page} of {pages} ({self.record_count} records)"


class DocumentEngine(Protocol):
    """Port: lays out a paginated document and returns the finished bytes.

    Receives the header labels in column order and one ``label -> value``
    mapping per row.
    """

    def render(
        self,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, Any]],
        decorations: PageDecorations,
    ) -> bytes: ...


def page_size(layout: PageLayout) -> tuple[float, float]:
    size = _PAGE_SIZES[layout.page_format]
    return landscape(size) if layout.orientation is Orientation.LANDSCAPE else portrait(size)


def _baseline(element: CustomText, height: float) -> float:
    """Baseline in canvas coordinates so the text stays inside its band."""
    _, y = element.anchor(0, height)
    vertical = element.position.vertical
    if vertical == "bottom":
        return height - y
    if vertical == "center":
        return height - y - element.font_size / 2
    return height - y - element.font_size


def _decorated_canvas(decorations: PageDecorations) -> type[canvas.Canvas]:
    """Canvas class that defers page output until the page count is known."""

    class _DecoratedCanvas(canvas.Canvas):
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            super().__init__(*args, **kwargs)
            self._saved_page_states: list[dict[str, Any]] = []

        def showPage(self) -> None:  # noqa: N802
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self) -> None:
            page_count = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                for element in decorations.elements:
                    if element.on_page(self._pageNumber):
                        self._draw_element(element)
                if decorations.show_page_numbers:
                    self._draw_footer(decorations.footer_text(self._pageNumber, page_count))
                super().showPage()
            super().save()

        def _draw_element(self, element: CustomText) -> None:
            width, height = self._pagesize
            x, _ = element.anchor(width, height)
            y = _baseline(element, height)
            self.saveState()
            self.setFont(element.font_name, element.font_size)
            self.setFillColor(colors.HexColor(element.color))
            if element.position.align == "center":
                self.drawCentredString(x, y, element.text)
            elif element.position.align == "right":
                self.drawRightString(x, y, element.text)
            else:
                self.drawString(x, y, element.text)
            self.restoreState()

        def _draw_footer(self, text: str) -> None:
            width = self._pagesize[0]
            self.saveState()
            self.setFont("Helvetica", 8)
            self.setFillColor(colors.grey)
            self.drawCentredString(width / 2, 0.4 * inch, text)
            self.restoreState()

    return _DecoratedCanvas


class ReportLabDocumentEngine:
    """Table document with a repeating, coloured header row."""

    def __init__(self, *, font_size: int = 8) -> None:
        styles = getSampleStyleSheet()
        self._title_style = styles["Title"]
        self._meta_style = ParagraphStyle("ExportMeta", parent=styles["Normal"], fontSize=9, textColor=colors.grey)
        self._cell_style = ParagraphStyle("ExportCell", parent=styles["Normal"], fontSize=font_size, leading=font_size + 2)

    def render(
        self,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, Any]],
        decorations: PageDecorations,
    ) -> bytes:
        layout = decorations.layout
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=page_size(layout),
            leftMargin=0.5 * inch,
            rightMargin=0.5 * inch,
            topMargin=0.6 * inch,
            bottomMargin=0.7 * inch,
            title=decorations.title,
        )
        head_style = ParagraphStyle(
            "ExportHead",
            parent=self._cell_style,
            fontName="Helvetica-Bold",
            textColor=colors.HexColor(layout.header_text),
        )

        story: list[Any] = []
        if decorations.title:
            story.append(Paragraph(escape(decorations.title), self._title_style))
        if decorations.subtitle:
            story.append(Paragraph(escape(decorations.subtitle), self._meta_style))
        if story:
            story.append(Spacer(1, 12))

        data = [[Paragraph(escape(str(h)), head_style) for h in headers]]
        for row in rows:
            cells = []
            for label in headers:
                value = row.get(label)
                cells.append(Paragraph(escape("" if value is None else str(value)), self._cell_style))
            data.append(cells)
        col_width = doc.width / max(len(headers), 1)
        table = Table(data, colWidths=[col_width] * len(headers), repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(layout.header_fill)),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f5f5f5")]),
                ]
            )
        )
        story.append(table)

        if decorations.note:
            story.append(Spacer(1, 8))
            story.append(Paragraph(escape(decorations.note), self._meta_style))

        doc.build(story, canvasmaker=_decorated_canvas(decorations))
        return buffer.getvalue()


class PdfAssembler:
    """Collects body rows and hands them, with decorations, to a :class:`DocumentEngine`."""

    def __init__(self, request: ExportRequest, *, engine: DocumentEngine | None = None) -> None:
        self._request = request
        self._labels = [c.label for c in request.visible_columns]
        self._engine = engine or ReportLabDocumentEngine()
        self._rows: list[Mapping[str, Any]] = []

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def add_row(self, row: Mapping[str, Any]) -> None:
        self._rows.append(row)

    def decorations(self, summary: RunSummary) -> PageDecorations:
        query = self._request.query
        subtitle = f"Search: {query.search}" if query.search else ""
        if not self._rows:
            note = "No records to export."
        elif summary.truncated:
            note = f"Export truncated: only the first {summary.processed} records are included."
        else:
            note = ""
        return PageDecorations(
            title=self._request.title,
            subtitle=subtitle,
            record_count=summary.processed,
            show_page_numbers=self._request.footer,
            note=note,
            elements=self._request.elements,
            layout=self._request.layout,
        )

    def finalize(self, summary: RunSummary) -> Artifact:
        content = self._engine.render(self._labels, self._rows, self.decorations(summary))
        return Artifact(
            file_name=self._request.output_file_name,
            media_type=self._request.format.media_type,
            content=content,
            row_count=len(self._rows),
            truncated=summary.truncated,
        )

    def discard(self) -> None:
        self._rows = []
