"""Unit tests for the per-format artifact assemblers."""
from __future__ import annotations

import io
import json
import tempfile
from datetime import UTC, datetime

import openpyxl
import pytest

from dt_export.application.export import ColumnDef, ExportQuery, ExportRequest, RunSummary, assembler_for
from dt_export.application.export.csv_export import CsvAssembler
from dt_export.application.export.customization import CustomText, PageLayout, Position
from dt_export.application.export.excel_export import ExcelAssembler, OpenpyxlSpreadsheetEngine
from dt_export.application.export.json_export import JsonAssembler
from dt_export.application.export.pdf_export import (
    PageDecorations,
    PdfAssembler,
    ReportLabDocumentEngine,
    page_size,
)
from dt_export.application.export.print_export import PrintAssembler, element_html
from dt_export.application.export.transform import transformer_for

COLUMNS = (ColumnDef("id", "ID"), ColumnDef("name", "Name"))
ROWS = [{"id": 1, "name": "Alice"}, {"id": 2, "name": 'Bob "B"'}]
NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _request(fmt: str, **kwargs) -> ExportRequest:
    params = {"chunk_size": 10, "ceiling": 100, "file_name": "users", **kwargs}
    return ExportRequest(format=fmt, columns=COLUMNS, **params)


def _summary(processed: int, truncated: bool = False) -> RunSummary:
    return RunSummary(processed=processed, truncated=truncated, total_estimate=None, generated_at=NOW)


def _assemble(request: ExportRequest, rows=ROWS, truncated: bool = False, **engines):
    assembler = assembler_for(request, **engines)
    transformer = transformer_for(request.format, request.visible_columns)
    for row in rows:
        assembler.add_row(transformer(row))
    return assembler, assembler.finalize(_summary(len(rows), truncated))


class _RecordingDocumentEngine:
    def __init__(self) -> None:
        self.calls = []

    def render(self, headers, rows, decorations) -> bytes:
        self.calls.append((list(headers), [dict(r) for r in rows], decorations))
        return b"%PDF-fake"


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestAssemblerFor:
    @pytest.mark.parametrize(
        ("fmt", "cls"),
        [
            ("csv", CsvAssembler),
            ("xlsx", ExcelAssembler),
            ("pdf", PdfAssembler),
            ("print", PrintAssembler),
            ("json", JsonAssembler),
        ],
    )
    def test_dispatch(self, fmt: str, cls: type) -> None:
        assembler = assembler_for(_request(fmt))
        assert isinstance(assembler, cls)
        assembler.discard()


# ---------------------------------------------------------------------------
# csv
# ---------------------------------------------------------------------------


class TestCsvAssembler:
    def test_header_and_rows(self) -> None:
        assembler, artifact = _assemble(_request("csv"))
        text = artifact.content.decode("utf-8")
        assert text == '"ID","Name"\r\n"1","Alice"\r\n"2","Bob ""B"""\r\n'
        assert artifact.file_name == "users.csv"
        assert artifact.row_count == 2
        assert assembler.row_count == 2

    def test_header_only_when_empty(self) -> None:
        _, artifact = _assemble(_request("csv"), rows=[])
        assert artifact.content.decode("utf-8") == '"ID","Name"\r\n'
        assert artifact.row_count == 0

    def test_bom(self) -> None:
        _, artifact = _assemble(_request("csv", bom=True))
        assert artifact.content.startswith("\ufeff".encode("utf-8"))

    def test_truncated_flag_only_in_metadata(self) -> None:
        _, artifact = _assemble(_request("csv"), truncated=True)
        assert artifact.truncated
        assert "truncated" not in artifact.content.decode("utf-8").lower()


# ---------------------------------------------------------------------------
# json
# ---------------------------------------------------------------------------


class TestJsonAssembler:
    def test_payload(self) -> None:
        _, artifact = _assemble(_request("json"))
        assert json.loads(artifact.content) == [{"id": 1, "name": "Alice"}, {"id": 2, "name": 'Bob "B"'}]
        assert artifact.media_type == "application/json"

    def test_non_serialisable_values_stringified(self) -> None:
        _, artifact = _assemble(_request("json"), rows=[{"id": NOW, "name": "x"}])
        assert json.loads(artifact.content)[0]["id"] == str(NOW)


# ---------------------------------------------------------------------------
# xlsx
# ---------------------------------------------------------------------------


class TestExcelAssembler:
    def _sheet(self, content: bytes):
        wb = openpyxl.load_workbook(io.BytesIO(content))
        return wb.worksheets[0]

    def test_rows(self) -> None:
        _, artifact = _assemble(_request("xlsx"))
        ws = self._sheet(artifact.content)
        assert list(ws.iter_rows(values_only=True)) == [("ID", "Name"), (1, "Alice"), (2, 'Bob "B"')]
        assert ws.title == "users"
        assert artifact.file_name == "users.xlsx"

    def test_header_bold(self) -> None:
        _, artifact = _assemble(_request("xlsx"))
        ws = self._sheet(artifact.content)
        assert ws["A1"].font.bold

    def test_truncation_note(self) -> None:
        _, artifact = _assemble(_request("xlsx"), truncated=True)
        rows = list(self._sheet(artifact.content).iter_rows(values_only=True))
        assert rows[-1][0].startswith("Export truncated")

    def test_sheet_title_sanitised(self) -> None:
        _, artifact = _assemble(_request("xlsx", file_name="report: 2026/01 [all users of the platform]"))
        title = self._sheet(artifact.content).title
        assert len(title) <= 31
        assert not set(title) & set("[]:*?/\\")

    def test_illegal_characters_stripped(self) -> None:
        engine = OpenpyxlSpreadsheetEngine()
        engine.open("s", ["A"])
        engine.append({"A": "bad\x07value"})
        ws = self._sheet(engine.close())
        assert ws["A2"].value == "badvalue"

    def test_append_before_open(self) -> None:
        with pytest.raises(RuntimeError):
            OpenpyxlSpreadsheetEngine().append({"A": 1})


# ---------------------------------------------------------------------------
# pdf
# ---------------------------------------------------------------------------


class TestPdfAssembler:
    def test_hands_rows_and_decorations_to_engine(self) -> None:
        engine = _RecordingDocumentEngine()
        request = _request("pdf", title="Users", footer=True, query=ExportQuery(search="bo"))
        _, artifact = _assemble(request, document_engine=engine)
        headers, rows, decorations = engine.calls[0]
        assert headers == ["ID", "Name"]
        assert rows == [{"ID": 1, "Name": "Alice"}, {"ID": 2, "Name": 'Bob "B"'}]
        assert decorations.title == "Users"
        assert decorations.subtitle == "Search: bo"
        assert decorations.show_page_numbers
        assert decorations.record_count == 2
        assert artifact.content == b"%PDF-fake"
        assert artifact.file_name == "users.pdf"

    def test_empty_note(self) -> None:
        engine = _RecordingDocumentEngine()
        _assemble(_request("pdf"), rows=[], document_engine=engine)
        assert engine.calls[0][2].note == "No records to export."

    def test_truncated_note(self) -> None:
        engine = _RecordingDocumentEngine()
        _assemble(_request("pdf"), truncated=True, document_engine=engine)
        assert engine.calls[0][2].note.startswith("Export truncated")

    def test_footer_text(self) -> None:
        assert PageDecorations(record_count=120).footer_text(2, 5) == "Page 2 of 5 (120 records)"

    @pytest.mark.parametrize("footer", [True, False])
    def test_reportlab_renders_pdf(self, footer: bool) -> None:
        rows = [{"ID": i, "Name": f"Name {i}"} for i in range(120)]
        content = ReportLabDocumentEngine().render(
            ["ID", "Name"],
            rows,
            PageDecorations(title="Users", record_count=120, show_page_numbers=footer),
        )
        assert content.startswith(b"%PDF")

    def test_reportlab_renders_empty(self) -> None:
        content = ReportLabDocumentEngine().render(["ID"], [], PageDecorations(note="No records to export."))
        assert content.startswith(b"%PDF")


# ---------------------------------------------------------------------------
# print
# ---------------------------------------------------------------------------


class TestPrintAssembler:
    def test_document(self) -> None:
        _, artifact = _assemble(_request("print", title="Users & Roles"))
        html = artifact.content.decode("utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Users &amp; Roles</title>" in html
        assert "<th>ID</th><th>Name</th>" in html
        assert "<tr><td>2</td><td>Bob &quot;B&quot;</td></tr>" in html
        assert artifact.file_name == "users.html"
        assert artifact.media_type.startswith("text/html")

    def test_empty(self) -> None:
        _, artifact = _assemble(_request("print"), rows=[])
        assert "No records to export." in artifact.content.decode("utf-8")

    def test_footer_and_truncation(self) -> None:
        _, artifact = _assemble(_request("print", footer=True), truncated=True)
        html = artifact.content.decode("utf-8")
        assert "<tfoot>" in html
        assert "2 records" in html
        assert "Export truncated" in html

    def test_fragments_kept_in_order(self) -> None:
        assembler, _ = _assemble(_request("print"))
        assert assembler.fragments[0].startswith("<tr><td>1</td>")


# ---------------------------------------------------------------------------
# Custom elements and page layout
# ---------------------------------------------------------------------------

HEADER_NOTE = CustomText("ACME Corp", position=Position.TOP_LEFT, bold=True)
FOOTER_NOTE = CustomText("Confidential", position="bottom-right", repeat_on_pages=True, color="#ff0000")


class TestSpreadsheetSpool:
    @pytest.fixture
    def spool_dir(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        return tmp_path

    def test_discard_removes_unsaved_workbook(self, spool_dir) -> None:
        assembler = assembler_for(_request("xlsx"))
        assembler.add_row({"ID": 1, "Name": "Alice"})
        assembler.discard()
        assert list(spool_dir.iterdir()) == []

    def test_discard_after_close_is_noop(self, spool_dir) -> None:
        engine = OpenpyxlSpreadsheetEngine()
        engine.open("s", ["A"])
        engine.close()
        engine.discard()
        engine.discard()
        assert list(spool_dir.iterdir()) == []


class TestExcelCustomElements:
    def test_elements_around_table(self) -> None:
        _, artifact = _assemble(_request("xlsx", elements=(HEADER_NOTE, FOOTER_NOTE)))
        ws = openpyxl.load_workbook(io.BytesIO(artifact.content)).worksheets[0]
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0][0] == "ACME Corp"
        assert rows[1] == ("ID", "Name")
        assert rows[-1][0] == "Confidential"
        assert ws["A1"].font.bold
        assert ws.cell(row=len(rows), column=1).alignment.horizontal == "right"

    def test_truncation_note_precedes_trailer(self) -> None:
        _, artifact = _assemble(_request("xlsx", elements=(FOOTER_NOTE,)), truncated=True)
        rows = list(openpyxl.load_workbook(io.BytesIO(artifact.content)).worksheets[0].iter_rows(values_only=True))
        assert rows[-2][0].startswith("Export truncated")
        assert rows[-1][0] == "Confidential"


class TestPdfCustomElements:
    def test_decorations_carry_elements_and_layout(self) -> None:
        engine = _RecordingDocumentEngine()
        layout = PageLayout(orientation="portrait", page_format="letter", header_fill="#000000")
        _assemble(_request("pdf", elements=(HEADER_NOTE,), layout=layout), document_engine=engine)
        decorations = engine.calls[0][2]
        assert decorations.elements == (HEADER_NOTE,)
        assert decorations.layout is layout

    @pytest.mark.parametrize(
        ("layout", "landscape"),
        [(PageLayout(), True), (PageLayout(orientation="portrait", page_format="legal"), False)],
    )
    def test_page_size(self, layout: PageLayout, landscape: bool) -> None:
        width, height = page_size(layout)
        assert (width > height) is landscape

    def test_reportlab_renders_elements_on_every_page(self) -> None:
        rows = [{"ID": i, "Name": f"Name {i}"} for i in range(200)]
        elements = (
            HEADER_NOTE,
            FOOTER_NOTE,
            CustomText("Draft", position="center", font_size=40, italic=True),
            CustomText("Ref 42", position="custom", x=300, y=20),
        )
        content = ReportLabDocumentEngine().render(
            ["ID", "Name"],
            rows,
            PageDecorations(
                title="Users",
                record_count=200,
                show_page_numbers=True,
                elements=elements,
                layout=PageLayout(orientation="portrait", page_format="a5", header_fill="#222222"),
            ),
        )
        assert content.startswith(b"%PDF")


class TestPrintCustomElements:
    def test_elements_and_layout_rendered(self) -> None:
        layout = PageLayout(orientation="portrait", page_format="letter", header_fill="#123456")
        _, artifact = _assemble(_request("print", elements=(HEADER_NOTE, FOOTER_NOTE), layout=layout))
        html = artifact.content.decode("utf-8")
        assert "@page { size: letter portrait; }" in html
        assert "background: #123456" in html
        assert ">ACME Corp</div>" in html
        assert ">Confidential</div>" in html

    def test_element_html(self) -> None:
        markup = element_html(FOOTER_NOTE)
        assert "position: fixed;" in markup
        assert "bottom: 10px; right: 10px;" in markup
        assert "color: #ff0000;" in markup

    def test_element_text_escaped(self) -> None:
        markup = element_html(CustomText("<b>&</b>", position="custom", x=5, y=7))
        assert "&lt;b&gt;&amp;&lt;/b&gt;" in markup
        assert "top: 7px; left: 5px;" in markup
        assert "position: absolute;" in markup
