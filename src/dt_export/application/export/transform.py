"""Application export – row transformers.

A transformer maps one raw row to the row representation of one format.  It
is a pure function of ``(row, columns)``: no shared state is kept between
calls, so the same row always yields the same output.

Value resolution per column:

1. the format-specific override renderer, if the column has one;
2. the generic renderer, when the column flags it reusable for the format;
3. the raw field value.

Missing and ``None`` values become ``""`` before any renderer sees them.
"""
from __future__ import annotations

import abc
import html
from html.parser import HTMLParser
from typing import Any, Generic, Sequence, TypeVar

from dt_export.application.export.request import ColumnDef, ExportFormat, Row

__all__ = [
    "DelimitedRowTransformer",
    "HtmlRowTransformer",
    "MappingRowTransformer",
    "RowTransformer",
    "escape_delimited",
    "html_to_text",
    "resolve_value",
    "transformer_for",
]

T = TypeVar("T")

RAW = "raw"
OVERRIDE = "override"
GENERIC = "generic"


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []

    def handle_data(self, data: str) -> None:
        self.parts.append(data)


def html_to_text(markup: Any) -> str:
    """Reduce renderer markup to its text content (tags dropped, entities decoded)."""
    if not isinstance(markup, str):
        return "" if markup is None else str(markup)
    if "<" not in markup and "&" not in markup:
        return markup
    parser = _TextExtractor()
    parser.feed(markup)
    parser.close()
    return "".join(parser.parts)


def escape_delimited(value: Any, quote: str = '"') -> str:
    """Wrap *value* in quotes, doubling embedded quotes; applied to every field."""
    text = "" if value is None else str(value)
    return f"{quote}{text.replace(quote, quote * 2)}{quote}"


def resolve_value(column: ColumnDef, row: Row, fmt: ExportFormat) -> tuple[Any, str]:
    """Return ``(value, source)`` where *source* names the resolution step used."""
    raw = row.get(column.key)
    if raw is None:
        raw = ""
    override = column.renderers.get(fmt)
    if override is not None:
        return override(raw, row), OVERRIDE
    if column.render is not None and fmt in column.render_for:
        return column.render(raw, row), GENERIC
    return raw, RAW


class RowTransformer(abc.ABC, Generic[T]):
    """Maps a raw row into one format's row representation."""

    format: ExportFormat

    def __init__(self, columns: Sequence[ColumnDef]) -> None:
        self._columns = tuple(columns)

    @property
    def columns(self) -> tuple[ColumnDef, ...]:
        return self._columns

    @property
    def labels(self) -> list[str]:
        return [c.label for c in self._columns]

    def __call__(self, row: Row) -> T:
        return self.transform(row)

    @abc.abstractmethod
    def transform(self, row: Row) -> T: ...

    def _cell(self, column: ColumnDef, row: Row) -> Any:
        value, source = resolve_value(column, row, self.format)
        if source == GENERIC:
            # Generic table renderers emit display markup.
            return html_to_text(value)
        return "" if value is None else value


class DelimitedRowTransformer(RowTransformer[list[str]]):
    """csv: ordered list of quoted, escaped cells."""

    format = ExportFormat.CSV

    def transform(self, row: Row) -> list[str]:
        return [escape_delimited(self._cell(c, row)) for c in self._columns]


class MappingRowTransformer(RowTransformer[dict[str, Any]]):
    """xlsx / pdf: label -> value.  json: column key -> value."""

    def __init__(self, columns: Sequence[ColumnDef], fmt: ExportFormat) -> None:
        super().__init__(columns)
        self.format = fmt
        self._by_key = fmt is ExportFormat.JSON

    def transform(self, row: Row) -> dict[str, Any]:
        return {
            (c.key if self._by_key else c.label): self._cell(c, row)
            for c in self._columns
        }


class HtmlRowTransformer(RowTransformer[str]):
    """print: one ``<tr>`` fragment; raw values are escaped, renderer output is kept as markup."""

    format = ExportFormat.PRINT

    def transform(self, row: Row) -> str:
        cells: list[str] = []
        for column in self._columns:
            value, source = resolve_value(column, row, self.format)
            text = "" if value is None else str(value)
            if source == RAW:
                text = html.escape(text)
            cells.append(f"<td>{text}</td>")
        return f"<tr>{''.join(cells)}</tr>"


def transformer_for(fmt: ExportFormat | str, columns: Sequence[ColumnDef]) -> RowTransformer[Any]:
    fmt = ExportFormat(fmt)
    if fmt is ExportFormat.CSV:
        return DelimitedRowTransformer(columns)
    if fmt is ExportFormat.PRINT:
        return HtmlRowTransformer(columns)
    return MappingRowTransformer(columns, fmt)
