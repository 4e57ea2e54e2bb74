"""Application export – ExportFormat, ColumnDef, ExportQuery and ExportRequest."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from dt_export.application.export.customization import CustomText, PageLayout
from dt_export.application.pagination import Sort
from dt_export.kernel.errors import ValidationError

if TYPE_CHECKING:
    from dt_export.config.settings import ExportSettings

__all__ = ["ColumnDef", "ExportFormat", "ExportQuery", "ExportRequest", "Renderer", "Row"]

Row = Mapping[str, Any]
Renderer = Callable[[Any, Row], Any]


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"
    PRINT = "print"
    JSON = "json"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]


_EXTENSIONS = {
    ExportFormat.CSV: "csv",
    ExportFormat.XLSX: "xlsx",
    ExportFormat.PDF: "pdf",
    ExportFormat.PRINT: "html",
    ExportFormat.JSON: "json",
}

_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv; charset=utf-8",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
    ExportFormat.PRINT: "text/html; charset=utf-8",
    ExportFormat.JSON: "application/json",
}


def _formats(values: Iterable[ExportFormat | str]) -> frozenset[ExportFormat]:
    return frozenset(ExportFormat(v) for v in values)


@dataclass(frozen=True)
class ColumnDef:
    """Defines a single exported column.

    ``renderers`` holds format-specific overrides; ``render`` is the table's
    generic cell renderer, reused for a format only when that format is listed
    in ``render_for``.  ``visible_in=None`` exports the column everywhere.
    """

    key: str
    header: str = ""
    renderers: Mapping[ExportFormat, Renderer] = field(default_factory=dict, compare=False, hash=False)
    render: Renderer | None = field(default=None, compare=False, hash=False)
    render_for: frozenset[ExportFormat] = frozenset()
    visible_in: frozenset[ExportFormat] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "renderers", {ExportFormat(k): v for k, v in self.renderers.items()}
        )
        object.__setattr__(self, "render_for", _formats(self.render_for))
        if self.visible_in is not None:
            object.__setattr__(self, "visible_in", _formats(self.visible_in))

    @property
    def label(self) -> str:
        return self.header or self.key

    def exportable(self, fmt: ExportFormat) -> bool:
        return self.visible_in is None or ExportFormat(fmt) in self.visible_in


@dataclass(frozen=True)
class ExportQuery:
    """Search, sort and column filters forwarded verbatim to the record source."""

    search: str = ""
    sort: Sort = Sort()
    filters: Mapping[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class ExportRequest:
    """Describes one export run; immutable for the lifetime of the run."""

    format: ExportFormat
    columns: tuple[ColumnDef, ...]
    chunk_size: int
    ceiling: int
    file_name: str = "table-data"
    query: ExportQuery = ExportQuery()
    title: str = ""
    footer: bool = False
    bom: bool = False
    elements: tuple[CustomText, ...] = ()
    layout: PageLayout = PageLayout()

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", ExportFormat(self.format))
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "elements", tuple(self.elements))

        errors: list[dict[str, Any]] = []
        if self.chunk_size < 1:
            errors.append({"field": "chunk_size", "reason": "must be >= 1"})
        if self.ceiling < 1:
            errors.append({"field": "ceiling", "reason": "must be >= 1"})
        if not self.visible_columns:
            errors.append({"field": "columns", "reason": f"no column is exportable as {self.format.value}"})
        if not self.file_name:
            errors.append({"field": "file_name", "reason": "must not be empty"})
        if errors:
            raise ValidationError("Invalid export request", errors=errors)

    @property
    def visible_columns(self) -> tuple[ColumnDef, ...]:
        return tuple(c for c in self.columns if c.exportable(self.format))

    @property
    def output_file_name(self) -> str:
        ext = f".{self.format.extension}"
        if self.file_name.lower().endswith(ext):
            return self.file_name
        return f"{self.file_name}{ext}"

    def with_query(self, query: ExportQuery) -> "ExportRequest":
        return dataclasses.replace(self, query=query)

    @classmethod
    def for_format(
        cls,
        fmt: ExportFormat | str,
        settings: "ExportSettings",
        columns: Iterable[ColumnDef],
        *,
        query: ExportQuery | None = None,
        file_name: str | None = None,
        title: str = "",
        elements: Iterable[CustomText] = (),
    ) -> "ExportRequest":
        """Build a request using the per-format limits and page layout from *settings*."""
        fmt = ExportFormat(fmt)
        return cls(
            format=fmt,
            columns=tuple(columns),
            chunk_size=settings.chunk_size_for(fmt),
            ceiling=settings.ceiling_for(fmt),
            file_name=file_name or settings.file_name,
            query=query or ExportQuery(),
            title=title,
            footer=settings.footer,
            bom=settings.csv_bom,
            elements=tuple(elements),
            layout=PageLayout(
                orientation=settings.pdf_orientation,
                page_format=settings.pdf_page_format,
                header_fill=settings.pdf_header_fill,
                header_text=settings.pdf_header_text,
            ),
        )
