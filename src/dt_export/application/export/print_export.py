"""Application export – PrintAssembler (self-contained printable HTML listing)."""
from __future__ import annotations

import html

from dt_export.application.export.customization import CustomText, PageLayout, Position
from dt_export.application.export.request import ExportRequest
from dt_export.application.export.result import Artifact, RunSummary

__all__ = ["PrintAssembler", "element_html"]

_STYLES = """
body { font-family: Arial, Helvetica, sans-serif; font-size: 12px; margin: 16px; position: relative; }
h1 { font-size: 18px; margin-bottom: 8px; }
.meta { color: #666; margin-bottom: 12px; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ccc; padding: 4px 6px; text-align: left; vertical-align: top; }
thead { display: table-header-group; }
tr { page-break-inside: avoid; }
.note { margin-top: 12px; font-style: italic; }
@media print { body { margin: 0; } }
""".strip()

_ANCHORS: dict[Position, str] = {
    Position.TOP_LEFT: "top: {m}px; left: {m}px;",
    Position.TOP_CENTER: "top: {m}px; left: 50%; transform: translateX(-50%);",
    Position.TOP_RIGHT: "top: {m}px; right: {m}px;",
    Position.CENTER_LEFT: "top: 50%; left: {m}px; transform: translateY(-50%);",
    Position.CENTER: "top: 50%; left: 50%; transform: translate(-50%, -50%);",
    Position.CENTER_RIGHT: "top: 50%; right: {m}px; transform: translateY(-50%);",
    Position.BOTTOM_LEFT: "bottom: {m}px; left: {m}px;",
    Position.BOTTOM_CENTER: "bottom: {m}px; left: 50%; transform: translateX(-50%);",
    Position.BOTTOM_RIGHT: "bottom: {m}px; right: {m}px;",
}


def element_html(element: CustomText) -> str:
    """Positioned ``<div>`` for *element*; ``repeat_on_pages`` pins it to every printed page."""
    if element.position is Position.CUSTOM:
        x, y = element.anchor(0, 0)
        anchor = f"top: {y:g}px; left: {x:g}px;"
    else:
        anchor = _ANCHORS[element.position].format(m=f"{element.margin:g}")
    placement = "fixed" if element.repeat_on_pages else "absolute"
    weight = "bold" if element.bold else "normal"
    slant = "italic" if element.italic else "normal"
    style = (
        f"position: {placement}; {anchor} font-size: {element.font_size}px; "
        f"font-weight: {weight}; font-style: {slant}; color: {element.color};"
    )
    return f'<div class="custom-element" style="{style}">{html.escape(element.text)}</div>'


def _layout_styles(layout: PageLayout) -> str:
    return (
        f"@page {{ size: {layout.css_page_size}; }}\n"
        f"thead th {{ background: {layout.header_fill}; color: {layout.header_text}; }}"
    )


class PrintAssembler:
    """Collects ``<tr>`` fragments and wraps them in a printable document."""

    def __init__(self, request: ExportRequest) -> None:
        self._request = request
        self._labels = [c.label for c in request.visible_columns]
        self.fragments: list[str] = []

    @property
    def row_count(self) -> int:
        return len(self.fragments)

    def add_row(self, row: str) -> None:
        self.fragments.append(row)

    def render(self, summary: RunSummary) -> str:
        title = html.escape(self._request.title or self._request.file_name)
        head = "".join(f"<th>{html.escape(label)}</th>" for label in self._labels)
        if self.fragments:
            body = "\n".join(self.fragments)
        else:
            body = f'<tr><td colspan="{len(self._labels)}">No records to export.</td></tr>'

        parts = [
            "<!DOCTYPE html>",
            '<html><head><meta charset="utf-8">',
            f"<title>{title}</title>",
            f"<style>{_STYLES}\n{_layout_styles(self._request.layout)}</style>",
            "</head><body>",
            f"<h1>{title}</h1>",
        ]
        if self._request.query.search:
            parts.append(f'<div class="meta">Search: {html.escape(self._request.query.search)}</div>')
        parts.append(f"<table><thead><tr>{head}</tr></thead><tbody>\n{body}\n</tbody>")
        if self._request.footer:
            parts.append(
                f'<tfoot><tr><td colspan="{len(self._labels)}">'
                f"{summary.processed} records &middot; generated {summary.generated_at:%Y-%m-%d %H:%M}"
                "</td></tr></tfoot>"
            )
        parts.append("</table>")
        if summary.truncated:
            parts.append(
                f'<p class="note">Export truncated: only the first {summary.processed} records are included.</p>'
            )
        parts.extend(element_html(e) for e in self._request.elements)
        parts.append("</body></html>")
        return "\n".join(parts)

    def finalize(self, summary: RunSummary) -> Artifact:
        return Artifact(
            file_name=self._request.output_file_name,
            media_type=self._request.format.media_type,
            content=self.render(summary).encode("utf-8"),
            row_count=len(self.fragments),
            truncated=summary.truncated,
        )

    def discard(self) -> None:
        self.fragments = []
