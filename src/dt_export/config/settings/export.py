"""Config settings – ExportSettings."""
from __future__ import annotations

import dataclasses
import re
from typing import Any

from dt_export.config.settings.base import Settings
from dt_export.config.validation import InvalidSettingValueError

FORMAT_NAMES: tuple[str, ...] = ("csv", "xlsx", "pdf", "print", "json")
ORIENTATIONS: tuple[str, ...] = ("portrait", "landscape")
_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _format_name(fmt: Any) -> str:
    name = str(getattr(fmt, "value", fmt)).lower()
    if name not in FORMAT_NAMES:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    return name


@dataclasses.dataclass
class ExportSettings(Settings):
    """Per-deployment export configuration.

    Chunk sizes and ceilings are per format: the ceiling is the hard bound on
    rows retained by one run, lower for the interactive document formats.
    """

    _prefix = "DT_EXPORT"

    endpoint_url: str
    data_key: str = "data"
    request_timeout_seconds: float = 30.0

    csv_chunk_size: int = 50
    xlsx_chunk_size: int = 50
    pdf_chunk_size: int = 50
    print_chunk_size: int = 100
    json_chunk_size: int = 100

    csv_ceiling: int = 100_000
    xlsx_ceiling: int = 100_000
    pdf_ceiling: int = 10_000
    print_ceiling: int = 5_000
    json_ceiling: int = 100_000

    file_name: str = "table-data"
    csv_bom: bool = False
    footer: bool = False
    fallback_formats: list[str] = dataclasses.field(default_factory=lambda: ["csv"])

    pdf_orientation: str = "landscape"
    pdf_page_format: str = "a4"
    pdf_header_fill: str = "#446cf7"
    pdf_header_text: str = "#ffffff"

    def _validate(self) -> None:
        for name in FORMAT_NAMES:
            for suffix in ("chunk_size", "ceiling"):
                field = f"{name}_{suffix}"
                value = getattr(self, field)
                if not isinstance(value, int) or value < 1:
                    raise InvalidSettingValueError(field, value, "must be a positive integer")
        if self.request_timeout_seconds <= 0:
            raise InvalidSettingValueError(
                "request_timeout_seconds", self.request_timeout_seconds, "must be positive"
            )
        unknown = [f for f in self.fallback_formats if f not in FORMAT_NAMES]
        if unknown:
            raise InvalidSettingValueError("fallback_formats", unknown, "unknown export format")
        if self.pdf_orientation not in ORIENTATIONS:
            raise InvalidSettingValueError("pdf_orientation", self.pdf_orientation, "must be portrait or landscape")
        for field in ("pdf_header_fill", "pdf_header_text"):
            value = getattr(self, field)
            if not _HEX_COLOR_RE.match(value):
                raise InvalidSettingValueError(field, value, "must be a #RRGGBB colour")

    def chunk_size_for(self, fmt: Any) -> int:
        return int(getattr(self, f"{_format_name(fmt)}_chunk_size"))

    def ceiling_for(self, fmt: Any) -> int:
        return int(getattr(self, f"{_format_name(fmt)}_ceiling"))


__all__ = ["FORMAT_NAMES", "ExportSettings"]
