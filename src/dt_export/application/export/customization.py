"""Application export – caller-supplied page decorations.

:class:`CustomText` places extra text (a company name, a confidentiality
notice) on pdf, print and xlsx output.  Positions name one of nine anchor
points on the page, or ``custom`` with explicit coordinates measured from the
top-left corner.  :class:`PageLayout` carries page size, orientation and the
table header colours for the paginated formats.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dt_export.kernel.errors import ValidationError

__all__ = ["CustomText", "Orientation", "PAGE_FORMATS", "PageLayout", "Position"]

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

PAGE_FORMATS: tuple[str, ...] = ("a3", "a4", "a5", "letter", "legal")


class Position(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"
    CUSTOM = "custom"

    @property
    def vertical(self) -> str:
        """``top``, ``center`` or ``bottom``; custom positions count as top."""
        if self is Position.CUSTOM:
            return "top"
        return "center" if self.value.startswith("center") else self.value.split("-")[0]

    @property
    def align(self) -> str:
        if self.value.endswith("left") or self is Position.CUSTOM:
            return "left"
        if self.value.endswith("right"):
            return "right"
        return "center"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


def _check_color(name: str, value: str, errors: list[dict[str, Any]]) -> None:
    if not _HEX_COLOR_RE.match(value):
        errors.append({"field": name, "reason": "must be a #RRGGBB colour"})


@dataclass(frozen=True)
class CustomText:
    """A line of text drawn at a fixed position.

    Elements in the top band (and ``center-left`` / ``center-right``) appear
    on the first page only unless ``repeat_on_pages`` is set; bottom and
    ``center`` elements appear on every page.
    """

    text: str
    position: Position = Position.TOP_CENTER
    font_size: int = 12
    bold: bool = False
    italic: bool = False
    color: str = "#000000"
    repeat_on_pages: bool = False
    x: float | None = None
    y: float | None = None
    margin: float = 10.0

    def __post_init__(self) -> None:
        errors: list[dict[str, Any]] = []
        try:
            object.__setattr__(self, "position", Position(self.position))
        except ValueError:
            errors.append({"field": "position", "reason": f"unknown position {self.position!r}"})
        if not self.text:
            errors.append({"field": "text", "reason": "must not be empty"})
        if self.font_size < 1:
            errors.append({"field": "font_size", "reason": "must be >= 1"})
        _check_color("color", self.color, errors)
        if self.position == Position.CUSTOM and self.x is None and self.y is None:
            errors.append({"field": "position", "reason": "custom position requires x or y"})
        if errors:
            raise ValidationError("Invalid custom element", errors=errors)

    def anchor(self, width: float, height: float) -> tuple[float, float]:
        """Anchor point on a *width* x *height* page, measured from the top-left."""
        m = self.margin
        if self.position is Position.CUSTOM:
            return (m if self.x is None else self.x, m if self.y is None else self.y)
        x = {"left": m, "center": width / 2, "right": width - m}[self.position.align]
        y = {"top": m, "center": height / 2, "bottom": height - m}[self.position.vertical]
        return x, y

    def on_page(self, page: int) -> bool:
        if self.repeat_on_pages or page == 1:
            return True
        return self.position in (Position.CENTER, Position.BOTTOM_LEFT, Position.BOTTOM_CENTER, Position.BOTTOM_RIGHT)

    @property
    def font_name(self) -> str:
        """Standard Helvetica face for the requested weight and slant."""
        suffix = ("Bold" if self.bold else "") + ("Oblique" if self.italic else "")
        return f"Helvetica-{suffix}" if suffix else "Helvetica"


@dataclass(frozen=True)
class PageLayout:
    """Page geometry and header styling for pdf and print output."""

    orientation: Orientation = Orientation.LANDSCAPE
    page_format: str = "a4"
    header_fill: str = "#446cf7"
    header_text: str = "#ffffff"

    def __post_init__(self) -> None:
        errors: list[dict[str, Any]] = []
        try:
            object.__setattr__(self, "orientation", Orientation(self.orientation))
        except ValueError:
            errors.append({"field": "orientation", "reason": "must be portrait or landscape"})
        object.__setattr__(self, "page_format", self.page_format.lower())
        if self.page_format not in PAGE_FORMATS:
            errors.append({"field": "page_format", "reason": f"one of {', '.join(PAGE_FORMATS)}"})
        _check_color("header_fill", self.header_fill, errors)
        _check_color("header_text", self.header_text, errors)
        if errors:
            raise ValidationError("Invalid page layout", errors=errors)

    @property
    def css_page_size(self) -> str:
        """Value for a CSS ``@page { size: ... }`` rule, e.g. ``A4 landscape``."""
        name = self.page_format.upper() if self.page_format.startswith("a") else self.page_format
        return f"{name} {self.orientation.value}"
