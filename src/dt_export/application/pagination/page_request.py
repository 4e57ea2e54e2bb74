"""Application pagination – PageRequest, Sort, SortDirection."""
from __future__ import annotations

import dataclasses
from enum import Enum


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: "str | SortDirection") -> "SortDirection":
        if isinstance(value, SortDirection):
            return value
        return cls(str(value).lower())


@dataclasses.dataclass(frozen=True)
class Sort:
    """Single sort criterion, sent to the record source as ``sortBy``/``order``."""
    field: str = "id"
    direction: SortDirection = SortDirection.ASC


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Offset-based pagination parameters (1-based page index)."""
    page: int = 1
    size: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.size < 1:
            raise ValueError("size must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def next(self) -> "PageRequest":
        return PageRequest(page=self.page + 1, size=self.size)


__all__ = ["PageRequest", "Sort", "SortDirection"]
