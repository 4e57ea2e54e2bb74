"""Application pagination – Page."""
from __future__ import annotations

import dataclasses
import math
from typing import Generic, TypeVar

from dt_export.application.pagination.page_request import PageRequest

T = TypeVar("T")


@dataclasses.dataclass
class Page(Generic[T]):
    """One page of results as returned by a remote source.

    ``total`` is the server-reported number of matching records, or ``None``
    when the source did not report one.
    """

    items: list[T]
    page: int
    size: int
    total: int | None = None

    @property
    def total_pages(self) -> int | None:
        if self.total is None:
            return None
        if self.size <= 0 or self.total <= 0:
            return 0
        return math.ceil(self.total / self.size)

    @property
    def is_short(self) -> bool:
        """``True`` when fewer items came back than were asked for."""
        return len(self.items) < self.size

    @classmethod
    def of(cls, all_items: list[T], request: PageRequest) -> "Page[T]":
        """Build a :class:`Page` by slicing *all_items* with *request*."""
        start = request.offset
        return cls(
            items=all_items[start:start + request.size],
            page=request.page,
            size=request.size,
            total=len(all_items),
        )


__all__ = ["Page"]
