"""Application export – RecordSource port."""
from __future__ import annotations

from typing import Protocol

from dt_export.application.export.request import ExportFormat, ExportQuery, Row
from dt_export.application.pagination import Page, PageRequest

__all__ = ["RecordSource"]


class RecordSource(Protocol):
    """Port: remote paginated data endpoint.

    Implementations raise :class:`RequestFailedError` on non-success responses
    and :class:`~dt_export.kernel.errors.TimeoutError` when their own transport
    deadline passes.  Cancellation is handled by the caller cancelling the
    awaiting task, so implementations must not shield their I/O.
    """

    async def fetch_page(
        self, query: ExportQuery, page: PageRequest, *, export_format: ExportFormat
    ) -> Page[Row]: ...

    async def fetch_count(self, query: ExportQuery, *, export_format: ExportFormat) -> int: ...
