"""Application export – ChunkCoordinator.

Drives one export run: a best-effort count probe, then a strictly sequential
page loop that feeds every row through the row transformer into the session's
assembler.  Exactly one request is in flight at a time, and every request runs
under both the session's :class:`CancellationToken` and a fixed timeout.

The loop stops when the ceiling is reached, when a chunk comes back shorter
than requested, or when the token fires.  Pages are always requested with
``perPage = chunk_size`` so page-number offsets stay aligned; the last chunk
may keep fewer rows than the page returned.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable

from dt_export.application.export.progress import ProgressSnapshot, ProgressTracker
from dt_export.application.export.result import RunSummary
from dt_export.application.export.session import Chunk, ExportSession
from dt_export.application.export.source import RecordSource
from dt_export.application.export.transform import RowTransformer
from dt_export.application.pagination import PageRequest
from dt_export.kernel.errors import AbortedError
from dt_export.kernel.time import Clock, SystemClock
from dt_export.observability.logging import get_logger
from dt_export.resilience.timeouts import TimeoutPolicy

__all__ = ["ChunkCoordinator"]

logger = get_logger(__name__)

ProgressListener = Callable[[ProgressSnapshot], Awaitable[None]]


class ChunkCoordinator:
    """Sequential chunk loop over a :class:`RecordSource`."""

    def __init__(
        self,
        source: RecordSource,
        *,
        timeout: TimeoutPolicy,
        clock: Clock | None = None,
        on_progress: ProgressListener | None = None,
    ) -> None:
        self._source = source
        self._timeout = timeout
        self._clock = clock or SystemClock()
        self._on_progress = on_progress
        self.tracker = ProgressTracker(self._clock)

    async def run(self, session: ExportSession, transformer: RowTransformer[Any]) -> RunSummary:
        """Retrieve and assemble every row of *session*; returns what was observed.

        Raises :class:`AbortedError` when the token fires and propagates any
        chunk failure unchanged.  The assembler is left ready to finalize.
        """
        request = session.request
        assembler = session.assembler
        if assembler is None:
            raise RuntimeError("Export session has no assembler")

        session.total_estimate = await self._probe_count(session)
        self.tracker.start(session.total_estimate or request.ceiling)

        page = 1
        pages_requested = 0
        overflow = False
        while True:
            session.token.raise_if_cancelled()
            remaining = request.ceiling - session.processed
            if remaining <= 0:
                break
            request_size = min(request.chunk_size, remaining)

            chunk = await self._fetch(session, page, request_size)
            pages_requested += 1

            rows = chunk.rows
            if len(rows) > request_size:
                overflow = True
                rows = rows[:request_size]
            for row in rows:
                assembler.add_row(transformer(row))
            session.record(len(rows))

            snapshot = self.tracker.update(session.processed)
            logger.debug(
                "export.chunk_fetched",
                page=page,
                rows=len(chunk.rows),
                kept=len(rows),
                processed=session.processed,
                percentage=snapshot.percentage,
            )
            if self._on_progress is not None:
                await self._on_progress(snapshot)

            if chunk.is_short or session.processed >= request.ceiling:
                break
            page += 1

        session.token.raise_if_cancelled()
        session.truncated = session.processed >= request.ceiling and (
            overflow
            or session.total_estimate is None
            or session.total_estimate > session.processed
        )
        return RunSummary(
            processed=session.processed,
            truncated=session.truncated,
            total_estimate=session.total_estimate,
            generated_at=self._clock.now(),
            pages_requested=pages_requested,
        )

    async def _probe_count(self, session: ExportSession) -> int | None:
        """Best-effort total; ``None`` when unknown.  Cancellation still propagates."""
        request = session.request
        try:
            total = await self._timeout.execute(
                lambda: session.token.run(
                    self._source.fetch_count(request.query, export_format=request.format)
                ),
                operation="Count probe",
            )
        except AbortedError:
            raise
        except Exception as exc:
            logger.warning(
                "export.count_probe_failed",
                error=str(exc),
                code=getattr(exc, "code", type(exc).__name__),
            )
            return None
        if total <= 0:
            return None
        return total

    async def _fetch(self, session: ExportSession, page: int, request_size: int) -> Chunk:
        request = session.request
        result = await self._timeout.execute(
            lambda: session.token.run(
                self._source.fetch_page(
                    request.query,
                    PageRequest(page=page, size=request.chunk_size),
                    export_format=request.format,
                )
            ),
            operation=f"Chunk request (page {page})",
        )
        if session.total_estimate is None and result.total:
            session.total_estimate = result.total
        return Chunk(page=page, request_size=request_size, rows=list(result.items))
