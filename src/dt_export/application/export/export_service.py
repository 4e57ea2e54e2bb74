"""Application export – ExportService.

Entry point of the pipeline.  Owns the single export session, wires the
record source, coordinator, assembler and callbacks together and turns the
run's outcome into an :class:`ExportResult`:

* completed runs deliver the artifact to the optional ``sink`` and fire
  ``on_complete``;
* failed runs fire ``on_error`` and, for formats the fallback supports, carry
  a reduced artifact built from ``current_rows``;
* cancelled runs fire ``on_error`` once with :class:`ExportCancelledError`
  and carry no artifact.

Usage::

    service = ExportService(source, settings, callbacks=ExportCallbacks(on_progress=show))
    result = await service.export(ExportRequest.for_format("csv", settings, columns))
"""
from __future__ import annotations

import inspect
from typing import Any, Callable, Iterable

from dt_export.application.export.assembler import assembler_for
from dt_export.application.export.callbacks import ExportCallbacks
from dt_export.application.export.coordinator import ChunkCoordinator
from dt_export.application.export.errors import ExportCancelledError, ExportInProgressError
from dt_export.application.export.fallback import (
    FALLBACK_UNAVAILABLE,
    FALLBACK_WARNING,
    CurrentPageFallback,
)
from dt_export.application.export.progress import ProgressSnapshot
from dt_export.application.export.request import ExportRequest, Row
from dt_export.application.export.result import Artifact, ExportResult, ExportState
from dt_export.application.export.session import ExportSession
from dt_export.application.export.source import RecordSource
from dt_export.application.export.transform import transformer_for
from dt_export.config.settings import ExportSettings
from dt_export.kernel.errors import AbortedError
from dt_export.kernel.time import Clock, SystemClock
from dt_export.observability.logging import export_log_context, get_logger
from dt_export.resilience.fallback import FallbackPolicy
from dt_export.resilience.timeouts import TimeoutPolicy

__all__ = ["ExportService", "NO_RECORDS_MESSAGE", "Sink"]

logger = get_logger(__name__)

NO_RECORDS_MESSAGE = "No records to export"

Sink = Callable[[Artifact], Any]


class ExportService:
    """Runs one export at a time against a :class:`RecordSource`."""

    def __init__(
        self,
        source: RecordSource,
        settings: ExportSettings,
        *,
        callbacks: ExportCallbacks | None = None,
        clock: Clock | None = None,
        fallback: CurrentPageFallback | None = None,
        sink: Sink | None = None,
        spreadsheet_engine: Any = None,
        document_engine: Any = None,
    ) -> None:
        self._source = source
        self._settings = settings
        self._callbacks = callbacks or ExportCallbacks()
        self._clock = clock or SystemClock()
        self._sink = sink
        self._engines = {
            "spreadsheet_engine": spreadsheet_engine,
            "document_engine": document_engine,
        }
        self._fallback = fallback or CurrentPageFallback(
            settings.fallback_formats, clock=self._clock, **self._engines
        )
        self._timeout = TimeoutPolicy(settings.request_timeout_seconds)
        self._session: ExportSession | None = None

    @property
    def active_session(self) -> ExportSession | None:
        if self._session is not None and self._session.active:
            return self._session
        return None

    def cancel(self) -> bool:
        """Fire the active session's token; ``False`` when nothing is running."""
        session = self.active_session
        if session is None:
            return False
        session.cancel()
        return True

    async def export(self, request: ExportRequest, *, current_rows: Iterable[Row] = ()) -> ExportResult:
        if self.active_session is not None:
            raise ExportInProgressError(
                "An export is already in progress",
                detail={"export_id": self._session.id if self._session else None},
            )

        session = ExportSession(request, assembler_for(request, **self._engines), clock=self._clock)
        self._session = session
        session.begin()
        try:
            with export_log_context(session.id, request.format.value):
                logger.info(
                    "export.started",
                    chunk_size=request.chunk_size,
                    ceiling=request.ceiling,
                    columns=len(request.visible_columns),
                )
                policy: FallbackPolicy[ExportResult] = FallbackPolicy(
                    lambda exc: self._failed(session, exc, current_rows),
                    exclude=(AbortedError,),
                )
                try:
                    return await policy.execute(lambda: self._run(session))
                except AbortedError as exc:
                    return await self._cancelled(session, exc)
        finally:
            session.reset()

    async def _run(self, session: ExportSession) -> ExportResult:
        request = session.request
        coordinator = ChunkCoordinator(
            self._source,
            timeout=self._timeout,
            clock=self._clock,
            on_progress=lambda snapshot: self._progress(snapshot, session),
        )
        summary = await coordinator.run(
            session, transformer_for(request.format, request.visible_columns)
        )
        artifact = session.assembler.finalize(summary)  # type: ignore[union-attr]

        if summary.processed == 0:
            message = NO_RECORDS_MESSAGE
        elif summary.truncated:
            message = f"Export limited to {summary.processed} records"
            logger.warning("export.truncated", processed=summary.processed, total=summary.total_estimate)
        else:
            message = f"Exported {summary.processed} records"

        await self._deliver(artifact)
        session.finish(ExportState.COMPLETED)
        logger.info(
            "export.completed",
            processed=summary.processed,
            pages=summary.pages_requested,
            size_bytes=artifact.size_bytes,
            file_name=artifact.file_name,
        )
        await self._callbacks.complete(request.format, artifact.file_name)
        return ExportResult(
            state=ExportState.COMPLETED,
            format=request.format,
            artifact=artifact,
            processed=summary.processed,
            truncated=summary.truncated,
            message=message,
        )

    async def _progress(self, snapshot: ProgressSnapshot, session: ExportSession) -> None:
        await self._callbacks.progress(snapshot, session.format)

    async def _failed(
        self, session: ExportSession, exc: BaseException, current_rows: Iterable[Row]
    ) -> ExportResult:
        request = session.request
        session.finish(ExportState.FAILED)
        logger.error("export.failed", error=str(exc), error_type=type(exc).__name__, processed=session.processed)
        await self._callbacks.error(exc, request.format)

        artifact: Artifact | None = None
        message = str(exc)
        if self._fallback.supports(request.format):
            try:
                artifact = self._fallback.build(request, current_rows)
                await self._deliver(artifact)
            except Exception:
                logger.exception("export.fallback_failed")
                artifact = None
                message = FALLBACK_UNAVAILABLE
            else:
                message = FALLBACK_WARNING
                logger.warning("export.fallback_produced", rows=artifact.row_count, file_name=artifact.file_name)

        return ExportResult(
            state=ExportState.FAILED,
            format=request.format,
            artifact=artifact,
            processed=session.processed,
            message=message,
            error=exc,
        )

    async def _cancelled(self, session: ExportSession, exc: AbortedError) -> ExportResult:
        error = exc if isinstance(exc, ExportCancelledError) else ExportCancelledError(cause=exc)
        session.finish(ExportState.CANCELLED)
        logger.info("export.cancelled", processed=session.processed)
        await self._callbacks.error(error, session.format)
        return ExportResult(
            state=ExportState.CANCELLED,
            format=session.format,
            artifact=None,
            processed=session.processed,
            message=str(error),
            error=error,
        )

    async def _deliver(self, artifact: Artifact) -> None:
        if self._sink is None:
            return
        result = self._sink(artifact)
        if inspect.isawaitable(result):
            await result
