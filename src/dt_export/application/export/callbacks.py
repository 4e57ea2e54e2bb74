"""Application export – ExportCallbacks.

Callbacks may be plain functions or coroutine functions.  A callback that
raises is logged as ``export.callback_failed`` and otherwise ignored, so
observer code can never change the outcome of a run.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable

from dt_export.application.export.progress import ProgressSnapshot
from dt_export.application.export.request import ExportFormat
from dt_export.observability.logging import get_logger

__all__ = ["CompleteCallback", "ErrorCallback", "ExportCallbacks", "ProgressCallback"]

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, str], Any]
CompleteCallback = Callable[[str, str], Any]
ErrorCallback = Callable[[BaseException, str], Any]


@dataclass
class ExportCallbacks:
    """``on_progress(current, total, fmt)``, ``on_complete(fmt, file_name)``,
    ``on_error(error, fmt)``."""

    on_progress: ProgressCallback | None = None
    on_complete: CompleteCallback | None = None
    on_error: ErrorCallback | None = None

    async def progress(self, snapshot: ProgressSnapshot, fmt: ExportFormat) -> None:
        await self._invoke("on_progress", self.on_progress, snapshot.processed, snapshot.total, fmt.value)

    async def complete(self, fmt: ExportFormat, file_name: str) -> None:
        await self._invoke("on_complete", self.on_complete, fmt.value, file_name)

    async def error(self, error: BaseException, fmt: ExportFormat) -> None:
        await self._invoke("on_error", self.on_error, error, fmt.value)

    @staticmethod
    async def _invoke(name: str, fn: Callable[..., Any] | None, *args: Any) -> None:
        if fn is None:
            return
        try:
            result = fn(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("export.callback_failed", callback=name)
