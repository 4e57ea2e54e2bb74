"""Application-layer errors – run-level outcomes that are not I/O faults."""

from __future__ import annotations

from typing import Any

from dt_export.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class TimeoutError(ApplicationError):  # noqa: A001
    """A count probe or chunk request exceeded its fixed deadline."""

    default_code = "timeout"


class AbortedError(ApplicationError):
    """The operation was cancelled through its cancellation token."""

    default_code = "aborted"

    def __init__(self, message: str = "Operation cancelled", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = ["AbortedError", "ApplicationError", "TimeoutError"]
