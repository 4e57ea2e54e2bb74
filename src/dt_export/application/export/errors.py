"""Application export – export-specific errors."""
from __future__ import annotations

from typing import Any

from dt_export.kernel.errors import AbortedError, ConflictError, DomainError, ExternalServiceError

__all__ = [
    "CANCELLED_MESSAGE",
    "ExportCancelledError",
    "ExportInProgressError",
    "InvalidStateTransitionError",
    "RequestFailedError",
]

CANCELLED_MESSAGE = "Export cancelled by user"


class RequestFailedError(ExternalServiceError):
    """A count probe or chunk request got a non-success response or a network error.

    ``status`` is the HTTP status, or ``None`` when no response was received.
    """

    default_code = "request_failed"

    def __init__(
        self,
        status: int | None,
        message: str | None = None,
        *,
        service: str = "record-source",
        **kwargs: Any,
    ) -> None:
        if message is None:
            message = (
                f"Export data request failed with status: {status}"
                if status is not None
                else "Export data request failed: no response"
            )
        detail = kwargs.pop("detail", None) or {}
        detail.setdefault("status", status)
        super().__init__(service, message, status_code=status, detail=detail, **kwargs)
        self.status = status


class ExportInProgressError(ConflictError):
    """Another export run is already active on this service."""

    default_code = "export_in_progress"


class InvalidStateTransitionError(DomainError):
    """An export session was asked to move between incompatible states."""

    default_code = "invalid_state_transition"

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(f"No transition from '{from_state}' to '{to_state}'")
        self.from_state = from_state
        self.to_state = to_state


class ExportCancelledError(AbortedError):
    """The user (or a shutdown hook) cancelled a running export."""

    default_code = "export_cancelled"

    def __init__(self, message: str = CANCELLED_MESSAGE, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
