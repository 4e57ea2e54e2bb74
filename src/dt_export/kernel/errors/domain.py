"""Domain errors – invalid export requests and conflicting runs."""

from __future__ import annotations

from typing import Any

from dt_export.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when an export rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """An export request or column definition is malformed.

    ``errors`` lists field-level failures as ``{"field": ..., "reason": ...}``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"


__all__ = ["ConflictError", "DomainError", "ValidationError"]
