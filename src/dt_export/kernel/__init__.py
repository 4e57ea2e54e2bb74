"""Kernel – framework-agnostic building blocks (errors, time)."""

from dt_export.kernel.errors import (
    AbortedError,
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    ExternalServiceError,
    InfrastructureError,
    SerializationError,
    TimeoutError,
    ValidationError,
)

__all__ = [
    "AbortedError",
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "ExternalServiceError",
    "InfrastructureError",
    "SerializationError",
    "TimeoutError",
    "ValidationError",
]
