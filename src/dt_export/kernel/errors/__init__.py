"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   └── ConflictError
    ├── ApplicationError     (application.py)
    │   ├── TimeoutError
    │   └── AbortedError
    └── InfrastructureError  (infrastructure.py)
        ├── SerializationError
        └── ExternalServiceError

Export-specific subclasses live in :mod:`dt_export.application.export.errors`.
"""

from dt_export.kernel.errors.application import AbortedError, ApplicationError, TimeoutError
from dt_export.kernel.errors.base import BaseError
from dt_export.kernel.errors.domain import ConflictError, DomainError, ValidationError
from dt_export.kernel.errors.infrastructure import (
    ExternalServiceError,
    InfrastructureError,
    SerializationError,
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
