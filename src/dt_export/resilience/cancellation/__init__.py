"""Resilience – cooperative cancellation."""
from dt_export.resilience.cancellation.token import CancellationToken

__all__ = ["CancellationToken"]
