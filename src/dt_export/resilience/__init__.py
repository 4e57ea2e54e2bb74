"""Resilience – timeouts, cooperative cancellation and fallback."""

from dt_export.resilience.cancellation import CancellationToken
from dt_export.resilience.fallback import FallbackPolicy
from dt_export.resilience.timeouts import TimeoutPolicy

__all__ = ["CancellationToken", "FallbackPolicy", "TimeoutPolicy"]
