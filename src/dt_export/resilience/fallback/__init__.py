"""Resilience – fallback on failure."""
from dt_export.resilience.fallback.policy import FallbackPolicy

__all__ = ["FallbackPolicy"]
