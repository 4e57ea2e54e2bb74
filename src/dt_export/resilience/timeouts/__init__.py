"""Resilience – timeout policy."""
from dt_export.resilience.timeouts.policy import TimeoutPolicy

__all__ = ["TimeoutPolicy"]
