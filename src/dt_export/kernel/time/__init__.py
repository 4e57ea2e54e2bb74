"""Kernel time – Clock port + implementations."""
from dt_export.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
