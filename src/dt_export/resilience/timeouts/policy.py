"""Resilience – TimeoutPolicy."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Awaitable, Callable, TypeVar

from dt_export.kernel.errors import TimeoutError as AppTimeoutError

T = TypeVar("T")


@dataclasses.dataclass
class TimeoutPolicy:
    """Fixed deadline applied to every remote call of an export run.

    On expiry the pending awaitable is cancelled (aborting the in-flight
    request) and :class:`~dt_export.kernel.errors.TimeoutError` is raised.
    """
    timeout_seconds: float

    async def execute(self, func: Callable[[], Awaitable[T]], *, operation: str = "Operation") -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            raise AppTimeoutError(
                f"{operation} timed out after {self.timeout_seconds}s",
                detail={"timeout_seconds": self.timeout_seconds},
            ) from exc


__all__ = ["TimeoutPolicy"]
