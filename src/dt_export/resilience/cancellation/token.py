"""Resilience – CancellationToken.

A single-use, revocable handle shared between whoever may cancel a run (a UI
action, a shutdown hook) and the code performing it.  Work checks
:attr:`CancellationToken.is_cancelled` at safe boundaries, and wraps each
suspension point in :meth:`CancellationToken.run` so a pending call is
aborted as soon as the token fires instead of at the next boundary.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, TypeVar

from dt_export.kernel.errors import AbortedError

T = TypeVar("T")


class CancellationToken:
    """Revocable cancel signal backed by an :class:`asyncio.Event`."""

    def __init__(self, reason: str = "Operation cancelled") -> None:
        self._event = asyncio.Event()
        self._reason = reason

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self) -> None:
        """Fire the token.  Idempotent; once fired it never resets."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AbortedError(self._reason)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* unless the token fires first.

        When the token fires while *awaitable* is pending, the underlying task
        is cancelled and :class:`AbortedError` is raised.  If the caller itself
        is cancelled (e.g. by a timeout), the pending task is cancelled and has
        fully unwound by the time the cancellation propagates.
        """
        if self._event.is_set():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise AbortedError(self._reason)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await _discard(task, waiter)
            raise

        if task in done:
            waiter.cancel()
            return task.result()
        await _discard(task, waiter)
        raise AbortedError(self._reason)


async def _discard(*tasks: asyncio.Future) -> None:  # type: ignore[type-arg]
    """Cancel *tasks* and wait until each has unwound."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


__all__ = ["CancellationToken"]
