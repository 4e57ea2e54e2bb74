from __future__ import annotations

from typing import Awaitable, Callable, Generic, TypeVar

__all__ = ["FallbackPolicy"]

T = TypeVar("T")


class FallbackPolicy(Generic[T]):
    """Executes *fn*; on listed exceptions hands the error to *fallback*.

    Exceptions in *exclude* always propagate even when they are subclasses of
    an entry in *on_exceptions*, so a cancelled run never falls back.
    """

    def __init__(
        self,
        fallback: Callable[[BaseException], Awaitable[T]],
        on_exceptions: tuple[type[BaseException], ...] = (Exception,),
        exclude: tuple[type[BaseException], ...] = (),
    ) -> None:
        self._fallback = fallback
        self._on_exceptions = on_exceptions
        self._exclude = exclude

    def handles(self, exc: BaseException) -> bool:
        return isinstance(exc, self._on_exceptions) and not isinstance(exc, self._exclude)

    async def execute(self, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        except BaseException as exc:
            if self.handles(exc):
                return await self._fallback(exc)
            raise
