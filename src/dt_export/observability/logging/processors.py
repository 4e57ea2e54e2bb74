"""Observability – get_logger helper and export run context binding."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


@contextlib.contextmanager
def export_log_context(export_id: str, export_format: str) -> Iterator[None]:
    """Bind ``export_id`` / ``export_format`` to every log event in the block."""
    with structlog.contextvars.bound_contextvars(
        export_id=export_id, export_format=export_format
    ):
        yield


__all__ = ["export_log_context", "get_logger"]
