"""Observability – structured logging for export runs."""

from dt_export.observability.logging import JsonLoggerFactory, export_log_context, get_logger

__all__ = ["JsonLoggerFactory", "export_log_context", "get_logger"]
