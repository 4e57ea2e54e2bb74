"""Observability – structured logging helpers."""
from dt_export.observability.logging.factory import JsonLoggerFactory
from dt_export.observability.logging.processors import export_log_context, get_logger

__all__ = ["JsonLoggerFactory", "export_log_context", "get_logger"]
