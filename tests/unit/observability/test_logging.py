"""Unit tests for structured logging."""
from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from dt_export.observability.logging import JsonLoggerFactory, export_log_context, get_logger


class TestGetLogger:
    def test_initial_values_bound(self) -> None:
        with capture_logs() as logs:
            get_logger("dt_export.test", component="coordinator").info("export.started")
        assert logs == [{"component": "coordinator", "event": "export.started", "log_level": "info"}]


class TestExportLogContext:
    def test_binds_and_unbinds(self) -> None:
        with export_log_context("abc123", "csv"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["export_id"] == "abc123"
            assert bound["export_format"] == "csv"
        assert "export_id" not in structlog.contextvars.get_contextvars()


class TestJsonLoggerFactory:
    def test_json_output_carries_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure("INFO", cache=False)
        with export_log_context("abc123", "xlsx"):
            get_logger("dt_export.test").info("export.completed", processed=3)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "export.completed"
        assert record["processed"] == 3
        assert record["export_id"] == "abc123"
        assert record["export_format"] == "xlsx"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(logging.WARNING, cache=False)
        get_logger("dt_export.test").info("export.chunk_fetched")
        assert capsys.readouterr().err == ""

    def teardown_method(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(logging.WARNING)
