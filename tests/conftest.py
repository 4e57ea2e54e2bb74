"""Shared pytest configuration."""
from __future__ import annotations

import pytest
import structlog

from dt_export.testing.fixtures import export_settings, fake_clock, fake_record_source  # noqa: F401


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
