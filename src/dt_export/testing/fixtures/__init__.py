"""Testing fixtures – pytest fixtures for fake doubles."""
try:
    import pytest  # noqa: F401

    from dt_export.testing.fixtures.clock import fake_clock
    from dt_export.testing.fixtures.export import export_settings, fake_record_source

except ImportError:
    pass

__all__ = ["export_settings", "fake_clock", "fake_record_source"]
