"""Testing fakes – in-memory doubles for export ports."""
from dt_export.testing.fakes.clock import FakeClock
from dt_export.testing.fakes.record_source import FakeRecordSource, make_records
from dt_export.kernel.time import FrozenClock

__all__ = ["FakeClock", "FakeRecordSource", "FrozenClock", "make_records"]
