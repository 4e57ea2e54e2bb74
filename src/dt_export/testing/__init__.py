"""Testing support – fakes and fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["dt_export.testing.fixtures"]
"""

from dt_export.testing.fakes import FakeClock, FakeRecordSource, FrozenClock, make_records

__all__ = ["FakeClock", "FakeRecordSource", "FrozenClock", "make_records"]
