"""
dt_export – chunked bulk export of paginated remote tables.

Import path convention::

    from dt_export.application.export import ExportService, ExportRequest, ColumnDef
    from dt_export.adapters.http import HttpRecordSource
    from dt_export.config.settings import ExportSettings, SettingsFactory
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
