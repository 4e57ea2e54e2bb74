"""HTTP adapter – httpx client and the paginated record source."""
from dt_export.adapters.http.client import HttpClient, HttpxHttpClient
from dt_export.adapters.http.record_source import HttpRecordSource

__all__ = ["HttpClient", "HttpRecordSource", "HttpxHttpClient"]
