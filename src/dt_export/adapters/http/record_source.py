"""HTTP adapter – HttpRecordSource.

Talks to a paginated JSON endpoint::

    GET <endpoint>?search=&sortBy=id&order=asc&columnFilters={}&page=1&perPage=50&export=true

    {"data": [{...}, ...], "total": 1234}

The data key is configurable; the total is read from ``total`` or
``meta.total`` and may be absent.
"""
from __future__ import annotations

import json
from typing import Any

from dt_export.adapters.http.client import HttpxHttpClient
from dt_export.application.export.errors import RequestFailedError
from dt_export.application.export.request import ExportFormat, ExportQuery, Row
from dt_export.application.pagination import Page, PageRequest
from dt_export.config.settings import ExportSettings
from dt_export.kernel.errors import ExternalServiceError, SerializationError
from dt_export.observability.logging import get_logger

logger = get_logger(__name__)


def query_params(query: ExportQuery, page: PageRequest) -> dict[str, str]:
    sort = query.sort
    return {
        "search": query.search,
        "sortBy": sort.field,
        "order": sort.direction.value,
        "columnFilters": json.dumps(dict(query.filters), separators=(",", ":"), default=str),
        "page": str(page.page),
        "perPage": str(page.size),
        "export": "true",
    }


def export_headers(export_format: ExportFormat) -> dict[str, str]:
    return {
        "Accept": "application/json",
        "X-Requested-With": "XMLHttpRequest",
        "X-Requested-For": f"export-{ExportFormat(export_format).value}",
    }


def _read_total(payload: dict[str, Any]) -> int | None:
    total = payload.get("total")
    if total is None and isinstance(payload.get("meta"), dict):
        total = payload["meta"].get("total")
    if total is None:
        return None
    try:
        return int(total)
    except (TypeError, ValueError):
        return None


class HttpRecordSource:
    """:class:`~dt_export.application.export.source.RecordSource` over httpx."""

    def __init__(self, client: HttpxHttpClient, endpoint_url: str, *, data_key: str = "data") -> None:
        self._client = client
        self._endpoint_url = endpoint_url
        self._data_key = data_key

    @classmethod
    def from_settings(cls, settings: ExportSettings, **client_kwargs: Any) -> "HttpRecordSource":
        client = HttpxHttpClient(timeout=settings.request_timeout_seconds, **client_kwargs)
        return cls(client, settings.endpoint_url, data_key=settings.data_key)

    async def __aenter__(self) -> "HttpRecordSource":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def fetch_page(
        self, query: ExportQuery, page: PageRequest, *, export_format: ExportFormat
    ) -> Page[Row]:
        payload = await self._get(query, page, export_format)
        rows = payload.get(self._data_key, [])
        if not isinstance(rows, list):
            raise SerializationError(
                f"Expected a list under '{self._data_key}', got {type(rows).__name__}",
                payload_type=type(rows).__name__,
            )
        return Page(items=rows, page=page.page, size=page.size, total=_read_total(payload))

    async def fetch_count(self, query: ExportQuery, *, export_format: ExportFormat) -> int:
        payload = await self._get(query, PageRequest(page=1, size=1), export_format)
        return _read_total(payload) or 0

    async def _get(self, query: ExportQuery, page: PageRequest, export_format: ExportFormat) -> dict[str, Any]:
        try:
            payload = await self._client.get_json(
                self._endpoint_url,
                params=query_params(query, page),
                headers=export_headers(export_format),
            )
        except ExternalServiceError as exc:
            raise RequestFailedError(exc.status_code, cause=exc) from exc
        if not isinstance(payload, dict):
            raise SerializationError(
                "Expected a JSON object from the record source",
                payload_type=type(payload).__name__,
            )
        logger.debug("record_source.response", page=page.page, per_page=page.size)
        return payload


__all__ = ["HttpRecordSource", "export_headers", "query_params"]
