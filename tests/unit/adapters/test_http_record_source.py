"""Unit tests – HTTP adapter (httpx client and record source)."""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest
import respx

from dt_export.adapters.http import HttpRecordSource, HttpxHttpClient
from dt_export.adapters.http.record_source import export_headers, query_params
from dt_export.application.export import ExportFormat, ExportQuery, RequestFailedError
from dt_export.application.pagination import PageRequest, Sort, SortDirection
from dt_export.config.settings import ExportSettings
from dt_export.kernel.errors import ExternalServiceError, SerializationError, TimeoutError as AppTimeoutError

URL = "https://api.example.com/users"
QUERY = ExportQuery(search="ann", sort=Sort("name", SortDirection.DESC), filters={"role": "admin"})


def _source(data_key: str = "data") -> HttpRecordSource:
    return HttpRecordSource(HttpxHttpClient(), URL, data_key=data_key)


# ---------------------------------------------------------------------------
# Wire format helpers
# ---------------------------------------------------------------------------


class TestWireFormat:
    def test_query_params(self) -> None:
        params = query_params(QUERY, PageRequest(page=3, size=50))
        assert params == {
            "search": "ann",
            "sortBy": "name",
            "order": "desc",
            "columnFilters": '{"role":"admin"}',
            "page": "3",
            "perPage": "50",
            "export": "true",
        }

    def test_default_sort(self) -> None:
        params = query_params(ExportQuery(), PageRequest())
        assert params["sortBy"] == "id"
        assert params["order"] == "asc"
        assert params["columnFilters"] == "{}"

    def test_headers(self) -> None:
        headers = export_headers(ExportFormat.XLSX)
        assert headers["X-Requested-For"] == "export-xlsx"
        assert headers["X-Requested-With"] == "XMLHttpRequest"
        assert headers["Accept"] == "application/json"


# ---------------------------------------------------------------------------
# HttpRecordSource
# ---------------------------------------------------------------------------


class TestFetchPage:
    @respx.mock
    def test_returns_rows_and_total(self) -> None:
        route = respx.get(URL).mock(
            return_value=httpx.Response(200, json={"data": [{"id": 1}, {"id": 2}], "total": 42})
        )

        async def run():
            async with _source() as source:
                return await source.fetch_page(QUERY, PageRequest(page=2, size=2), export_format=ExportFormat.CSV)

        page = asyncio.run(run())
        assert page.items == [{"id": 1}, {"id": 2}]
        assert page.total == 42
        assert page.page == 2
        sent = route.calls.last.request
        assert sent.url.params["page"] == "2"
        assert sent.url.params["perPage"] == "2"
        assert sent.url.params["export"] == "true"
        assert json.loads(sent.url.params["columnFilters"]) == {"role": "admin"}
        assert sent.headers["x-requested-for"] == "export-csv"

    @respx.mock
    def test_custom_data_key_and_meta_total(self) -> None:
        respx.get(URL).mock(
            return_value=httpx.Response(200, json={"records": [{"id": 1}], "meta": {"total": 7}})
        )

        async def run():
            return await _source("records").fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.PDF)

        page = asyncio.run(run())
        assert page.items == [{"id": 1}]
        assert page.total == 7

    @respx.mock
    def test_missing_data_is_empty(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, json={}))
        page = asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))
        assert page.items == []
        assert page.total is None

    @respx.mock
    def test_server_error(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(500))
        with pytest.raises(RequestFailedError) as exc_info:
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))
        assert exc_info.value.status == 500
        assert str(exc_info.value) == "Export data request failed with status: 500"

    @respx.mock
    def test_network_error(self) -> None:
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(RequestFailedError) as exc_info:
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))
        assert exc_info.value.status is None

    @respx.mock
    def test_timeout(self) -> None:
        respx.get(URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(AppTimeoutError):
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))

    @respx.mock
    def test_non_json_body(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, text="<html>login</html>"))
        with pytest.raises(SerializationError):
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))

    @respx.mock
    def test_data_not_a_list(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, json={"data": {"id": 1}}))
        with pytest.raises(SerializationError):
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))

    @respx.mock
    def test_payload_not_an_object(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, json=[1, 2]))
        with pytest.raises(SerializationError):
            asyncio.run(_source().fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.CSV))


class TestFetchCount:
    @respx.mock
    def test_count_uses_single_row_page(self) -> None:
        route = respx.get(URL).mock(return_value=httpx.Response(200, json={"data": [{"id": 1}], "total": 1234}))
        total = asyncio.run(_source().fetch_count(QUERY, export_format=ExportFormat.XLSX))
        assert total == 1234
        params = route.calls.last.request.url.params
        assert params["perPage"] == "1"
        assert params["page"] == "1"
        assert params["search"] == "ann"

    @respx.mock
    def test_missing_total_is_zero(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, json={"data": []}))
        assert asyncio.run(_source().fetch_count(ExportQuery(), export_format=ExportFormat.CSV)) == 0

    @respx.mock
    def test_failure(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(503))
        with pytest.raises(RequestFailedError):
            asyncio.run(_source().fetch_count(ExportQuery(), export_format=ExportFormat.CSV))


class TestFromSettings:
    @respx.mock
    def test_uses_endpoint_and_data_key(self) -> None:
        respx.get(URL).mock(return_value=httpx.Response(200, json={"rows": [{"id": 9}]}))
        settings = ExportSettings(endpoint_url=URL, data_key="rows")

        async def run():
            async with HttpRecordSource.from_settings(settings) as source:
                return await source.fetch_page(ExportQuery(), PageRequest(), export_format=ExportFormat.JSON)

        assert asyncio.run(run()).items == [{"id": 9}]


# ---------------------------------------------------------------------------
# HttpxHttpClient
# ---------------------------------------------------------------------------


class TestHttpxHttpClient:
    @respx.mock
    def test_status_error_mapped(self) -> None:
        respx.get("http://svc/fail").mock(return_value=httpx.Response(404))

        async def run() -> None:
            async with HttpxHttpClient() as client:
                await client.get("http://svc/fail")

        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 404

    @respx.mock
    def test_get_json(self) -> None:
        respx.get("http://svc/ok").mock(return_value=httpx.Response(200, json={"ok": True}))

        async def run():
            async with HttpxHttpClient() as client:
                return await client.get_json("http://svc/ok")

        assert asyncio.run(run()) == {"ok": True}
