"""HTTP adapter – HttpxHttpClient."""
from __future__ import annotations

from typing import Any

import httpx

from dt_export.kernel.errors import ExternalServiceError, SerializationError, TimeoutError as AppTimeoutError


class HttpxHttpClient:
    """Thin async httpx wrapper with structured error mapping.

    * ``httpx.TimeoutException`` -> :class:`~dt_export.kernel.errors.TimeoutError`
    * non-2xx responses -> :class:`ExternalServiceError` with ``status_code``
    * any other transport error -> :class:`ExternalServiceError` without a status
    """

    def __init__(self, base_url: str = "", timeout: float = 30.0, **kwargs: Any) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET *url* and decode the JSON body; undecodable bodies raise :class:`SerializationError`."""
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(
                f"Response from {url} is not valid JSON",
                payload_type=response.headers.get("content-type"),
                cause=exc,
            ) from exc

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise AppTimeoutError(f"HTTP request timed out: {method} {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                service=url,
                message=f"HTTP {exc.response.status_code} from {method} {url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(service=url, message=str(exc)) from exc


HttpClient = HttpxHttpClient

__all__ = ["HttpClient", "HttpxHttpClient"]
