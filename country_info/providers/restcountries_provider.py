# country_info/providers/restcountries_provider.py
from __future__ import annotations

"""
REST Countries provider (https://restcountries.com/v3.1).

Public surface:

- RestCountriesClient.get(path, params)   -> decoded JSON (raises UpstreamError)
- RestCountriesClient.all_countries(fields)
- RestCountriesClient.by_code(code)
- RestCountriesClient.by_region(region)

No retries: a failed call is logged here, once, and re-raised to the caller.
"""

from typing import Any, Dict, Iterable, Optional
import logging

import httpx

from country_info.config import REST_COUNTRIES_API, UPSTREAM_TIMEOUT
from country_info.errors import UpstreamError

logger = logging.getLogger("country-info.upstream")

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "CountryInfo/1.0 (restcountries_provider)",
}


class RestCountriesClient:
    def __init__(
        self,
        base_url: str = REST_COUNTRIES_API,
        timeout: float = UPSTREAM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        # built on first use so importing the app opens no connections
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=_HEADERS,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = await self._get_client().get(path, params=params)
        except httpx.TimeoutException as e:
            logger.error("API Error: GET %s timed out after %.1fs", path, self.timeout)
            raise UpstreamError(path, detail="timeout") from e
        except httpx.HTTPError as e:
            logger.error("API Error: GET %s raised %s: %s", path, type(e).__name__, e)
            raise UpstreamError(path, detail=type(e).__name__) from e

        if not resp.is_success:
            logger.error("API Error: GET %s -> %s %s", path, resp.status_code, resp.text[:200])
            raise UpstreamError(path, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            logger.error("API Error: GET %s returned a non-JSON body", path)
            raise UpstreamError(path, status_code=resp.status_code, detail="invalid JSON") from e

    async def all_countries(self, fields: Optional[Iterable[str]] = None) -> Any:
        params = {"fields": ",".join(fields)} if fields else None
        return await self.get("/all", params=params)

    async def by_code(self, code: str) -> Any:
        return await self.get(f"/alpha/{code}")

    async def by_region(self, region: str) -> Any:
        return await self.get(f"/region/{region}")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["RestCountriesClient"]
