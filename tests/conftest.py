from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from country_info.errors import UpstreamError
from country_info.main import create_app
from country_info.utils.ttl_cache import ResponseCache

GERMANY = {
    "name": {"common": "Germany", "official": "Federal Republic of Germany"},
    "flags": {"png": "https://flagcdn.com/w320/de.png"},
    "region": "Europe",
    "subregion": "Western Europe",
    "population": 83240525,
    "capital": ["Berlin"],
    "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
    "languages": {"deu": "German"},
    "timezones": ["UTC+01:00"],
    "tld": [".de"],
    "cca2": "DE",
    "cca3": "DEU",
    "area": 357114.0,
}

FRANCE = {
    "name": {"common": "France"},
    "flags": {"png": "https://flagcdn.com/w320/fr.png"},
    "region": "Europe",
    "subregion": "Western Europe",
    "population": 67391582,
    "capital": ["Paris"],
    "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
    "languages": {"fra": "French"},
    "timezones": ["UTC-10:00", "UTC+01:00"],
    "tld": [".fr"],
    "cca2": "FR",
    "cca3": "FRA",
    "area": 551695.0,
}

JAPAN = {
    "name": {"common": "Japan"},
    "flags": {"png": "https://flagcdn.com/w320/jp.png"},
    "region": "Asia",
    "subregion": "Eastern Asia",
    "population": 125836021,
    "capital": ["Tokyo"],
    "currencies": {"JPY": {"name": "Japanese yen", "symbol": "¥"}},
    "languages": {"jpn": "Japanese"},
    "timezones": ["UTC+09:00"],
    "tld": [".jp"],
    "cca2": "JP",
    "cca3": "JPN",
    "area": 377930.0,
}

# Antarctica-like record: most optional fields missing
BARE = {
    "name": {"common": "Bouvet Island"},
    "flags": {"png": "https://flagcdn.com/w320/bv.png"},
    "region": "Antarctic",
    "cca2": "BV",
}


class FakeRestCountries:
    """Stands in for RestCountriesClient; records every upstream call."""

    base_url = "https://restcountries.test/v3.1"

    def __init__(self, countries: Optional[List[Dict[str, Any]]] = None) -> None:
        self.countries = list(countries if countries is not None else [GERMANY, FRANCE, JAPAN])
        self.calls: Counter = Counter()
        self.fail = False
        self.closed = False

    def _check(self, path: str) -> None:
        self.calls[path] += 1
        if self.fail:
            raise UpstreamError(path, status_code=503)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def all_countries(self, fields=None) -> Any:
        self._check("/all")
        return list(self.countries)

    async def by_code(self, code: str) -> Any:
        path = f"/alpha/{code}"
        self._check(path)
        for c in self.countries:
            if code.upper() in (c.get("cca2"), c.get("cca3")):
                return [c]
        raise UpstreamError(path, status_code=404)

    async def by_region(self, region: str) -> Any:
        path = f"/region/{region}"
        self._check(path)
        hits = [c for c in self.countries if str(c.get("region", "")).lower() == region.lower()]
        if not hits:
            raise UpstreamError(path, status_code=404)
        return hits

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def upstream() -> FakeRestCountries:
    return FakeRestCountries()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(ttl=3600, clock=clock)


@pytest.fixture
def client(upstream: FakeRestCountries, cache: ResponseCache) -> TestClient:
    return TestClient(create_app(client=upstream, cache=cache))
