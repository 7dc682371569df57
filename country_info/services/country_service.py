# country_info/services/country_service.py
from __future__ import annotations

"""
Read-through query handlers behind /api/countries and /api/filters.

Every handler follows the same shape:
  1) build the cache key from the endpoint and its effective parameters
  2) cache hit  -> return the stored payload as-is
  3) cache miss -> fetch from REST Countries, reshape, store, return

Reshaping maps provider fields onto the normalized records in
country_info.schemas.country_schema and fills documented defaults
("Unknown", 0, []) for anything the provider leaves out.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
import asyncio
import logging
import math

from country_info.errors import CompareCountError, UpstreamError
from country_info.providers.restcountries_provider import RestCountriesClient
from country_info.schemas.country_schema import (
    CountryBrief,
    CountryComparison,
    CountryDetail,
    CountrySummary,
    CountryTime,
    Currency,
    Filters,
    SearchPage,
    SearchQuery,
)
from country_info.utils.country_codes import resolve_alpha3
from country_info.utils.time_converter import current_time
from country_info.utils.ttl_cache import Endpoint, ResponseCache, cache_key

logger = logging.getLogger("country-info")

# /all refuses unfiltered requests; ask only for what the list views need
SUMMARY_FIELDS = ("name", "flags", "region", "capital", "timezones", "cca3")
FILTER_FIELDS = ("region", "timezones")
NO_CAPITAL = "Unknown"


# -----------------------------------------------------------------------------
# Field extraction (tolerates both v3.1 and legacy v2 payloads)
# -----------------------------------------------------------------------------

def _name(raw: Mapping[str, Any]) -> str:
    name = raw.get("name")
    if isinstance(name, Mapping):
        name = name.get("common")
    return name if isinstance(name, str) and name else "Unknown"


def _flag(raw: Mapping[str, Any]) -> str:
    flags = raw.get("flags")
    if isinstance(flags, Mapping):
        png = flags.get("png")
        return png if isinstance(png, str) else ""
    flag = raw.get("flag")
    return flag if isinstance(flag, str) and flag.startswith("http") else ""


def _text(raw: Mapping[str, Any], key: str, default: str = "Unknown") -> str:
    v = raw.get(key)
    return v if isinstance(v, str) and v else default


def _capital(raw: Mapping[str, Any]) -> str:
    cap = raw.get("capital")
    if isinstance(cap, list):
        cap = cap[0] if cap else None
    return cap if isinstance(cap, str) and cap else NO_CAPITAL


def _non_negative(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0
    return v if v >= 0 else 0


def _strings(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [s for s in v if isinstance(s, str)]


def _currencies(raw: Mapping[str, Any]) -> List[Currency]:
    cur = raw.get("currencies")
    if isinstance(cur, Mapping):
        items: Iterable[Any] = cur.values()
    elif isinstance(cur, list):
        items = cur
    else:
        return []
    return [
        Currency(name=c.get("name"), symbol=c.get("symbol"))
        for c in items
        if isinstance(c, Mapping)
    ]


def _languages(raw: Mapping[str, Any]) -> str:
    langs = raw.get("languages")
    if isinstance(langs, Mapping):
        names = [str(v) for v in langs.values()]
    elif isinstance(langs, list):
        names = [str(lang["name"]) for lang in langs if isinstance(lang, Mapping) and lang.get("name")]
    else:
        names = []
    return ", ".join(names) if names else "Unknown"


# -----------------------------------------------------------------------------
# Reshapers
# -----------------------------------------------------------------------------

def to_brief(raw: Mapping[str, Any]) -> CountryBrief:
    return CountryBrief(name=_name(raw), flag=_flag(raw), region=_text(raw, "region"))


def to_summary(raw: Mapping[str, Any]) -> CountrySummary:
    return CountrySummary(
        name=_name(raw),
        flag=_flag(raw),
        region=_text(raw, "region"),
        timezone=_strings(raw.get("timezones")),
        capital=_capital(raw),
        alpha3Code=resolve_alpha3(raw),
    )


def _detail_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": _name(raw),
        "flag": _flag(raw),
        "region": _text(raw, "region"),
        "subregion": _text(raw, "subregion"),
        "population": int(_non_negative(raw.get("population"))),
        "capital": _capital(raw),
        "currencies": _currencies(raw),
        "languages": _languages(raw),
        "timezone": _strings(raw.get("timezones")),
        "topLevelDomain": _strings(raw.get("tld") or raw.get("topLevelDomain")),
    }


def to_detail(raw: Mapping[str, Any]) -> CountryDetail:
    return CountryDetail(**_detail_fields(raw))


def to_comparison(raw: Mapping[str, Any]) -> CountryComparison:
    return CountryComparison(**_detail_fields(raw), area=_non_negative(raw.get("area")))


def _single(data: Any) -> Mapping[str, Any]:
    # /alpha/{code} answers with a one-element list for most codes
    if isinstance(data, list):
        data = data[0] if data else {}
    return data if isinstance(data, Mapping) else {}


def _records(data: Any, path: str) -> List[Mapping[str, Any]]:
    if not isinstance(data, list):
        raise UpstreamError(path, detail=f"expected a list, got {type(data).__name__}")
    return [r for r in data if isinstance(r, Mapping)]


def _dedupe(values: Iterable[Any]) -> List[str]:
    seen: Dict[str, None] = {}
    for v in values:
        if isinstance(v, str) and v and v not in seen:
            seen[v] = None
    return list(seen)


# -----------------------------------------------------------------------------
# Search filters
# -----------------------------------------------------------------------------

def matches(country: CountrySummary, query: SearchQuery) -> bool:
    if query.name and query.name.lower() not in country.name.lower():
        return False
    if query.capital:
        # a filled-in default is not a capital and never matches
        if country.capital == NO_CAPITAL or country.capital.lower() != query.capital.lower():
            return False
    if query.region and country.region.lower() != query.region.lower():
        return False
    if query.timezone:
        # "+" in a query string decodes to a space: UTC+01:00 arrives as "UTC 01:00"
        wanted = query.timezone.replace(" ", "+")
        if wanted not in country.timezone:
            return False
    return True


def paginate(items: Sequence[CountrySummary], page: int, limit: int) -> SearchPage:
    start = (page - 1) * limit
    return SearchPage(
        currentPage=page,
        totalPages=math.ceil(len(items) / limit),
        results=list(items[start:start + limit]),
    )


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------

class CountryService:
    def __init__(self, client: RestCountriesClient, cache: ResponseCache) -> None:
        self.client = client
        self.cache = cache

    def _cached(self, key: Any) -> Optional[Any]:
        if self.cache.has(key):
            logger.debug("cache hit: %s", key)
            return self.cache.get(key)
        logger.debug("cache miss: %s", key)
        return None

    async def list_all(self) -> List[Dict[str, Any]]:
        key = cache_key(Endpoint.ALL)
        hit = self._cached(key)
        if hit is not None:
            return hit

        data = await self.client.all_countries(SUMMARY_FIELDS)
        countries = [to_summary(r).model_dump() for r in _records(data, "/all")]
        self.cache.set(key, countries)
        return countries

    async def get_by_code(self, code: str) -> Dict[str, Any]:
        code = code.upper()
        key = cache_key(Endpoint.COUNTRY, code=code)
        hit = self._cached(key)
        if hit is not None:
            return hit

        data = await self.client.by_code(code)
        country = to_detail(_single(data)).model_dump()
        self.cache.set(key, country)
        return country

    async def list_by_region(self, region: str) -> List[Dict[str, Any]]:
        key = cache_key(Endpoint.REGION, region=region.lower())
        hit = self._cached(key)
        if hit is not None:
            return hit

        path = f"/region/{region}"
        data = await self.client.by_region(region)
        countries = [to_brief(r).model_dump() for r in _records(data, path)]
        self.cache.set(key, countries)
        return countries

    async def search(self, query: SearchQuery) -> Dict[str, Any]:
        key = cache_key(Endpoint.SEARCH, **query.model_dump())
        hit = self._cached(key)
        if hit is not None:
            return hit

        # always the full list, never the ALL entry: filters need every field fresh
        data = await self.client.all_countries(SUMMARY_FIELDS)
        countries = [to_summary(r) for r in _records(data, "/all")]
        filtered = [c for c in countries if matches(c, query)]
        page = paginate(filtered, query.page, query.limit).model_dump()
        self.cache.set(key, page)
        return page

    async def compare(self, codes: Sequence[str]) -> List[Dict[str, Any]]:
        if len(codes) != 2:
            raise CompareCountError("Please provide exactly two country codes separated by a comma.")
        codes = [c.upper() for c in codes]
        key = cache_key(Endpoint.COMPARE, codes=",".join(codes))
        hit = self._cached(key)
        if hit is not None:
            return hit

        responses = await asyncio.gather(*(self.client.by_code(c) for c in codes))
        countries = [to_comparison(_single(r)).model_dump() for r in responses]
        self.cache.set(key, countries)
        return countries

    async def filters(self) -> Dict[str, List[str]]:
        key = cache_key(Endpoint.FILTERS)
        hit = self._cached(key)
        if hit is not None:
            return hit

        raw = _records(await self.client.all_countries(FILTER_FIELDS), "/all")
        regions = _dedupe(r.get("region") for r in raw)
        timezones = _dedupe(tz for r in raw for tz in _strings(r.get("timezones")))
        out = Filters(regions=regions, timezones=timezones).model_dump()
        self.cache.set(key, out)
        return out

    async def local_time(self, code: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        country = await self.get_by_code(code)
        return CountryTime(
            name=country["name"],
            timezone=country["timezone"],
            currentTime=current_time(country["timezone"], now=now),
        ).model_dump()
