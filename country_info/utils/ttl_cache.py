# country_info/utils/ttl_cache.py
from __future__ import annotations

"""
In-process response cache for the country endpoints.

Entries expire lazily: nothing is swept in the background, an entry past its
TTL is dropped the next time somebody looks it up. There is no size bound;
the working set is a handful of endpoints times the distinct queries seen
within one TTL window.

Keys are built with cache_key(), which sorts parameters by name so that
  ?region=europe&name=ger  and  ?name=ger&region=europe
share one entry.
"""

from enum import Enum
from typing import Any, Callable, Dict, Hashable, Optional, Tuple
import logging
import time

from country_info.config import CACHE_TTL

logger = logging.getLogger("country-info.cache")


class Endpoint(str, Enum):
    ALL = "all"
    COUNTRY = "country"
    REGION = "region"
    SEARCH = "search"
    COMPARE = "compare"
    FILTERS = "filters"


CacheKey = Tuple[str, Tuple[Tuple[str, Any], ...]]


def cache_key(endpoint: Endpoint, **params: Any) -> CacheKey:
    items = tuple(sorted((k, v) for k, v in params.items() if v is not None))
    return (endpoint.value, items)


class ResponseCache:
    def __init__(self, ttl: float = CACHE_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._store: Dict[Hashable, Tuple[float, Any]] = {}

    def _live(self, key: Hashable) -> Optional[Tuple[float, Any]]:
        hit = self._store.get(key)
        if hit is None:
            return None
        expires_at, _ = hit
        if expires_at <= self._clock():
            self._store.pop(key, None)
            logger.debug("cache expired: %s", key)
            return None
        return hit

    def has(self, key: Hashable) -> bool:
        return self._live(key) is not None

    def get(self, key: Hashable) -> Optional[Any]:
        hit = self._live(key)
        if hit is None:
            return None
        return hit[1]

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        self._store[key] = (self._clock() + ttl, value)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
