# country_info/schemas/country_schema.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Currency(BaseModel):
    name: Optional[str] = None
    symbol: Optional[str] = None


class CountryBrief(BaseModel):
    name: str = "Unknown"
    flag: str = ""
    region: str = "Unknown"


class CountrySummary(CountryBrief):
    timezone: List[str] = Field(default_factory=list)
    capital: str = "Unknown"
    alpha3Code: str = ""


class CountryDetail(CountryBrief):
    subregion: str = "Unknown"
    population: int = Field(default=0, ge=0)
    capital: str = "Unknown"
    currencies: List[Currency] = Field(default_factory=list)
    languages: str = "Unknown"
    timezone: List[str] = Field(default_factory=list)
    topLevelDomain: List[str] = Field(default_factory=list)


class CountryComparison(CountryDetail):
    area: float = Field(default=0, ge=0)


class SearchQuery(BaseModel):
    name: Optional[str] = None
    capital: Optional[str] = None
    region: Optional[str] = None
    timezone: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)


class SearchPage(BaseModel):
    currentPage: int
    totalPages: int
    results: List[CountrySummary]


class Filters(BaseModel):
    regions: List[str]
    timezones: List[str]


class CountryTime(BaseModel):
    name: str
    timezone: List[str]
    currentTime: str
