# country_info/routes/country.py: /api/countries + /api/filters
from __future__ import annotations

from typing import Any, List
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from country_info.errors import CompareCountError
from country_info.schemas.country_schema import SearchQuery
from country_info.services.country_service import CountryService
from country_info.utils.validators import (
    validate_compare_query,
    validate_country_code,
    validate_search_query,
)

logger = logging.getLogger("country-info")

router = APIRouter(prefix="/api", tags=["country"])


def get_service(request: Request) -> CountryService:
    return request.app.state.country_service


def _server_error(message: str) -> JSONResponse:
    # details stay in the log; the client only gets the generic message
    logger.exception(message)
    return JSONResponse(status_code=500, content={"message": message})


# Literal paths first: /search and /compare must not be captured by /{code}.

@router.get("/countries", summary="List all countries")
async def get_all_countries(service: CountryService = Depends(get_service)) -> Any:
    try:
        return await service.list_all()
    except Exception:
        return _server_error("Error fetching countries.")


@router.get("/countries/search", summary="Search countries")
async def search_countries(
    query: SearchQuery = Depends(validate_search_query),
    service: CountryService = Depends(get_service),
) -> Any:
    try:
        return await service.search(query)
    except Exception:
        return _server_error("Error searching countries.")


@router.get("/countries/compare", summary="Compare two countries")
async def compare_countries(
    codes: List[str] = Depends(validate_compare_query),
    service: CountryService = Depends(get_service),
) -> Any:
    try:
        return await service.compare(codes)
    except CompareCountError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})
    except Exception:
        return _server_error("Error comparing countries.")


@router.get("/countries/region/{region}", summary="List countries in a region")
async def get_countries_by_region(region: str, service: CountryService = Depends(get_service)) -> Any:
    try:
        return await service.list_by_region(region)
    except Exception:
        return _server_error("Error fetching countries by region.")


@router.get("/countries/{code}", summary="Country details")
async def get_country_by_code(
    code: str = Depends(validate_country_code),
    service: CountryService = Depends(get_service),
) -> Any:
    try:
        return await service.get_by_code(code)
    except Exception:
        return _server_error("Error fetching country details.")


@router.get("/countries/{code}/time", summary="Current local time in a country")
async def get_country_time(
    code: str = Depends(validate_country_code),
    service: CountryService = Depends(get_service),
) -> Any:
    try:
        return await service.local_time(code)
    except Exception:
        return _server_error("Error fetching country time.")


@router.get("/filters", summary="Distinct regions and timezones")
async def get_filters(service: CountryService = Depends(get_service)) -> Any:
    try:
        return await service.filters()
    except Exception:
        return _server_error("Error fetching filters.")
