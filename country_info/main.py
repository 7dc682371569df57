# country_info/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from country_info import config
from country_info.errors import InputValidationError, field_error
from country_info.providers.restcountries_provider import RestCountriesClient
from country_info.routes.country import router as country_router
from country_info.services.country_service import CountryService
from country_info.utils.ttl_cache import ResponseCache

logger = logging.getLogger("country-info")
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
)


def _as_field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in exc.errors():
        loc = list(err.get("loc") or [])
        where = loc[0] if loc else "query"
        path = ".".join(str(p) for p in loc[1:]) or str(where)
        out.append(field_error(path, err.get("msg", "Invalid value."), err.get("input"), location=str(where)))
    return out


async def _input_validation_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"errors": exc.errors})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": _as_field_errors(exc)})


def create_app(
    client: Optional[RestCountriesClient] = None,
    cache: Optional[ResponseCache] = None,
) -> FastAPI:
    client = client or RestCountriesClient()
    cache = cache if cache is not None else ResponseCache()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("[init] upstream base URL: %s", getattr(client, "base_url", None))
        yield
        await client.aclose()

    app = FastAPI(
        title="Country Info API",
        description="Cached proxy over the REST Countries API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.country_service = CountryService(client, cache)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(InputValidationError, _input_validation_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(country_router)

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        # keep this super fast
        return {"status": "ok"}

    return app


app = create_app()
