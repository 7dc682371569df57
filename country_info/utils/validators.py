# country_info/utils/validators.py
from __future__ import annotations

"""
Route guards, run as FastAPI dependencies before any handler touches the
cache or the upstream API. Each guard collects every failing field and raises
InputValidationError once, so the client gets the full list in one 400.
"""

from typing import Any, Dict, List, Optional
import re

from fastapi import Request

from country_info.errors import InputValidationError, field_error
from country_info.schemas.country_schema import SearchQuery

_CODE_RE = re.compile(r"[A-Za-z]{2,3}")

_TEXT_FILTERS = ("name", "capital", "region", "timezone")
_INT_PARAMS = ("page", "limit")


def is_country_code(value: Optional[str]) -> bool:
    return bool(value) and _CODE_RE.fullmatch(value) is not None


def validate_country_code(code: str) -> str:
    if not is_country_code(code):
        raise InputValidationError(
            [field_error("code", "Invalid country code format.", code, location="params")]
        )
    return code


def _positive_int(raw: str) -> Optional[int]:
    # one optional sign, no surrounding whitespace
    digits = raw[1:] if raw.startswith("+") else raw
    if not (digits.isascii() and digits.isdigit()):
        return None
    n = int(digits)
    return n if n >= 1 else None


def validate_search_query(request: Request) -> SearchQuery:
    params = request.query_params
    errors: List[Dict[str, Any]] = []
    values: Dict[str, Any] = {}

    for name in _TEXT_FILTERS:
        given = params.getlist(name)
        if not given:
            continue
        if len(given) > 1:
            errors.append(field_error(name, f"{name.capitalize()} must be a string.", given))
            continue
        values[name] = given[0]

    for name in _INT_PARAMS:
        given = params.getlist(name)
        if not given:
            continue
        n = _positive_int(given[0]) if len(given) == 1 else None
        if n is None:
            errors.append(
                field_error(name, f"{name.capitalize()} must be a positive integer.", given[0] if len(given) == 1 else given)
            )
            continue
        values[name] = n

    if errors:
        raise InputValidationError(errors)
    return SearchQuery(**values)


def validate_compare_query(request: Request) -> List[str]:
    given = request.query_params.getlist("codes")
    if not given:
        raise InputValidationError([field_error("codes", "Codes parameter is required.")])
    if len(given) > 1:
        raise InputValidationError([field_error("codes", "Codes parameter must be a string.", given)])

    raw = given[0]
    codes = raw.split(",")
    if len(codes) != 2:
        raise InputValidationError(
            [field_error("codes", "Please provide exactly two country codes separated by a comma.", raw)]
        )
    if not all(is_country_code(c) for c in codes):
        raise InputValidationError(
            [field_error("codes", "Each country code must be 2 or 3 alphabetic characters.", raw)]
        )
    return codes
