# country_info/utils/country_codes.py
from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Optional

import pycountry


@lru_cache(maxsize=512)
def alpha3_from_alpha2(iso_alpha_2: str) -> Optional[str]:
    """ISO alpha-2 -> alpha-3 via pycountry. Returns None when unknown."""
    if not iso_alpha_2 or len(iso_alpha_2) != 2 or not iso_alpha_2.isalpha():
        return None
    match = pycountry.countries.get(alpha_2=iso_alpha_2.upper())
    return getattr(match, "alpha_3", None)


def resolve_alpha3(raw: Mapping[str, Any]) -> str:
    """
    Pick the alpha-3 code of a raw REST Countries record.
    v3.1 ships it as `cca3`, v2 as `alpha3Code`; older mirrors only carry
    `cca2`, in which case we look it up. Never raises; "" on failure.
    """
    for field in ("cca3", "alpha3Code"):
        code = raw.get(field)
        if isinstance(code, str) and code:
            return code
    cca2 = raw.get("cca2") or raw.get("alpha2Code")
    if isinstance(cca2, str):
        return alpha3_from_alpha2(cca2) or ""
    return ""
