# country_info/config.py
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# -------------------------------------------------------------------
# CONFIG
# -------------------------------------------------------------------
REST_COUNTRIES_API = os.getenv("REST_COUNTRIES_API", "https://restcountries.com/v3.1").rstrip("/")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "10.0"))

CACHE_TTL = float(os.getenv("CACHE_TTL", "3600"))  # 1 hour

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]
