# Role: Central configuration module. Loads .env into environment variables and computes runtime settings
# (DEBUG flag, source endpoints, timeouts, pacing). Importers read city_info.config.<NAME> at call time.

from __future__ import annotations

import os
from dotenv import load_dotenv

USER_AGENT = "CityInfoService/1.0"

DEBUG: bool = False
GEONAMES_USERNAME: str = "demo"
OSM_OVERPASS_API_URL: str = "https://overpass-api.de/api/interpreter"
HTTP_TIMEOUT_SECONDS: float = 15.0
OVERPASS_MIN_INTERVAL_SECONDS: float = 1.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_env() -> None:
    """
    Load .env into os.environ, then recompute every setting.
    This makes settings correct even if load_env() is called after import.
    """
    global DEBUG, GEONAMES_USERNAME, OSM_OVERPASS_API_URL, HTTP_TIMEOUT_SECONDS, OVERPASS_MIN_INTERVAL_SECONDS
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}

    GEONAMES_USERNAME = os.getenv("GEONAMES_USERNAME") or "demo"
    OSM_OVERPASS_API_URL = os.getenv("OSM_OVERPASS_API_URL") or "https://overpass-api.de/api/interpreter"
    HTTP_TIMEOUT_SECONDS = _float_env("HTTP_TIMEOUT_SECONDS", 15.0)

    # Key line: the shared Overpass instance asks for >= 1s between calls; never go below that.
    OVERPASS_MIN_INTERVAL_SECONDS = max(1.0, _float_env("OVERPASS_MIN_INTERVAL_SECONDS", 1.0))
