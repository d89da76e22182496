# Role: Built-in geographic facts for a few well-known cities. Substituted by the GeoNames adapter when the live
# registry is unreachable or returns nothing; keyed by lowercased city name (exact match only).

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

FALLBACK_CITIES: Mapping[str, Mapping[str, Any]] = MappingProxyType(
    {
        "tokyo": MappingProxyType(
            {
                "name": "Tokyo",
                "lat": 35.6762,
                "lon": 139.6503,
                "country": "Japan",
                "country_code": "JP",
                "population": 14000000,
                "timezone": "Asia/Tokyo",
                "admin_division": "Tokyo Metropolis",
            }
        ),
        "london": MappingProxyType(
            {
                "name": "London",
                "lat": 51.5074,
                "lon": -0.1278,
                "country": "United Kingdom",
                "country_code": "GB",
                "population": 9000000,
                "timezone": "Europe/London",
                "admin_division": "Greater London",
            }
        ),
        "paris": MappingProxyType(
            {
                "name": "Paris",
                "lat": 48.8566,
                "lon": 2.3522,
                "country": "France",
                "country_code": "FR",
                "population": 2200000,
                "timezone": "Europe/Paris",
                "admin_division": "Île-de-France",
            }
        ),
        "new york": MappingProxyType(
            {
                "name": "New York",
                "lat": 40.7128,
                "lon": -74.0060,
                "country": "United States",
                "country_code": "US",
                "population": 8400000,
                "timezone": "America/New_York",
                "admin_division": "New York",
            }
        ),
        "beirut": MappingProxyType(
            {
                "name": "Beirut",
                "lat": 33.8938,
                "lon": 35.5018,
                "country": "Lebanon",
                "country_code": "LB",
                "population": 2200000,
                "timezone": "Asia/Beirut",
                "admin_division": "Beirut Governorate",
            }
        ),
    }
)


def fallback_city(city_name: str) -> Optional[Mapping[str, Any]]:
    return FALLBACK_CITIES.get((city_name or "").strip().lower())
